"""
Tracker: inventory and sales tracking service.

Provides an in-memory inventory/sales state manager and a FastAPI application
persisting the same data through SQLAlchemy.
"""
__version__ = "0.1.0"
