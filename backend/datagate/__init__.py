"""
datagate

Generic repository and JSON envelope layer on top of FastAPI and SQLAlchemy.
"""

__version__ = "0.1.0"
