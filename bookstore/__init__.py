"""
Bookstore Catalog Application Package

This is the main application package for the Bookstore Catalog API.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: Store handle (SQLAlchemy engine + sessions) with explicit lifecycle
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic record and response schemas
- routers/: API route handlers
- services/: Validation, outcomes and the catalog repository
"""

__version__ = "1.0.0"
