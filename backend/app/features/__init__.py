"""
Feature modules for the RUNN.IO coaching API.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models
- schemas.py - Pydantic schemas
- service.py - Business logic
- repository.py - Data access (optional)
"""
