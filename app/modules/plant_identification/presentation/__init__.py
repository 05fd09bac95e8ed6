"""Presentation layer (FastAPI routes, schemas and dependencies) for plant identification."""
