"""Version 1 identification endpoints."""

from .identifications import identification_router

__all__ = ["identification_router"]
