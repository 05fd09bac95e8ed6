"""Database persistence for identification records."""

from .identification_repository_impl import SQLAlchemyIdentificationRepository
from .models import PlantIdentificationModel

__all__ = ["PlantIdentificationModel", "SQLAlchemyIdentificationRepository"]
