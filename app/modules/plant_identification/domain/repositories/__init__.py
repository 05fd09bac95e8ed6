from .identification_repository import IdentificationRepository

__all__ = ["IdentificationRepository"]
