"""Command and query handlers for plant identification."""

from .command_handlers import DeleteIdentificationCommandHandler, IdentifyPlantCommandHandler
from .query_handlers import GetIdentificationHistoryQueryHandler

__all__ = [
    "DeleteIdentificationCommandHandler",
    "GetIdentificationHistoryQueryHandler",
    "IdentifyPlantCommandHandler",
]
