"""
Plant Identification Commands

Write operations for the identification module:
- IdentifyPlantCommand: identify one uploaded image (records history)
- DeleteIdentificationCommand: remove one of the caller's history entries
"""

from .delete_identification import DeleteIdentificationCommand
from .identify_plant import IdentifyPlantCommand, parse_organs

__all__ = [
    "DeleteIdentificationCommand",
    "IdentifyPlantCommand",
    "parse_organs",
]
