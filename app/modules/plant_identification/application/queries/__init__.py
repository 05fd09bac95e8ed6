"""Plant identification read queries."""

from .get_identification_history import MAX_HISTORY_LIMIT, GetIdentificationHistoryQuery

__all__ = ["MAX_HISTORY_LIMIT", "GetIdentificationHistoryQuery"]
