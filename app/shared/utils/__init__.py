# 📄 File: app/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# Helpful tools that other parts of the nursery service share, mainly the logging setup.

# 🧪 Purpose (Technical Summary):
# Initializes the utilities package and re-exports the structured logging entry points.

# 🔗 Dependencies:
# - logging: Structured logging utilities

# 🔄 Connected Modules / Calls From:
# Used by: All application modules for logging

from .logging import get_logger, log_context, setup_logging

__all__ = [
    'get_logger',
    'log_context',
    'setup_logging',
]
