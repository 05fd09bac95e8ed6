# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a Python package containing common tools
# that every part of the nursery service can use, like database connections and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package initialization for common utilities, infrastructure,
# and cross-cutting concerns used throughout the application modules.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - All application modules importing shared utilities
# - Configuration and infrastructure components

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management
- Database infrastructure
- Security and authentication utilities
- External API client
- Image storage
- Logging utilities
"""

__all__ = []
