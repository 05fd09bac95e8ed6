# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell the identification service how to reach its database,
# which plant identification services it may call, and how it should behave.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - All modules requiring configuration
# - Infrastructure components

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Database connection configuration
- Plant identification provider credentials and timeouts
- Upload limits and image preprocessing bounds
"""

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
