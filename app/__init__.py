# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'app' folder holds the nursery plant identification service and records
# its version.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version and package metadata.
#
# 🔗 Dependencies:
# - None
#
# 🔄 Connected Modules / Calls From:
# - main.py (application entry point)
# - Packaging (pyproject.toml)

"""
Nursery Identification API

Backend service that identifies plants from photos through Plant.id with
PlantNet as fallback, and keeps a per-user identification history.
"""

__version__ = "1.0.0"
__title__ = "Nursery Identification API"

__all__ = [
    "__version__",
    "__title__",
]
