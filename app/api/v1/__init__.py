# 📄 File: app/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes version 1 of the API so a later version can be added without breaking existing apps.
# 🧪 Purpose (Technical Summary):
# Package initialization for API version 1: version metadata, route prefixes and OpenAPI tags.
# 🔗 Dependencies:
# None
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main.py

"""
Nursery Identification API Version 1

Structure:
    v1/
    ├── __init__.py          # This file
    ├── router.py            # Main v1 router aggregation
    └── health.py            # Health check endpoints

Module routers live with their modules, e.g.
app.modules.plant_identification.presentation.api.v1.
"""

# API v1 metadata
__version__ = "1.0.0"
__api_version__ = "v1"

# API v1 route prefixes
ROUTE_PREFIXES = {
    "plant_identification": "/identifications",
}

# OpenAPI tags
API_TAGS = {
    "plant_identification": "Plant Identification",
}
