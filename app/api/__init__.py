# 📄 File: app/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# Marks the api folder as a package: versioned routes and the request helpers that wrap them.
# 🧪 Purpose (Technical Summary):
# Package initialization for the API layer.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# app.main.py

"""
Structure:
    api/
    ├── __init__.py          # This file
    ├── middleware/          # Request logging, error envelopes
    │   ├── logging.py
    │   └── error_handling.py
    └── v1/                  # API version 1
        ├── router.py
        └── health.py
"""
