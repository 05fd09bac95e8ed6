# 📄 File: app/modules/plant_identification/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes everything needed to recognise a plant from a photo and keep each user's identification history.
# 🧪 Purpose (Technical Summary):
# Package initialization for the plant identification module, laid out in domain / application /
# infrastructure / presentation layers.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy, aiohttp, Pillow, app.shared
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main

"""
Plant Identification Module

Handles:
- Photo upload validation and preprocessing
- Identification through Plant.id with PlantNet as fallback
- Normalization of both providers' answers into one result shape
- Per-user identification history (list, delete)

Architecture follows Domain-Driven Design:
- Domain: orchestrator, normalizer, models, repository contract
- Application: commands, queries and their handlers
- Infrastructure: provider HTTP clients, SQLAlchemy repository
- Presentation: API endpoints, schemas and dependencies
"""

__version__ = "1.0.0"
