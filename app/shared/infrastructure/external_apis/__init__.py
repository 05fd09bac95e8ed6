# 📄 File: app/shared/infrastructure/external_apis/__init__.py

# 🧭 Purpose (Layman Explanation):
# The foundation for talking to outside services such as the plant identification APIs.

# 🧪 Purpose (Technical Summary):
# Exposes the generic async HTTP client used by every third-party integration.

# 🔗 Dependencies:
# - api_client: Generic HTTP client with timeout and error mapping

# 🔄 Connected Modules / Calls From:
# Used by: Plant.id and PlantNet provider clients

from .api_client import APIClient, create_api_client

__all__ = ["APIClient", "create_api_client"]
