# 📄 File: app/shared/infrastructure/storage/__init__.py

# 🧭 Purpose (Layman Explanation):
# The place where uploaded plant photos are checked, shrunk and saved.

# 🧪 Purpose (Technical Summary):
# Exposes the FileManager used for upload validation, image preprocessing and local storage.

# 🔗 Dependencies:
# - file_manager: Pillow-based upload handling

# 🔄 Connected Modules / Calls From:
# Used by: Plant identification presentation dependencies and command handler

from .file_manager import FileManager, get_file_manager

__all__ = ["FileManager", "get_file_manager"]
