"""
Database Layer
Document persistence shared by every service.
"""

from .sqlite import DocumentStore, get_storage, new_object_id, utc_now

__all__ = ["DocumentStore", "get_storage", "new_object_id", "utc_now"]
