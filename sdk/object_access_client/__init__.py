from .client import ObjectAccessClient, ObjectAccessError

__all__ = ["ObjectAccessClient", "ObjectAccessError"]
