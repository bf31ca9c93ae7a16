from .base import Base
from .postal_zone import PostalZone

__all__ = ["Base", "PostalZone"]
