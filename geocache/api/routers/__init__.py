"""Router modules exposed for convenient imports."""

from . import geo, healthz, readyz

__all__ = ["geo", "healthz", "readyz"]
