"""
API v1 routers.
"""

from openklaw.api.v1 import health, models, reports

__all__ = ["health", "models", "reports"]
