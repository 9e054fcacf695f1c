"""
API route modules.
"""

from sentinel.api.routes.risk import router as risk_router

__all__ = [
    "risk_router",
]
