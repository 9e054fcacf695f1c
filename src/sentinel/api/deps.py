"""
FastAPI dependencies for the API.

Provides:
- The shared risk pipeline built at startup
"""

import logging

from fastapi import Request

from sentinel.risk import RiskPipeline

logger = logging.getLogger(__name__)


def get_pipeline(request: Request) -> RiskPipeline:
    """
    Get the risk pipeline from application state.

    The pipeline is built once during app startup and shared
    read-only between requests.
    """
    return request.app.state.pipeline
