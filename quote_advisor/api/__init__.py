"""
API layer for the quote recommendation service.
"""

from .routes import router
from .schemas import GenerateQuotesRequest, QuoteListResponse, HealthResponse

__all__ = [
    "router",
    "GenerateQuotesRequest",
    "QuoteListResponse",
    "HealthResponse",
]
