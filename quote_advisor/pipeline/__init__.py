"""
Quote recommendation workflow components.
"""

from .models import (
    Discount,
    Provider,
    Quote,
    Representative,
    QuoteScore,
    QuoteRecommendation,
    QuoteInterest,
    RepresentativeAssignment,
)

__all__ = [
    "Discount",
    "Provider",
    "Quote",
    "Representative",
    "QuoteScore",
    "QuoteRecommendation",
    "QuoteInterest",
    "RepresentativeAssignment",
]
