"""
Workflow steps for the quote recommendation process.
Each step is a self-contained module that performs a specific task.
"""

from .quote_generation import QuoteGenerationStep
from .request_normalization import RequestNormalizationStep
from .quote_comparison import QuoteComparisonStep
from .recommendation import RecommendationStep
from .representative_assignment import RepresentativeDirectory
from .interest_recording import InterestRecorder

__all__ = [
    "QuoteGenerationStep",
    "RequestNormalizationStep",
    "QuoteComparisonStep",
    "RecommendationStep",
    "RepresentativeDirectory",
    "InterestRecorder",
]
