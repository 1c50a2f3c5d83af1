"""
Pydantic schemas for API request/response validation.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

from quote_advisor.pipeline.models import (
    Quote,
    QuoteComparison,
    QuoteFilters,
    QuoteInterest,
    QuoteRecommendation,
    QuoteStatus,
    Representative,
    RepresentativeAssignment,
    UserChoice,
)


class GenerateQuotesRequest(BaseModel):
    """Request body for generating quotes."""
    insurance_type: str = Field(..., min_length=1, examples=["auto"])
    user_id: Optional[str] = Field(default=None)
    form_data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Intake form answers, stored on each quote as metadata",
        examples=[{"needsAnalysis": {"budgetPreferences": {"maxMonthlyPremium": 1000}}}],
    )


class QuoteListResponse(BaseModel):
    success: bool = True
    data: List[Quote] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class QuoteResponse(BaseModel):
    success: bool = True
    data: Quote
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class UserQuotesResponse(BaseModel):
    success: bool = True
    quotes: List[Quote] = Field(default_factory=list)
    pagination: Pagination
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class CompareQuotesRequest(BaseModel):
    quote_ids: List[str] = Field(..., min_length=1)
    filters: Optional[QuoteFilters] = Field(
        default=None,
        description="Narrow and order the quotes before they are compared",
    )


class CompareQuotesResponse(BaseModel):
    success: bool = True
    data: QuoteComparison
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class RecommendationRequest(BaseModel):
    """Quotes to choose from, given inline or by id."""
    quotes: List[Quote] = Field(default_factory=list)
    quote_ids: List[str] = Field(default_factory=list)
    form_data: Dict[str, Any] = Field(default_factory=dict)


class RecommendationResponse(BaseModel):
    success: bool = True
    data: Optional[QuoteRecommendation] = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class AssignRepresentativeRequest(BaseModel):
    insurance_type: Optional[str] = Field(default=None, examples=["mining-rehabilitation"])


class RepresentativeResponse(BaseModel):
    success: bool = True
    data: Representative
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class QuoteInterestRequest(BaseModel):
    """User decision after seeing the recommendation."""
    user_id: Optional[str] = Field(default=None, description="Generated when not provided")
    interested_quote: Quote
    recommended_quote: Quote
    user_choice: UserChoice
    form_data: Dict[str, Any] = Field(default_factory=dict)


class QuoteInterestResponse(BaseModel):
    success: bool = True
    interest: QuoteInterest
    representative: Representative
    assignment: RepresentativeAssignment
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class PurchaseNotificationRequest(BaseModel):
    quote: Quote
    applicant: Dict[str, Any]
    insurance_info: Dict[str, Any] = Field(default_factory=dict)


class PurchaseNotificationResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(default="healthy")
    version: str
    quotes_stored: int
    notifications_configured: bool
    timestamp: datetime = Field(default_factory=datetime.utcnow)

