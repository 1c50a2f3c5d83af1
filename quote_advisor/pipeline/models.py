"""
Pydantic models for the quote recommendation workflow.
These models define the records passed between workflow steps.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any, Literal, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


QuoteStatus = Literal["pending", "approved", "rejected", "expired", "purchased"]
RecommendationStatus = Literal["recommended", "not-recommended", "same-as-recommendation"]
AssignmentStatus = Literal["assigned", "in-progress", "completed", "cancelled"]
UserChoice = Literal["proceed", "change"]

# Insurance lines offered on the site. Quote generation accepts any string and
# falls back to default tables for lines it has no rates for.
INSURANCE_TYPES: Tuple[str, ...] = (
    "auto",
    "home",
    "life",
    "health",
    "business",
    "buildings-insurance",
    "household-contents",
    "public-liability",
    "small-business",
    "commercial-property",
    "transport-insurance",
    "body-corporates",
    "engineering-construction",
    "aviation-marine",
    "mining-rehabilitation",
    "e-hailing",
)


class Discount(BaseModel):
    """Discount or benefit attached to a quote."""
    model_config = ConfigDict(frozen=True)

    type: str = Field(description="Discount kind, e.g. multi-policy, no-claims")
    description: str
    amount: float = Field(description="Discount amount or percentage")
    is_percentage: bool = Field(default=True)


class Provider(BaseModel):
    """Insurance provider offering quotes."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    rating: float = Field(ge=1, le=5)
    multiplier: float = Field(default=1.0, description="Provider pricing multiplier")
    supported_types: Tuple[str, ...] = Field(default_factory=tuple)
    website: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    license_number: Optional[str] = Field(default=None)
    features: Tuple[str, ...] = Field(default_factory=tuple)
    headquarters: Optional[str] = Field(default=None)


class Quote(BaseModel):
    """Priced insurance offer from one provider for one insurance line."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    type: str = Field(description="Insurance line being quoted")
    provider: str = Field(description="Provider display name")
    provider_id: Optional[str] = Field(default=None)
    premium: float = Field(description="Monthly premium")
    annual_premium: float
    coverage: str = Field(description="Coverage amount description")
    deductible: Optional[float] = Field(default=None)
    status: QuoteStatus = Field(default="pending")
    valid_until: datetime
    created_at: datetime
    updated_at: datetime
    features: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    discounts: List[Discount] = Field(default_factory=list)
    risk_score: int = Field(ge=1, le=10, description="Risk assessment, lower is better")
    provider_rating: float = Field(ge=1, le=5)
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Originating form answers")

    @model_validator(mode="after")
    def _check_validity_window(self) -> "Quote":
        if self.valid_until <= self.created_at:
            raise ValueError("valid_until must be later than created_at")
        return self


class Representative(BaseModel):
    """Human advisor who can be assigned to a quote request."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    surname: str
    email: str
    specializations: Tuple[str, ...] = Field(default_factory=tuple)
    rating: float = Field(ge=1, le=5)
    active_clients: int = Field(default=0)
    is_available: bool = Field(default=True)

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"


class QuoteScore(BaseModel):
    """Scoring breakdown for a single quote."""
    model_config = ConfigDict(frozen=True)

    quote: Quote
    provider_score: float = Field(description="0-25")
    affordability_score: float = Field(description="0-25")
    risk_score: float = Field(description="0-20")
    feature_score: float = Field(description="0-20")
    discount_score: float = Field(description="0-10")
    reasons: List[str] = Field(default_factory=list)

    @property
    def total(self) -> float:
        return (
            self.provider_score
            + self.affordability_score
            + self.risk_score
            + self.feature_score
            + self.discount_score
        )


class QuoteRecommendation(BaseModel):
    """Top-ranked quote with justification and alternatives."""
    model_config = ConfigDict(frozen=True)

    recommended_quote: Quote
    reasons: List[str] = Field(default_factory=list)
    score: int = Field(ge=0, le=100, description="Recommendation confidence score")
    alternative_quotes: List[Quote] = Field(default_factory=list)


class QuoteInterest(BaseModel):
    """A user's intent to proceed with a quote, relative to the recommendation."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    interested_quote_id: str = Field(description="Quote the user proceeds with")
    recommended_quote_id: str
    status: RecommendationStatus
    representative_id: str = Field(default="")
    created_at: datetime
    form_data: Dict[str, Any] = Field(default_factory=dict)


class RepresentativeAssignment(BaseModel):
    """Link between a quote interest and the representative handling it."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    representative_id: str
    quote_interest_id: str
    status: AssignmentStatus = Field(default="assigned")
    assigned_at: datetime
    expected_response_days: int = Field(default=3, description="Business days")
    respond_by: datetime = Field(description="assigned_at plus the response window in business days")


class OptionalCover(BaseModel):
    """Normalized optional cover selection."""
    model_config = ConfigDict(frozen=True)

    selected: bool = False
    amount: Optional[float] = None


class QuoteComparison(BaseModel):
    """Side-by-side analysis of a set of quotes."""
    quotes: List[Quote]
    cheapest: Quote
    most_expensive: Quote
    average_premium: float
    min_premium: float
    max_premium: float


class QuoteFilters(BaseModel):
    """Filters and ordering for the comparison view."""
    min_premium: float = Field(default=0)
    max_premium: Optional[float] = Field(default=None)
    providers: List[str] = Field(default_factory=list)
    min_deductible: float = Field(default=0)
    max_deductible: Optional[float] = Field(default=None)
    min_rating: float = Field(default=0)
    features: List[str] = Field(default_factory=list)
    sort_by: Literal["price", "rating", "coverage", "provider"] = Field(default="price")
    sort_order: Literal["asc", "desc"] = Field(default="asc")
