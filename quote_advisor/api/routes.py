"""
API routes for the quote recommendation service.
"""

import asyncio
import logging
import math
from datetime import datetime
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from quote_advisor import __version__
from quote_advisor.config import Settings, get_settings
from quote_advisor.core.notification_client import QuoteNotificationClient, get_notification_client
from quote_advisor.core.quote_store import QuoteStore, get_quote_store
from quote_advisor.pipeline.steps import (
    InterestRecorder,
    QuoteComparisonStep,
    QuoteGenerationStep,
    RecommendationStep,
    RepresentativeDirectory,
    RequestNormalizationStep,
)
from quote_advisor.utils.formatting import generate_user_id
from quote_advisor.api.schemas import (
    AssignRepresentativeRequest,
    CompareQuotesRequest,
    CompareQuotesResponse,
    GenerateQuotesRequest,
    HealthResponse,
    Pagination,
    PurchaseNotificationRequest,
    PurchaseNotificationResponse,
    QuoteInterestRequest,
    QuoteInterestResponse,
    QuoteListResponse,
    QuoteResponse,
    QuoteStatusUpdate,
    RecommendationRequest,
    RecommendationResponse,
    RepresentativeResponse,
    UserQuotesResponse,
)


logger = logging.getLogger(__name__)
router = APIRouter()


@lru_cache()
def get_quote_generator() -> QuoteGenerationStep:
    return QuoteGenerationStep()


@lru_cache()
def get_representative_directory() -> RepresentativeDirectory:
    return RepresentativeDirectory()


def get_interest_recorder() -> InterestRecorder:
    return InterestRecorder()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    settings: Settings = Depends(get_settings),
    store: QuoteStore = Depends(get_quote_store),
):
    """
    Check the health status of the API and its collaborators.
    """
    notifications_configured = bool(settings.notification_url)

    return HealthResponse(
        status="healthy" if notifications_configured else "degraded",
        version=__version__,
        quotes_stored=len(store),
        notifications_configured=notifications_configured,
        timestamp=datetime.utcnow(),
    )


@router.post(
    "/api/quotes/generate",
    response_model=QuoteListResponse,
    tags=["Quotes"],
    summary="Generate quotes",
    description="Generate one quote per provider supporting the requested insurance line"
)
async def generate_quotes(
    request: GenerateQuotesRequest,
    settings: Settings = Depends(get_settings),
    generator: QuoteGenerationStep = Depends(get_quote_generator),
    store: QuoteStore = Depends(get_quote_store),
):
    """
    Normalize the intake answers and generate quotes from every provider
    offering the insurance line.
    """
    try:
        form_data = RequestNormalizationStep().execute(request.form_data)
        quotes = generator.execute(request.insurance_type, request.user_id, form_data)
        store.add_many(quotes)
    except Exception as e:
        logger.exception(f"Error generating quotes: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    # Simulate provider response time
    if settings.quote_generation_delay_seconds > 0:
        await asyncio.sleep(settings.quote_generation_delay_seconds)

    return QuoteListResponse(data=quotes)


@router.get(
    "/api/quotes/user/{user_id}",
    response_model=UserQuotesResponse,
    tags=["Quotes"],
    summary="List a user's quotes",
)
async def list_user_quotes(
    user_id: str,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    type: Optional[str] = None,
    store: QuoteStore = Depends(get_quote_store),
):
    """
    List a user's quotes with pagination, optionally filtered by status and type.
    """
    if page < 1 or limit < 1:
        raise HTTPException(status_code=400, detail="page and limit must be positive")

    quotes, total = store.list_for_user(user_id, status=status, insurance_type=type, page=page, limit=limit)
    return UserQuotesResponse(
        quotes=quotes,
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.get(
    "/api/quotes/{quote_id}",
    response_model=QuoteResponse,
    tags=["Quotes"],
    summary="Get quote details",
)
async def get_quote(quote_id: str, store: QuoteStore = Depends(get_quote_store)):
    quote = store.get(quote_id)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"Quote {quote_id} not found")
    return QuoteResponse(data=quote)


@router.put(
    "/api/quotes/{quote_id}/status",
    response_model=QuoteResponse,
    tags=["Quotes"],
    summary="Update quote status",
)
async def update_quote_status(
    quote_id: str,
    update: QuoteStatusUpdate,
    store: QuoteStore = Depends(get_quote_store),
):
    quote = store.update_status(quote_id, update.status)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"Quote {quote_id} not found")
    return QuoteResponse(data=quote)


@router.post(
    "/api/quotes/compare",
    response_model=CompareQuotesResponse,
    tags=["Quotes"],
    summary="Compare quotes",
    description="Cheapest, most expensive, average premium and price range for a set of quotes"
)
async def compare_quotes(request: CompareQuotesRequest, store: QuoteStore = Depends(get_quote_store)):
    """
    Summarize the requested quotes, optionally filtered and sorted first.
    """
    step = QuoteComparisonStep()
    quotes = store.get_many(request.quote_ids)
    if request.filters is not None:
        quotes = step.filter_and_sort(quotes, request.filters)
    comparison = step.compare(quotes)
    if comparison is None:
        raise HTTPException(status_code=404, detail="No quotes found for comparison")
    return CompareQuotesResponse(data=comparison)


@router.post(
    "/api/quotes/recommendation",
    response_model=RecommendationResponse,
    tags=["Recommendations"],
    summary="Recommend a quote",
)
async def recommend_quote(request: RecommendationRequest, store: QuoteStore = Depends(get_quote_store)):
    """
    Score the given quotes against the user's budget and return the best one
    with up to three alternatives. An empty quote set yields no recommendation.
    """
    quotes = list(request.quotes)
    if request.quote_ids:
        quotes.extend(store.get_many(request.quote_ids))

    recommendation = RecommendationStep().execute(quotes, request.form_data)
    if recommendation is None:
        return RecommendationResponse(success=False, message="No quotes to recommend from")
    return RecommendationResponse(data=recommendation)


@router.post(
    "/api/representatives/assign",
    response_model=RepresentativeResponse,
    tags=["Representatives"],
    summary="Assign a representative",
)
async def assign_representative(
    request: AssignRepresentativeRequest,
    directory: RepresentativeDirectory = Depends(get_representative_directory),
):
    return RepresentativeResponse(data=directory.assign(request.insurance_type))


@router.get(
    "/api/representatives/{representative_id}",
    response_model=RepresentativeResponse,
    tags=["Representatives"],
    summary="Get representative details",
)
async def get_representative(
    representative_id: str,
    directory: RepresentativeDirectory = Depends(get_representative_directory),
):
    representative = directory.get_by_id(representative_id)
    if representative is None:
        raise HTTPException(status_code=404, detail=f"Representative {representative_id} not found")
    return RepresentativeResponse(data=representative)


@router.post(
    "/api/interests",
    response_model=QuoteInterestResponse,
    tags=["Recommendations"],
    summary="Record the user's decision",
    description="Record interest in a quote, assign a representative and start the response window"
)
async def create_interest(
    request: QuoteInterestRequest,
    directory: RepresentativeDirectory = Depends(get_representative_directory),
    recorder: InterestRecorder = Depends(get_interest_recorder),
):
    user_id = request.user_id or generate_user_id()
    representative = directory.assign(request.interested_quote.type)

    interest = recorder.create_quote_interest(
        user_id,
        request.interested_quote,
        request.recommended_quote,
        request.form_data,
        request.user_choice,
    )
    assignment = recorder.create_representative_assignment(user_id, representative.id, interest.id)
    interest = recorder.attach_representative(interest, representative.id)

    return QuoteInterestResponse(
        interest=interest,
        representative=representative,
        assignment=assignment,
    )


@router.post(
    "/api/notifications/quote-purchase",
    response_model=PurchaseNotificationResponse,
    tags=["Notifications"],
    summary="Send a purchase request",
)
def notify_quote_purchase(
    request: PurchaseNotificationRequest,
    notifier: QuoteNotificationClient = Depends(get_notification_client),
):
    """
    Forward a purchase request to the broker mailbox. Delivery failures are
    reported in the body, not as HTTP errors.
    """
    result = notifier.send_purchase_request(request.quote, request.applicant, request.insurance_info)
    return PurchaseNotificationResponse(success=result.success, error=result.error)
