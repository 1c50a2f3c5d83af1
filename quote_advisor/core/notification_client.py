"""
Client for the quote purchase notification function.
Posts purchase requests to the email edge function with retry logic.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, Field
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from quote_advisor.config import get_settings
from quote_advisor.pipeline.models import Quote


logger = logging.getLogger(__name__)

# Errors worth another attempt; HTTP error responses are not retried
TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


class NotificationResult(BaseModel):
    """Outcome of a purchase notification."""
    success: bool
    error: Optional[str] = Field(default=None)


def build_purchase_payload(
    quote: Quote,
    applicant: Dict[str, Any],
    insurance_info: Dict[str, Any]
) -> Dict[str, Any]:
    """Build the request body expected by the send-quote-email function."""
    return {
        "quote": {
            "id": quote.id,
            "type": quote.type,
            "provider": quote.provider,
            "premium": quote.premium,
            "coverage": quote.coverage,
            "deductible": quote.deductible,
            "status": quote.status,
            "createdAt": quote.created_at.isoformat(),
        },
        "applicant": {
            "firstName": applicant.get("firstName", ""),
            "lastName": applicant.get("lastName", ""),
            "email": applicant.get("email", ""),
            "phone": applicant.get("phone", ""),
            "idNumber": applicant.get("idNumber", ""),
            "city": applicant.get("city", ""),
        },
        "insuranceInfo": insurance_info,
    }


class QuoteNotificationClient:
    """
    Sends quote purchase requests to the broker mailbox.
    Failures never raise; they are reported through NotificationResult.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_wait: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.url = url if url is not None else settings.notification_url
        self.api_key = api_key if api_key is not None else settings.notification_api_key
        self.timeout = timeout or settings.notification_timeout_seconds
        self.max_attempts = max_attempts or settings.notification_max_attempts
        self.retry_wait = retry_wait
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_wait, max=10),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                response = self.session.post(
                    self.url,
                    json=payload,
                    headers=self._headers(),
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response.json()

    def send_purchase_request(
        self,
        quote: Quote,
        applicant: Dict[str, Any],
        insurance_info: Optional[Dict[str, Any]] = None
    ) -> NotificationResult:
        """
        Notify the broker that an applicant wants to buy a quote.

        Args:
            quote: Quote being purchased
            applicant: Applicant contact details
            insurance_info: Insurance-specific answers from the form

        Returns:
            NotificationResult; success is False on any network or server error
        """
        if not self.url:
            logger.warning("Purchase notification skipped: notification_url is not configured")
            return NotificationResult(success=False, error="Notification endpoint is not configured")

        payload = build_purchase_payload(quote, applicant, insurance_info or {})

        try:
            body = self._post(payload)
        except requests.RequestException as e:
            logger.error(f"Failed to send purchase notification for quote {quote.id}: {e}")
            return NotificationResult(success=False, error=str(e))
        except ValueError as e:
            logger.error(f"Invalid response from notification endpoint for quote {quote.id}: {e}")
            return NotificationResult(success=False, error="Invalid response from notification endpoint")

        success = bool(body.get("success", False))
        if not success:
            logger.warning(f"Notification endpoint rejected quote {quote.id}: {body.get('error')}")
            return NotificationResult(success=False, error=body.get("error") or "Notification was not accepted")

        logger.info(f"Purchase notification sent for quote {quote.id}")
        return NotificationResult(success=True)


@lru_cache()
def get_notification_client() -> QuoteNotificationClient:
    """Get cached notification client instance."""
    return QuoteNotificationClient()
