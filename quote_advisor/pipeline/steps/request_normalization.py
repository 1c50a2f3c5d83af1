"""
Quote Request Normalization
Sanitizes intake form answers before they reach quote generation.
"""

from typing import Any, Dict, List, Optional

from quote_advisor.config import get_settings
from quote_advisor.pipeline.models import OptionalCover


OPTIONAL_COVER_KEYS = ("accidentalDamage", "powerSurge", "subsidenceLandslip")
REQUIRED_APPLICANT_FIELDS = {
    "firstName": "First name",
    "lastName": "Last name",
    "email": "Email",
    "phone": "Phone number",
}


def form_section(data: Any, key: str) -> Dict[str, Any]:
    """Nested form section by key; empty when missing, null or not a mapping."""
    section = data.get(key) if isinstance(data, dict) else None
    return section if isinstance(section, dict) else {}


def _parse_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return None


def validate_amount_range(value: str, label: str, minimum: float, maximum: float) -> Optional[str]:
    """
    Validate a numeric form field.

    Returns:
        An error message, or None when the value is acceptable
    """
    if not value or not str(value).strip():
        return f"{label} is required"
    amount = _parse_amount(value)
    if amount is None or amount != amount:
        return f"{label} must be a valid number"
    if amount < minimum:
        return f"{label} must be at least {minimum:g}"
    if amount > maximum:
        return f"{label} must not exceed {maximum:g}"
    return None


class RequestNormalizationStep:
    """
    Normalizes optional covers to {selected, amount} with out-of-range amounts
    dropped, and trims the agent comment.
    """

    def __init__(self, cover_min: Optional[float] = None, cover_max: Optional[float] = None):
        settings = get_settings()
        self.cover_min = settings.optional_cover_min if cover_min is None else cover_min
        self.cover_max = settings.optional_cover_max if cover_max is None else cover_max

    def normalize_cover(self, cover: Any) -> OptionalCover:
        if not isinstance(cover, dict):
            return OptionalCover(selected=bool(cover))
        selected = bool(cover.get("selected"))
        amount = _parse_amount(cover.get("amount"))
        in_range = (
            selected
            and amount is not None
            and amount == amount
            and self.cover_min <= amount <= self.cover_max
        )
        return OptionalCover(selected=selected, amount=amount if in_range else None)

    def execute(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Normalize a quote request. Non-dict input is returned unchanged.

        Args:
            request: Raw request with needsAnalysis.coveragePreferences

        Returns:
            Copy of the request with normalized optional covers
        """
        if not isinstance(request, dict):
            return request

        needs_analysis = form_section(request, "needsAnalysis")
        preferences = form_section(needs_analysis, "coveragePreferences")
        covers = form_section(preferences, "optionalCovers")
        comment = preferences.get("optionalCoverAgentComment")

        return {
            **request,
            "needsAnalysis": {
                **needs_analysis,
                "coveragePreferences": {
                    **preferences,
                    "optionalCovers": {
                        key: self.normalize_cover(covers.get(key)).model_dump()
                        for key in OPTIONAL_COVER_KEYS
                    },
                    "optionalCoverAgentComment": comment.strip() if isinstance(comment, str) else "",
                },
            },
        }

    def validate(self, form_data: Optional[Dict[str, Any]]) -> List[str]:
        """
        Check an intake form before submission.

        Returns:
            Error messages; empty when the form can be submitted
        """
        errors = []

        applicant = form_section(form_data, "applicant")
        for field, label in REQUIRED_APPLICANT_FIELDS.items():
            value = applicant.get(field)
            if value is None or not str(value).strip():
                errors.append(f"{label} is required")

        covers = form_section(
            form_section(form_section(form_data, "needsAnalysis"), "coveragePreferences"),
            "optionalCovers",
        )
        for key in OPTIONAL_COVER_KEYS:
            cover = covers.get(key)
            if isinstance(cover, dict) and cover.get("selected"):
                error = validate_amount_range(
                    "" if cover.get("amount") is None else str(cover.get("amount")),
                    _cover_label(key),
                    self.cover_min,
                    self.cover_max,
                )
                if error:
                    errors.append(error)

        return errors


def _cover_label(key: str) -> str:
    return {
        "accidentalDamage": "Accidental damage cover",
        "powerSurge": "Power surge cover",
        "subsidenceLandslip": "Subsidence and landslip cover",
    }[key]
