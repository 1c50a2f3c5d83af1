"""
Representative Assignment
Matches a quote request to a representative specialised in its insurance line.
"""

import logging
from typing import Optional, Sequence, Tuple

from quote_advisor.core.random_source import RandomSource, get_random_source, random_index
from quote_advisor.core.reference_data import DEFAULT_REPRESENTATIVES
from quote_advisor.pipeline.models import Representative


logger = logging.getLogger(__name__)


class RepresentativeDirectory:
    """
    Read-only roster of representatives.
    Selection within the eligible set is uniform random, so repeated calls may
    return different representatives.
    """

    def __init__(
        self,
        roster: Sequence[Representative] = DEFAULT_REPRESENTATIVES,
        random_source: Optional[RandomSource] = None
    ):
        if not roster:
            raise ValueError("Representative roster must not be empty")
        self.roster: Tuple[Representative, ...] = tuple(roster)
        self.random = random_source or get_random_source()

    def eligible(self, insurance_type: Optional[str] = None) -> Tuple[Representative, ...]:
        """
        Representatives eligible for an insurance line.

        Available specialists first; any available representative when no
        specialist is free; empty when nobody is available.
        """
        available = tuple(rep for rep in self.roster if rep.is_available)
        if insurance_type:
            specialists = tuple(rep for rep in available if insurance_type in rep.specializations)
            if specialists:
                return specialists
        return available

    def assign(self, insurance_type: Optional[str] = None) -> Representative:
        """
        Pick a representative for an insurance line. Never fails.

        Args:
            insurance_type: Insurance line of the request (any rep if not provided)

        Returns:
            A random eligible representative, or the first roster entry when
            nobody is available
        """
        candidates = self.eligible(insurance_type)
        if not candidates:
            logger.warning("No representatives available, falling back to the first roster entry")
            return self.roster[0]

        representative = candidates[random_index(self.random, len(candidates))]
        logger.info(
            f"Assigned {representative.full_name} ({representative.id}) "
            f"for {insurance_type or 'any'} from {len(candidates)} candidates"
        )
        return representative

    def get_by_id(self, representative_id: str) -> Optional[Representative]:
        return next((rep for rep in self.roster if rep.id == representative_id), None)
