"""Eligibility gate applied before a profile is scored."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from app.geography import expand
from app.models import CompanyProfile, Deal, RewardLevel

logger = logging.getLogger(__name__)


@dataclass
class EligibilityResult:
    """Result of applying the eligibility gate."""

    eligible: bool
    reasons: list[str] = field(default_factory=list)


class EligibilityGate:
    """Mandatory pass/fail checks: opt-outs, geography and industry."""

    def apply(
        self,
        deal: Deal,
        profile: CompanyProfile,
        expanded_geographies: Optional[frozenset[str]] = None,
    ) -> EligibilityResult:
        """Apply all gate checks to a profile.

        ``expanded_geographies`` may be passed in when the same deal is
        checked against many profiles, to avoid re-expanding it each time.
        """
        reasons = []
        preferences = profile.preferences
        criteria = profile.target_criteria

        # Opt-outs
        if preferences.stop_sending_deals:
            reasons.append("Buyer has stopped receiving deals")

        if deal.reward_level == RewardLevel.SEED and preferences.do_not_send_marketed_deals:
            reasons.append("Buyer does not receive marketed (Seed) deals")

        # Geography is mandatory
        if expanded_geographies is None:
            expanded_geographies = expand(deal.geography_selection)
        if not expanded_geographies.intersection(criteria.countries):
            reasons.append(
                f"Deal geography {deal.geography_selection!r} not in target countries"
            )

        # Industry is mandatory
        if not deal.industry_sector or deal.industry_sector not in criteria.industry_sectors:
            reasons.append(f"Deal industry {deal.industry_sector!r} not in target sectors")

        if reasons:
            logger.debug(f"Profile {profile.id or profile.company_name} ineligible: {'; '.join(reasons)}")

        return EligibilityResult(eligible=not reasons, reasons=reasons)


def is_eligible(deal: Deal, profile: CompanyProfile) -> bool:
    """Quick check if a profile passes the gate."""
    gate = EligibilityGate()
    return gate.apply(deal, profile).eligible
