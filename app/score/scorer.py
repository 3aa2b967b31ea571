"""Scoring engine for ranking buyer profiles against a deal."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from app.geography import expand
from app.models import (
    CompanyProfile,
    CriteriaDetails,
    Deal,
    MatchDetails,
    MatchResult,
)
from .eligibility import EligibilityGate

logger = logging.getLogger(__name__)


# Raw points reach 77 when every optional criterion is met, but percentages
# are normalised against 60, so they can exceed 100.
MAX_POSSIBLE_SCORE = 60
MIN_MATCH_PERCENTAGE = 40

INDUSTRY_POINTS = 10
GEOGRAPHY_POINTS = 10
RANGE_POINTS = 8
REVENUE_GROWTH_POINTS = 5
BUSINESS_MODEL_POINTS = 3
MANAGEMENT_POINTS = 6
YEARS_POINTS = 5
DEALS_COMPLETED_POINTS = 5

# Deal flag -> label buyers pick in their preferred business models
BUSINESS_MODEL_LABELS = {
    "recurring_revenue": "Recurring Revenue",
    "project_based": "Project-Based",
    "asset_light": "Asset Light",
    "asset_heavy": "Asset Heavy",
}
OWNER_DEPARTING_LABEL = "Owner(s) Departing"


@dataclass(frozen=True)
class CriterionResult:
    """Points awarded by a single criterion."""

    name: str
    points: int
    max_points: int

    @property
    def satisfied(self) -> bool:
        return self.points > 0


def _award(name: str, condition: bool, points: int) -> CriterionResult:
    return CriterionResult(name=name, points=points if condition else 0, max_points=points)


def _in_range(value: Optional[float], low: Optional[float], high: Optional[float]) -> bool:
    """Inclusive range check; an unset bound is always satisfied."""
    value = value or 0
    if low is not None and low > value:
        return False
    if high is not None and high < value:
        return False
    return True


class BuyerMatchScorer:
    """Score and rank buyer company profiles against a deal."""

    def __init__(self, min_match_percentage: int = MIN_MATCH_PERCENTAGE):
        self.gate = EligibilityGate()
        self.min_match_percentage = min_match_percentage

    def score(
        self,
        deal: Deal,
        profile: CompanyProfile,
        expanded_geographies: Optional[frozenset[str]] = None,
    ) -> Optional[MatchResult]:
        """Score one profile against a deal.

        Returns None when the profile does not pass the eligibility gate.
        The minimum match threshold is not applied here.
        """
        eligibility = self.gate.apply(deal, profile, expanded_geographies)
        if not eligibility.eligible:
            return None

        criteria = self._score_criteria(deal, profile)
        total = sum(c.points for c in criteria.values())
        percentage = round(total / MAX_POSSIBLE_SCORE * 100)

        return self._build_result(deal, profile, criteria, total, percentage)

    def match(
        self,
        deal: Deal,
        profiles: Iterable[CompanyProfile],
    ) -> list[MatchResult]:
        """Score all profiles and return the ranked list of matches.

        ``profiles`` is consumed once and may be a lazy stream. Profiles
        below the minimum match percentage are dropped. Equal percentages
        keep their input order.
        """
        expanded = expand(deal.geography_selection)
        matches: list[MatchResult] = []
        seen = 0

        for profile in profiles:
            seen += 1
            result = self.score(deal, profile, expanded)
            if result is None:
                continue
            if result.match_percentage < self.min_match_percentage:
                logger.debug(
                    f"Profile {result.id or result.company_name} below threshold "
                    f"({result.match_percentage}% < {self.min_match_percentage}%)"
                )
                continue
            matches.append(result)

        # list.sort is stable, so ties stay in input order
        matches.sort(key=lambda m: m.match_percentage, reverse=True)

        logger.info(f"Deal {deal.id}: {len(matches)} of {seen} profiles matched")
        return matches

    def _score_criteria(
        self,
        deal: Deal,
        profile: CompanyProfile,
    ) -> dict[str, CriterionResult]:
        """Calculate points for each criterion."""
        criteria = profile.target_criteria
        financials = deal.financial_details

        results = [
            # Mandatory gates already passed
            _award("industry", True, INDUSTRY_POINTS),
            _award("geography", True, GEOGRAPHY_POINTS),
            _award(
                "revenue",
                _in_range(
                    financials.trailing_revenue_amount,
                    criteria.revenue_min,
                    criteria.revenue_max,
                ),
                RANGE_POINTS,
            ),
            _award(
                "ebitda",
                _in_range(
                    financials.trailing_ebitda_amount,
                    criteria.ebitda_min,
                    criteria.ebitda_max,
                ),
                RANGE_POINTS,
            ),
            _award(
                "transaction_size",
                _in_range(
                    financials.asking_price,
                    criteria.transaction_size_min,
                    criteria.transaction_size_max,
                ),
                RANGE_POINTS,
            ),
            self._score_revenue_growth(deal, profile),
            self._score_business_model(deal, profile),
            _award(
                "management",
                deal.management_preferences.retiring_divesting
                and OWNER_DEPARTING_LABEL in criteria.management_team_preference,
                MANAGEMENT_POINTS,
            ),
            _award(
                "years",
                criteria.min_years_in_business is None
                or (deal.years_in_business or 0) >= criteria.min_years_in_business,
                YEARS_POINTS,
            ),
            _award(
                "deals_completed",
                criteria.deals_completed_last_5_years is None
                or (deal.deals_completed_last_5_years or 0) > 0,
                DEALS_COMPLETED_POINTS,
            ),
        ]
        return {result.name: result for result in results}

    def _score_revenue_growth(
        self,
        deal: Deal,
        profile: CompanyProfile,
    ) -> CriterionResult:
        """Score revenue growth.

        Only checks whether the buyer set a growth threshold and whether the
        deal grew at all. The threshold's value is not compared.
        """
        threshold = profile.target_criteria.revenue_growth
        growth = deal.financial_details.avg_revenue_growth or 0
        return _award("revenue_growth", threshold is None or growth > 0, REVENUE_GROWTH_POINTS)

    def _score_business_model(
        self,
        deal: Deal,
        profile: CompanyProfile,
    ) -> CriterionResult:
        """Score business model overlap, 3 points per shared model."""
        preferred = profile.target_criteria.preferred_business_models
        flags = deal.business_model

        points = sum(
            BUSINESS_MODEL_POINTS
            for flag, label in BUSINESS_MODEL_LABELS.items()
            if getattr(flags, flag) and label in preferred
        )
        return CriterionResult(
            name="business_model",
            points=points,
            max_points=BUSINESS_MODEL_POINTS * len(BUSINESS_MODEL_LABELS),
        )

    def _build_result(
        self,
        deal: Deal,
        profile: CompanyProfile,
        criteria: dict[str, CriterionResult],
        total: int,
        percentage: int,
    ) -> MatchResult:
        financials = deal.financial_details
        match_details = MatchDetails(
            **{f"{name}_match": result.satisfied for name, result in criteria.items()}
        )
        criteria_details = CriteriaDetails(
            deal_industry=deal.industry_sector,
            deal_geography=deal.geography_selection,
            deal_revenue=financials.trailing_revenue_amount,
            deal_ebitda=financials.trailing_ebitda_amount,
            deal_transaction_size=financials.asking_price,
            deal_years_in_business=deal.years_in_business,
        )

        return MatchResult(
            id=profile.id,
            company_name=profile.company_name,
            buyer_id=profile.buyer.id,
            buyer_name=profile.buyer.full_name,
            buyer_email=profile.buyer.email,
            target_criteria=profile.target_criteria.model_copy(deep=True),
            preferences=profile.preferences.model_copy(),
            company_type=profile.company_type,
            capital_entity=profile.capital_entity,
            deals_completed_last_5_years=profile.deals_completed_last_5_years,
            average_deal_size=profile.average_deal_size,
            total_match_score=total,
            match_percentage=percentage,
            match_details=match_details,
            criteria_details=criteria_details,
        )


def find_matching_buyers(
    deal: Deal,
    profiles: Iterable[CompanyProfile],
) -> list[MatchResult]:
    """Rank profiles against a deal with the default threshold."""
    scorer = BuyerMatchScorer()
    return scorer.match(deal, profiles)
