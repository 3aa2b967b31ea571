"""Buyer match result schema."""

from typing import Optional

from pydantic import Field

from .base import DocumentModel
from .profile import Preferences, TargetCriteria


class MatchDetails(DocumentModel):
    """Whether each criterion contributed points."""

    industry_match: bool = Field(default=True, alias="industryMatch")
    geography_match: bool = Field(default=True, alias="geographyMatch")
    revenue_match: bool = Field(default=False, alias="revenueMatch")
    ebitda_match: bool = Field(default=False, alias="ebitdaMatch")
    transaction_size_match: bool = Field(default=False, alias="transactionSizeMatch")
    revenue_growth_match: bool = Field(default=False, alias="revenueGrowthMatch")
    business_model_match: bool = Field(default=False, alias="businessModelMatch")
    management_match: bool = Field(default=False, alias="managementMatch")
    years_match: bool = Field(default=False, alias="yearsMatch")
    deals_completed_match: bool = Field(default=False, alias="dealsCompletedMatch")


class CriteriaDetails(DocumentModel):
    """Deal values the score was computed from."""

    deal_industry: str = Field(default="", alias="dealIndustry")
    deal_geography: str = Field(default="", alias="dealGeography")
    deal_revenue: Optional[float] = Field(default=None, alias="dealRevenue")
    deal_ebitda: Optional[float] = Field(default=None, alias="dealEbitda")
    deal_transaction_size: Optional[float] = Field(default=None, alias="dealTransactionSize")
    deal_years_in_business: Optional[int] = Field(default=None, alias="dealYearsInBusiness")


class MatchResult(DocumentModel):
    """A buyer profile scored against a deal."""

    id: Optional[str] = Field(default=None, alias="_id")
    company_name: str = Field(default="", alias="companyName")
    buyer_id: Optional[str] = Field(default=None, alias="buyerId")
    buyer_name: Optional[str] = Field(default=None, alias="buyerName")
    buyer_email: Optional[str] = Field(default=None, alias="buyerEmail")
    target_criteria: TargetCriteria = Field(default_factory=TargetCriteria, alias="targetCriteria")
    preferences: Preferences = Field(default_factory=Preferences)
    company_type: Optional[str] = Field(default=None, alias="companyType")
    capital_entity: Optional[str] = Field(default=None, alias="capitalEntity")
    deals_completed_last_5_years: Optional[int] = Field(
        default=None, alias="dealsCompletedLast5Years"
    )
    average_deal_size: Optional[float] = Field(default=None, alias="averageDealSize")

    total_match_score: int = Field(default=0, ge=0, alias="totalMatchScore")
    match_percentage: int = Field(default=0, ge=0, alias="matchPercentage")
    match_details: MatchDetails = Field(default_factory=MatchDetails, alias="matchDetails")
    criteria_details: CriteriaDetails = Field(
        default_factory=CriteriaDetails, alias="criteriaDetails"
    )

    def matched_criteria(self) -> list[str]:
        """Names of the criteria that contributed points."""
        return [
            name.removesuffix("_match")
            for name, matched in self.match_details.model_dump().items()
            if matched
        ]
