"""Buyer company profile schema."""

from typing import Any, Optional

from pydantic import Field, field_validator

from .base import DocumentModel


class BuyerRef(DocumentModel):
    """The buyer account a company profile belongs to."""

    id: Optional[str] = Field(default=None, alias="_id")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None


class Preferences(DocumentModel):
    """Opt-out preferences for receiving deals."""

    stop_sending_deals: bool = Field(default=False, alias="stopSendingDeals")
    do_not_send_marketed_deals: bool = Field(
        default=False,
        alias="doNotSendMarketedDeals",
        description="Skip deals that are marketed on other marketplaces (Seed tier)",
    )
    allow_buyer_like_deals: bool = Field(default=True, alias="allowBuyerLikeDeals")


class TargetCriteria(DocumentModel):
    """What a buyer is looking to acquire."""

    countries: list[str] = Field(default_factory=list, description="Countries or regions targeted")
    industry_sectors: list[str] = Field(default_factory=list, alias="industrySectors")

    revenue_min: Optional[float] = Field(default=None, alias="revenueMin")
    revenue_max: Optional[float] = Field(default=None, alias="revenueMax")
    ebitda_min: Optional[float] = Field(default=None, alias="ebitdaMin")
    ebitda_max: Optional[float] = Field(default=None, alias="ebitdaMax")
    transaction_size_min: Optional[float] = Field(default=None, alias="transactionSizeMin")
    transaction_size_max: Optional[float] = Field(default=None, alias="transactionSizeMax")

    revenue_growth: Optional[float] = Field(default=None, alias="revenueGrowth")
    min_stake_percent: Optional[float] = Field(default=None, alias="minStakePercent")
    min_years_in_business: Optional[int] = Field(default=None, alias="minYearsInBusiness")
    deals_completed_last_5_years: Optional[int] = Field(
        default=None, alias="dealsCompletedLast5Years"
    )

    preferred_business_models: list[str] = Field(
        default_factory=list,
        alias="preferredBusinessModels",
        description="Recurring Revenue, Project-Based, Asset Light, Asset Heavy",
    )
    management_team_preference: list[str] = Field(
        default_factory=list, alias="managementTeamPreference"
    )
    description: Optional[str] = None


class CompanyProfile(DocumentModel):
    """A buyer's acquisition preferences."""

    id: Optional[str] = Field(default=None, alias="_id")
    company_name: str = Field(default="", alias="companyName")
    website: Optional[str] = None
    company_type: Optional[str] = Field(default=None, alias="companyType")
    capital_entity: Optional[str] = Field(default=None, alias="capitalEntity")
    deals_completed_last_5_years: Optional[int] = Field(
        default=None, alias="dealsCompletedLast5Years"
    )
    average_deal_size: Optional[float] = Field(default=None, alias="averageDealSize")

    preferences: Preferences = Field(default_factory=Preferences)
    target_criteria: TargetCriteria = Field(default_factory=TargetCriteria, alias="targetCriteria")
    buyer: BuyerRef = Field(default_factory=BuyerRef)

    @field_validator("buyer", mode="before")
    @classmethod
    def _buyer_from_id(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"_id": value}
        return value
