"""Deal listing schema."""

from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from .base import DocumentModel


class DealVisibility(str, Enum):
    """Visibility tier chosen by the seller."""

    SEED = "seed"
    BLOOM = "bloom"
    FRUIT = "fruit"


class RewardLevel(str, Enum):
    """Reward tier derived from visibility."""

    SEED = "Seed"
    BLOOM = "Bloom"
    FRUIT = "Fruit"


REWARD_LEVEL_BY_VISIBILITY = {
    DealVisibility.SEED: RewardLevel.SEED,
    DealVisibility.BLOOM: RewardLevel.BLOOM,
    DealVisibility.FRUIT: RewardLevel.FRUIT,
}


def reward_level_for_visibility(visibility: Optional[DealVisibility]) -> RewardLevel:
    """Map a visibility tier to its reward level (Seed when unknown)."""
    return REWARD_LEVEL_BY_VISIBILITY.get(visibility, RewardLevel.SEED)


class FinancialDetails(DocumentModel):
    """Financial figures reported by the seller."""

    trailing_revenue_currency: Optional[str] = Field(default=None, alias="trailingRevenueCurrency")
    trailing_revenue_amount: Optional[float] = Field(default=None, alias="trailingRevenueAmount")
    trailing_ebitda_currency: Optional[str] = Field(default=None, alias="trailingEBITDACurrency")
    trailing_ebitda_amount: Optional[float] = Field(default=None, alias="trailingEBITDAAmount")
    t12_free_cash_flow: Optional[float] = Field(default=None, alias="t12FreeCashFlow")
    t12_net_income: Optional[float] = Field(default=None, alias="t12NetIncome")
    avg_revenue_growth: Optional[float] = Field(
        default=None, alias="avgRevenueGrowth", description="Average revenue growth in %"
    )
    net_income: Optional[float] = Field(default=None, alias="netIncome")
    asking_price: Optional[float] = Field(default=None, alias="askingPrice")
    final_sale_price: Optional[float] = Field(default=None, alias="finalSalePrice")


class BusinessModel(DocumentModel):
    """Business model flags."""

    recurring_revenue: bool = Field(default=False, alias="recurringRevenue")
    project_based: bool = Field(default=False, alias="projectBased")
    asset_light: bool = Field(default=False, alias="assetLight")
    asset_heavy: bool = Field(default=False, alias="assetHeavy")


class ManagementPreferences(DocumentModel):
    """What happens to the current management after the deal."""

    retiring_divesting: bool = Field(default=False, alias="retiringDivesting")
    staff_stay: bool = Field(default=False, alias="staffStay")


class Deal(DocumentModel):
    """A listing created by a seller describing a company for acquisition."""

    id: Optional[str] = Field(default=None, alias="_id")
    title: str = ""
    seller_id: Optional[str] = Field(default=None, alias="seller")

    industry_sector: str = Field(default="", alias="industrySector")
    geography_selection: str = Field(
        default="", alias="geographySelection", description="Country or region name"
    )
    years_in_business: Optional[int] = Field(default=None, alias="yearsInBusiness")
    deals_completed_last_5_years: Optional[int] = Field(
        default=None, alias="dealsCompletedLast5Years"
    )

    financial_details: FinancialDetails = Field(
        default_factory=FinancialDetails, alias="financialDetails"
    )
    business_model: BusinessModel = Field(default_factory=BusinessModel, alias="businessModel")
    management_preferences: ManagementPreferences = Field(
        default_factory=ManagementPreferences, alias="managementPreferences"
    )

    visibility: Optional[DealVisibility] = None
    reward_level: RewardLevel = Field(default=RewardLevel.SEED, alias="rewardLevel")

    @model_validator(mode="after")
    def _sync_reward_level(self) -> "Deal":
        # Reward level always follows visibility when one is set
        if self.visibility is not None:
            self.reward_level = reward_level_for_visibility(self.visibility)
        return self
