"""Data models for the Deal Marketplace."""

from .deal import (
    Deal,
    DealVisibility,
    RewardLevel,
    FinancialDetails,
    BusinessModel,
    ManagementPreferences,
    reward_level_for_visibility,
)
from .profile import (
    BuyerRef,
    CompanyProfile,
    Preferences,
    TargetCriteria,
)
from .match import (
    CriteriaDetails,
    MatchDetails,
    MatchResult,
)

__all__ = [
    "Deal",
    "DealVisibility",
    "RewardLevel",
    "FinancialDetails",
    "BusinessModel",
    "ManagementPreferences",
    "reward_level_for_visibility",
    "BuyerRef",
    "CompanyProfile",
    "Preferences",
    "TargetCriteria",
    "CriteriaDetails",
    "MatchDetails",
    "MatchResult",
]
