"""Buyer matching engine for ranking company profiles against a deal."""

from .scorer import BuyerMatchScorer, CriterionResult, find_matching_buyers
from .eligibility import EligibilityGate

__all__ = ["BuyerMatchScorer", "CriterionResult", "EligibilityGate", "find_matching_buyers"]
