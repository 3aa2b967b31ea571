"""Tests for buyer match scoring and ranking."""

from app.score.scorer import (
    BuyerMatchScorer,
    CriterionResult,
    MAX_POSSIBLE_SCORE,
    find_matching_buyers,
)
from app.models import CompanyProfile
from tests.factories import make_deal, make_profile, make_weak_profile


class TestScenarios:
    """End-to-end matching scenarios."""

    def test_country_deal_matches_continent_target(self):
        deal = make_deal(
            geography_selection="Nigeria",
            financial_details={"trailing_revenue_amount": 5_000_000},
            years_in_business=6,
        )
        profile = make_profile(target_criteria={
            "countries": ["Africa"],
            "industry_sectors": ["Technology"],
            "revenue_min": 1_000_000,
            "revenue_max": 10_000_000,
            "min_years_in_business": 3,
        })
        results = BuyerMatchScorer().match(deal, [profile])

        assert len(results) == 1
        result = results[0]
        assert result.total_match_score >= 33
        # 10 + 10 mandatory, revenue 8, unset EBITDA/size/growth/deals 8+8+5+5, years 5
        assert result.total_match_score == 59
        assert result.match_percentage == 98
        assert result.match_details.revenue_match
        assert result.match_details.years_match
        assert not result.match_details.business_model_match

    def test_geography_outside_targets_excluded(self):
        deal = make_deal(geography_selection="Nigeria")
        profile = make_profile(target_criteria={
            "countries": ["Europe"],
            "industry_sectors": ["Technology"],
        })
        assert BuyerMatchScorer().match(deal, [profile]) == []

    def test_stop_sending_deals_excluded(self):
        deal = make_deal()
        profile = make_profile(preferences={"stop_sending_deals": True})
        assert BuyerMatchScorer().match(deal, [profile]) == []

    def test_marketed_opt_out_only_applies_to_seed(self):
        profile = make_profile(preferences={"do_not_send_marketed_deals": True})
        scorer = BuyerMatchScorer()

        assert scorer.match(make_deal(reward_level="Seed"), [profile]) == []
        assert len(scorer.match(make_deal(reward_level="Bloom"), [profile])) == 1

    def test_visibility_drives_reward_level(self):
        profile = make_profile(preferences={"do_not_send_marketed_deals": True})
        deal = make_deal(visibility="seed", reward_level="Fruit")
        assert BuyerMatchScorer().match(deal, [profile]) == []


class TestCriteria:
    """Tests for individual criterion rules."""

    def score(self, deal=None, **criteria):
        target = {"countries": ["Nigeria"], "industry_sectors": ["Technology"]}
        target.update(criteria)
        result = BuyerMatchScorer().score(deal or make_deal(), make_profile(target_criteria=target))
        assert result is not None
        return result

    def test_unset_criteria_award_full_points(self):
        result = self.score()
        # Everything except business model (12) and management (6)
        assert result.total_match_score == 59

    def test_revenue_below_min(self):
        result = self.score(revenue_min=6_000_000)
        assert not result.match_details.revenue_match
        assert result.total_match_score == 51

    def test_revenue_above_max(self):
        result = self.score(revenue_max=4_999_999)
        assert not result.match_details.revenue_match

    def test_revenue_bounds_inclusive(self):
        result = self.score(revenue_min=5_000_000, revenue_max=5_000_000)
        assert result.match_details.revenue_match

    def test_missing_deal_revenue_treated_as_zero(self):
        deal = make_deal(financial_details={})
        assert self.score(deal, revenue_min=1).match_details.revenue_match is False
        assert self.score(deal, revenue_max=100).match_details.revenue_match is True

    def test_ebitda_range(self):
        assert self.score(ebitda_min=500_000, ebitda_max=2_000_000).match_details.ebitda_match
        assert not self.score(ebitda_min=2_000_000).match_details.ebitda_match

    def test_transaction_size_range(self):
        assert self.score(transaction_size_max=10_000_000).match_details.transaction_size_match
        assert not self.score(transaction_size_max=1_000_000).match_details.transaction_size_match

    def test_revenue_growth_ignores_threshold_value(self):
        growing = make_deal(financial_details={"avg_revenue_growth": 1})
        # Threshold of 50% is not compared, only that growth is positive
        assert self.score(growing, revenue_growth=50).match_details.revenue_growth_match

        flat = make_deal(financial_details={"avg_revenue_growth": 0})
        assert not self.score(flat, revenue_growth=50).match_details.revenue_growth_match
        assert self.score(flat).match_details.revenue_growth_match

    def test_business_model_points_per_shared_model(self):
        deal = make_deal(business_model={
            "recurring_revenue": True,
            "asset_light": True,
            "asset_heavy": True,
        })
        result = self.score(
            deal,
            preferred_business_models=["Recurring Revenue", "Asset Light", "Project-Based"],
        )
        assert result.match_details.business_model_match
        assert result.total_match_score == 59 + 6

    def test_business_model_needs_deal_flag(self):
        result = self.score(preferred_business_models=["Recurring Revenue"])
        assert not result.match_details.business_model_match

    def test_management_owner_departing(self):
        deal = make_deal(management_preferences={"retiring_divesting": True})
        result = self.score(deal, management_team_preference=["Owner(s) Departing"])
        assert result.match_details.management_match
        assert result.total_match_score == 59 + 6

        assert not self.score(deal).match_details.management_match
        assert not self.score(
            make_deal(), management_team_preference=["Owner(s) Departing"]
        ).match_details.management_match

    def test_years_in_business(self):
        assert self.score(min_years_in_business=6).match_details.years_match
        assert not self.score(min_years_in_business=7).match_details.years_match

    def test_missing_years_in_business(self):
        deal = make_deal(years_in_business=None)
        assert not self.score(deal, min_years_in_business=1).match_details.years_match
        assert self.score(deal).match_details.years_match

    def test_deals_completed(self):
        assert not self.score(deals_completed_last_5_years=3).match_details.deals_completed_match
        deal = make_deal(deals_completed_last_5_years=1)
        # Only whether the deal has any completed deals matters
        assert self.score(deal, deals_completed_last_5_years=3).match_details.deals_completed_match

    def test_perfect_match_exceeds_hundred_percent(self):
        deal = make_deal(
            business_model={
                "recurring_revenue": True,
                "project_based": True,
                "asset_light": True,
                "asset_heavy": True,
            },
            management_preferences={"retiring_divesting": True},
        )
        result = self.score(
            deal,
            preferred_business_models=[
                "Recurring Revenue", "Project-Based", "Asset Light", "Asset Heavy",
            ],
            management_team_preference=["Owner(s) Departing"],
        )
        assert result.total_match_score == 77
        assert result.match_percentage == round(77 / MAX_POSSIBLE_SCORE * 100)

    def test_criteria_details_passthrough(self):
        result = self.score()
        details = result.criteria_details
        assert details.deal_industry == "Technology"
        assert details.deal_geography == "Nigeria"
        assert details.deal_revenue == 5_000_000
        assert details.deal_ebitda == 1_000_000
        assert details.deal_transaction_size == 8_000_000
        assert details.deal_years_in_business == 6

    def test_buyer_passthrough(self):
        result = self.score()
        assert result.buyer_id == "buyer-1"
        assert result.buyer_name == "Ada Obi"
        assert result.buyer_email == "ada@savannah.example"
        assert result.company_name == "Savannah Capital"


class TestThreshold:
    """Tests for the minimum match percentage."""

    def test_weak_profile_scores_mandatory_points_only(self):
        result = BuyerMatchScorer().score(make_deal(), make_weak_profile())
        assert result.total_match_score == 20
        assert result.match_percentage == 33

    def test_twenty_three_points_excluded(self):
        deal = make_deal(business_model={"recurring_revenue": True})
        profile = make_weak_profile(preferred_business_models=["Recurring Revenue"])

        scorer = BuyerMatchScorer()
        assert scorer.score(deal, profile).total_match_score == 23
        assert scorer.score(deal, profile).match_percentage == 38
        assert scorer.match(deal, [profile]) == []

    def test_twenty_five_points_included(self):
        profile = make_weak_profile(revenue_growth=None)

        scorer = BuyerMatchScorer()
        assert scorer.score(make_deal(), profile).total_match_score == 25
        assert len(scorer.match(make_deal(), [profile])) == 1

    def test_percentage_equal_to_threshold_included(self):
        profile = make_weak_profile(revenue_growth=None)
        # 25 points rounds to 42%
        assert len(BuyerMatchScorer(min_match_percentage=42).match(make_deal(), [profile])) == 1
        assert BuyerMatchScorer(min_match_percentage=43).match(make_deal(), [profile]) == []


class TestRanking:
    """Tests for ordering and purity of match()."""

    def test_sorted_by_percentage_descending(self):
        deal = make_deal()
        profiles = [
            make_weak_profile(revenue_growth=None).model_copy(update={"id": "low"}),
            make_profile(id="high"),
            make_weak_profile(revenue_min=None, revenue_growth=None).model_copy(update={"id": "mid"}),
        ]
        results = BuyerMatchScorer().match(deal, profiles)
        assert [r.id for r in results] == ["high", "mid", "low"]

    def test_ties_keep_input_order(self):
        deal = make_deal()
        profiles = [make_profile(id=f"p{i}") for i in range(5)]
        results = BuyerMatchScorer().match(deal, profiles)
        assert [r.id for r in results] == ["p0", "p1", "p2", "p3", "p4"]

    def test_idempotent(self):
        deal = make_deal()
        profiles = [
            make_profile(id="a"),
            make_weak_profile(revenue_growth=None).model_copy(update={"id": "b"}),
            make_profile(id="c", target_criteria={"countries": ["Europe"]}),
        ]
        scorer = BuyerMatchScorer()
        first = scorer.match(deal, profiles)
        second = scorer.match(deal, profiles)
        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]

    def test_inputs_not_mutated(self):
        deal = make_deal()
        profile = make_profile()
        before = (deal.model_dump(), profile.model_dump())
        BuyerMatchScorer().match(deal, [profile])
        assert (deal.model_dump(), profile.model_dump()) == before

    def test_consumes_generator(self):
        deal = make_deal()
        consumed = []

        def stream():
            for i in range(3):
                consumed.append(i)
                yield make_profile(id=f"p{i}")

        results = find_matching_buyers(deal, stream())
        assert consumed == [0, 1, 2]
        assert len(results) == 3

    def test_empty_input(self):
        assert find_matching_buyers(make_deal(), []) == []

    def test_adding_satisfied_criterion_never_lowers_score(self):
        deal = make_deal(business_model={"recurring_revenue": True})
        base = make_weak_profile()
        richer = make_weak_profile(preferred_business_models=["Recurring Revenue"])

        scorer = BuyerMatchScorer()
        assert (
            scorer.score(deal, richer).match_percentage
            >= scorer.score(deal, base).match_percentage
        )

    def test_missing_target_criteria_never_matches(self):
        profile = CompanyProfile.model_validate({"_id": "x", "targetCriteria": None})
        assert find_matching_buyers(make_deal(), [profile]) == []


class TestCriterionResult:
    """Tests for the per-criterion result type."""

    def test_satisfied_when_points_awarded(self):
        assert CriterionResult(name="years", points=5, max_points=5).satisfied
        assert not CriterionResult(name="years", points=0, max_points=5).satisfied
