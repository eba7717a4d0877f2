"""
Tests for the design studio wizard: identity gating, intent selection,
thought refinement and the hand-off to the canvas.
"""

import pytest

from nexus_studio.agents.studio_agent import DesignStudioAgent, StudioStage
from nexus_studio.errors import IdentityIncompleteError, StageTransitionError
from nexus_studio.schemas.studio_params import SkillLevel, StudioParameters


class StubRefiner:
    def __init__(self, result="Enter the Vietnamese solar market within 18 months."):
        self.result = result
        self.calls = []

    def refine(self, raw_text, instruction):
        self.calls.append((raw_text, instruction))
        return self.result


class ExplodingRefiner:
    def refine(self, raw_text, instruction):
        raise TimeoutError("model timed out")


@pytest.fixture
def agent():
    return DesignStudioAgent()


@pytest.fixture
def identified(agent):
    agent.update_identity(user_name="Linh", user_country="Vietnam", organization_type="Investor")
    agent.complete_identity()
    return agent


class TestIdentity:

    def test_starts_at_identity(self, agent):
        assert agent.stage == StudioStage.IDENTITY

    def test_missing_fields_listed_in_order(self, agent):
        with pytest.raises(IdentityIncompleteError) as exc:
            agent.complete_identity()
        assert exc.value.missing == ["organization_type", "user_country", "user_name"]
        assert agent.stage == StudioStage.IDENTITY

    def test_whitespace_counts_as_missing(self, agent):
        agent.update_identity(user_name="  ", user_country="Kenya", organization_type="NGO")
        with pytest.raises(IdentityIncompleteError) as exc:
            agent.complete_identity()
        assert exc.value.missing == ["user_name"]

    def test_complete_moves_to_intent(self, identified):
        assert identified.stage == StudioStage.INTENT

    def test_subtypes_follow_org_type(self, agent):
        agent.update_identity(organization_type="Investor")
        assert "Venture Capital" in agent.organization_subtypes()

    @pytest.mark.parametrize("org_type, subtype, expected", [
        ("Academic", "", True),
        ("Investor", "Private Equity", False),
        ("Investor", "Custom", True),
        ("", "", False),
    ])
    def test_custom_category_input(self, agent, org_type, subtype, expected):
        agent.update_identity(organization_type=org_type, organization_subtype=subtype)
        assert agent.show_custom_category_input is expected

    def test_custom_org_type(self, agent):
        agent.update_identity(organization_type="Custom", custom_organization_type="Cooperative")
        assert agent.show_custom_type_input
        assert agent.params.effective_organization_type == "Cooperative"

    def test_back_to_identity_only_from_intent(self, identified):
        assert identified.back_to_identity() == StudioStage.IDENTITY
        identified.complete_identity()
        identified.toggle_intent("market_entry")
        identified.proceed_to_canvas()
        assert identified.back_to_identity() == StudioStage.CANVAS


class TestParameters:

    def test_industry_string_is_split(self):
        params = StudioParameters()
        params.update(industry="energy, logistics ,")
        assert params.industry == ["energy", "logistics"]

    def test_skill_level_coerced(self):
        params = StudioParameters()
        params.update(skill_level="visionary")
        assert params.skill_level == SkillLevel.VISIONARY
        assert params.to_dict()["skill_level"] == "visionary"

    def test_invalid_skill_level(self):
        with pytest.raises(ValueError):
            StudioParameters().update(skill_level="wizard")

    def test_selection_not_writable_through_update(self):
        params = StudioParameters()
        params.update(selected_intents=["market_entry"], unknown_field="x", org_context="x")
        assert params.selected_intents == []
        assert callable(params.org_context)

    def test_org_context(self):
        params = StudioParameters(organization_type="SME", region="Kenya", industry=["agritech"])
        assert params.org_context().summary() == "User is a SME in Kenya. Industry: agritech."

    def test_empty_context_summary(self):
        assert StudioParameters().org_context().summary() == (
            "User is a organization in an unspecified region. Industry: unspecified."
        )


class TestRefinement:

    def test_refines_into_problem_statement(self):
        refiner = StubRefiner()
        agent = DesignStudioAgent(refiner=refiner)
        agent.update_identity(initial_thought="  solar in vietnam maybe?  ")

        refined = agent.refine_thought()

        assert refined == refiner.result
        assert agent.params.problem_statement == refiner.result
        assert refiner.calls[0][0] == "solar in vietnam maybe?"
        assert not agent.state.analyzing_thought

    def test_nothing_to_refine(self):
        refiner = StubRefiner()
        agent = DesignStudioAgent(refiner=refiner)
        assert agent.refine_thought() is None
        assert refiner.calls == []

    def test_no_refiner_available(self, agent):
        agent.update_identity(initial_thought="solar")
        assert agent.refine_thought() is None

    def test_failure_leaves_statement_untouched(self):
        agent = DesignStudioAgent(refiner=ExplodingRefiner())
        agent.update_identity(initial_thought="solar", problem_statement="Existing")

        assert agent.refine_thought() is None
        assert agent.params.problem_statement == "Existing"
        assert not agent.state.analyzing_thought


class TestIntents:

    def test_toggle_adds_and_removes(self, identified):
        assert identified.toggle_intent("market_entry") == ["market_entry"]
        assert identified.toggle_intent("deal_negotiation") == ["market_entry", "deal_negotiation"]
        assert identified.toggle_intent("market_entry") == ["deal_negotiation"]

    def test_primary_is_first_selected(self, identified):
        identified.toggle_intent("risk_assessment")
        identified.toggle_intent("market_entry")
        assert identified.params.primary_intent == "risk_assessment"
        identified.toggle_intent("risk_assessment")
        assert identified.params.primary_intent == "market_entry"
        identified.toggle_intent("market_entry")
        assert identified.params.primary_intent is None

    def test_preview_tracks_selection(self, identified):
        assert identified.preview().count == 2
        identified.toggle_intent("market_entry")
        assert identified.preview().count == 7
        identified.toggle_intent("market_entry")
        assert identified.preview().count == 2

    def test_intent_cards(self, identified):
        identified.toggle_intent("risk_assessment")
        cards = {card["id"]: card for card in identified.intent_cards()}

        assert len(cards) == 8
        assert cards["risk_assessment"]["selected"]
        assert cards["risk_assessment"]["aligned"]
        assert not cards["regional_development"]["aligned"]
        assert cards["partner_discovery"]["aligned"]
        assert cards["market_entry"]["engines"]["overflow"] == 2

    def test_progress(self, identified):
        identified.toggle_intent("market_entry")
        progress = identified.get_progress()
        assert progress == {
            "stage": "intent",
            "stage_index": 2,
            "stage_total": 3,
            "intents_selected": 1,
            "active_engines": 7,
        }


class TestDocument:

    def test_attach_records_name_only(self, agent):
        agent.attach_document("brief.pdf")
        assert agent.params.uploaded_file_name == "brief.pdf"
        assert agent.params.uploaded_document

    def test_empty_name_ignored(self, agent):
        agent.attach_document("")
        assert agent.params.uploaded_file_name is None
        assert not agent.params.uploaded_document


class TestCanvas:

    def test_mission_statement_generated(self, identified):
        identified.toggle_intent("deal_negotiation")
        identified.toggle_intent("market_entry")

        assert identified.proceed_to_canvas() == StudioStage.CANVAS
        assert identified.params.problem_statement == (
            "Strategic Mission: Deal Negotiation + Market Entry Strategy"
        )

    def test_existing_statement_kept(self, identified):
        identified.update_identity(problem_statement="Secure a JV partner")
        identified.toggle_intent("partner_discovery")
        identified.proceed_to_canvas()
        assert identified.params.problem_statement == "Secure a JV partner"

    def test_refused_without_selection(self, identified):
        with pytest.raises(StageTransitionError):
            identified.proceed_to_canvas()
        assert identified.stage == StudioStage.INTENT
        assert identified.params.problem_statement == ""

    def test_refused_from_identity(self, agent):
        agent.toggle_intent("market_entry")
        with pytest.raises(StageTransitionError):
            agent.proceed_to_canvas()
        assert agent.stage == StudioStage.IDENTITY
        assert agent.params.problem_statement == ""

    def test_refused_after_going_back_to_identity(self, identified):
        identified.toggle_intent("market_entry")
        identified.back_to_identity()
        with pytest.raises(StageTransitionError):
            identified.proceed_to_canvas()

    def test_back_to_intent(self, identified):
        identified.toggle_intent("deal_negotiation")
        identified.proceed_to_canvas()

        assert identified.back_to_intent() == StudioStage.INTENT
        assert identified.params.selected_intents == ["deal_negotiation"]
        assert identified.proceed_to_canvas() == StudioStage.CANVAS

    def test_back_to_intent_only_from_canvas(self, identified):
        assert DesignStudioAgent().back_to_intent() == StudioStage.IDENTITY
        assert identified.back_to_intent() == StudioStage.INTENT

    def test_summary(self, identified):
        identified.toggle_intent("growth_forecasting")
        summary = identified.get_summary()
        assert summary["stage"] == "intent"
        assert summary["params"]["user_name"] == "Linh"
        assert summary["composition"]["count"] == summary["progress"]["active_engines"]
