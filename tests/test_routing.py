"""
Tests for request classification and the router's reply envelope handling.
"""

import pytest

from nexus_studio.routing import (
    AGENT_STATUS,
    FALLBACK_REPLY,
    RequestRouter,
    ResponseEnvelope,
    RouterState,
    classify,
    route,
)
from nexus_studio.schemas.chat import AgentTag, Source
from nexus_studio.schemas.studio_params import OrgContext


class RecordingResponder:
    """Returns a canned envelope and records what it was asked."""

    def __init__(self, envelope=None, router=None):
        self.envelope = envelope or ResponseEnvelope(content="Here is the plan.")
        self.router = router
        self.calls = []
        self.observed = []

    def generate(self, user_text, context_summary, agent_tag=None):
        self.calls.append((user_text, context_summary, agent_tag))
        if self.router is not None:
            self.observed.append((self.router.state, self.router.active_agent, self.router.status))
        return self.envelope


class FailingResponder:
    def __init__(self, error=None):
        self.error = error or RuntimeError("backend down")

    def generate(self, user_text, context_summary, agent_tag=None):
        raise self.error


@pytest.fixture
def ctx():
    return OrgContext(organization_type="Investor", region="Vietnam", industry=["energy", "logistics"])


class TestClassification:

    @pytest.mark.parametrize("text, expected", [
        ("Find recent news on tariffs", AgentTag.SCOUT),
        ("search for port operators in Da Nang", AgentTag.SCOUT),
        ("Any NEWS today?", AgentTag.SCOUT),
        ("Help me negotiate this deal", AgentTag.DIPLOMAT),
        ("We need to renegotiate the lease", AgentTag.DIPLOMAT),
        ("Build a market entry plan", AgentTag.STRATEGIST),
        ("", AgentTag.STRATEGIST),
    ])
    def test_keywords(self, text, expected):
        assert classify(text) == expected

    def test_scout_wins_over_diplomat(self):
        assert classify("Search the news before we negotiate") == AgentTag.SCOUT

    def test_substring_match_inside_words(self):
        # "newsletter" contains "news"
        assert classify("Draft a newsletter") == AgentTag.SCOUT


class TestRouteDelivered:

    def test_reply_tagged_with_classified_agent(self, ctx):
        result = route("Find recent news on tariffs", ctx, RecordingResponder())
        assert result.agent_tag == AgentTag.SCOUT
        assert result.reply == "Here is the plan."
        assert not result.degraded

    def test_default_strategist(self, ctx):
        assert route("Build a market entry plan", ctx, RecordingResponder()).agent_tag == AgentTag.STRATEGIST

    def test_diplomat(self, ctx):
        assert route("Help me negotiate this deal", ctx, RecordingResponder()).agent_tag == AgentTag.DIPLOMAT

    def test_context_summary_passed_to_responder(self, ctx):
        responder = RecordingResponder()
        route("Help me negotiate this deal", ctx, responder)
        text, summary, tag = responder.calls[0]
        assert text == "Help me negotiate this deal"
        assert summary == "User is a Investor in Vietnam. Industry: energy, logistics."
        assert tag == AgentTag.DIPLOMAT

    def test_responder_tag_takes_precedence(self, ctx):
        responder = RecordingResponder(ResponseEnvelope(content="ok", agent_tag="diplomat"))
        assert route("Build a plan", ctx, responder).agent_tag == AgentTag.DIPLOMAT

    def test_unknown_responder_tag_ignored(self, ctx):
        responder = RecordingResponder(ResponseEnvelope(content="ok", agent_tag="oracle"))
        assert route("Build a plan", ctx, responder).agent_tag == AgentTag.STRATEGIST

    def test_sources_returned_in_full(self, ctx):
        sources = [Source("A", "https://a.example"), Source("B", "https://b.example"), Source("C", "https://c.example")]
        responder = RecordingResponder(ResponseEnvelope(content="ok", sources=sources))
        result = route("search tariffs", ctx, responder)
        assert result.sources == sources

    def test_processing_status_visible_while_awaiting(self, ctx):
        responder = RecordingResponder()
        router = RequestRouter(responder)
        responder.router = router

        router.route("Find recent news", ctx)

        assert responder.observed == [
            (RouterState.AWAITING_RESPONSE, AgentTag.SCOUT, AGENT_STATUS[AgentTag.SCOUT]),
        ]
        assert router.state == RouterState.IDLE
        assert router.active_agent is None
        assert router.status == ""


class TestRouteDegraded:

    def test_failure_yields_fallback(self, ctx):
        result = route("Build a market entry plan", ctx, FailingResponder())
        assert result.reply == FALLBACK_REPLY
        assert result.agent_tag is None
        assert result.sources == []
        assert result.degraded

    @pytest.mark.parametrize("error", [RuntimeError("x"), ValueError("x"), TimeoutError("x"), KeyError("x")])
    def test_any_exception_is_contained(self, ctx, error):
        result = route("negotiate", ctx, FailingResponder(error))
        assert result.reply == FALLBACK_REPLY

    def test_status_cleared_after_failure(self, ctx):
        events = []
        router = RequestRouter(FailingResponder(), on_status=lambda agent, status: events.append((agent, status)))

        router.route("Find recent news", ctx)

        assert events == [
            (AgentTag.SCOUT, "Scouring global databases..."),
            (None, ""),
        ]
        assert router.state == RouterState.IDLE
        assert not router.is_busy

    def test_router_reusable_after_failure(self, ctx):
        router = RequestRouter(FailingResponder())
        router.route("first", ctx)
        router.responder = RecordingResponder()
        result = router.route("second", ctx)
        assert result.reply == "Here is the plan."
