"""Tests for the oracle service."""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from tenacity import wait_none

from partyviews.core.config import settings
from partyviews.core.merge import default_snapshot
from partyviews.core.models import ActivityMessage, Delta, IssueOp, SurveyAnswer
from partyviews.services.oracle import OpenAIOracle, FallbackOracle, OracleServiceFactory


def _reply(content):
    return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(OpenAIOracle._complete.retry, "wait", wait_none())


class TestOpenAIOracle:
    """Test the OpenAI-backed oracle with a mocked client."""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        self.client = MagicMock()
        self.oracle = OpenAIOracle(client=self.client, cache_dir=str(tmp_path / "cache"))
        self.messages = [
            ActivityMessage("u1", "Energy bills are crushing us", datetime(2026, 3, 1, tzinfo=timezone.utc)),
        ]

    def test_extract_delta_repairs_reply(self):
        self.client.chat.completions.create.return_value = _reply(
            "```json\n" + json.dumps({
                "pillar_deltas": {"economy": -15, "social": 2},
                "top_issues": [{"issue": "Energy Bills", "mentions": 4, "user_quote": "crushing us"}],
            }) + "\n```"
        )
        delta = self.oracle.extract_delta(self.messages, default_snapshot())
        assert delta.pillars_delta == {"economy": -10, "social": 2}
        assert delta.top_issues_delta == [
            IssueOp("add", "Energy Bills", "Mentioned 4 time(s)", mentions=4, quote="crushing us")
        ]

    def test_prior_snapshot_is_sent(self):
        self.client.chat.completions.create.return_value = _reply("{}")
        self.oracle.extract_delta(self.messages, default_snapshot())
        sent = self.client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "PRIOR SNAPSHOT:" in sent
        assert "user: Energy bills are crushing us" in sent

    def test_no_messages_skips_call(self):
        assert self.oracle.extract_delta([], None) == Delta()
        self.client.chat.completions.create.assert_not_called()

    def test_responses_are_cached(self):
        self.client.chat.completions.create.return_value = _reply("A united, pragmatic group.")
        assert self.oracle.summarize_party("Members: 3") == "A united, pragmatic group."
        assert self.oracle.summarize_party("Members: 3") == "A united, pragmatic group."
        assert self.client.chat.completions.create.call_count == 1

    def test_analyze_survey(self):
        self.client.chat.completions.create.return_value = _reply('{"pillars": {"economy": {"score": 60, "rationale": "r"}}}')
        analysis = self.oracle.analyze_survey([SurveyAnswer("1", "Agree")])
        assert analysis == {"pillars": {"economy": {"score": 60, "rationale": "r"}}}
        sent = self.client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "Question 1: Agree" in sent

    def test_failures_degrade_to_defaults(self):
        self.client.chat.completions.create.side_effect = RuntimeError("rate limited")
        assert self.oracle.analyze_survey([SurveyAnswer("1", "Agree")]) == {}
        assert self.oracle.extract_delta(self.messages, None) == Delta()
        assert self.oracle.summarize_party("Members: 3") is None

    def test_retries_before_giving_up(self):
        self.client.chat.completions.create.side_effect = RuntimeError("boom")
        self.oracle.summarize_party("Members: 3")
        assert self.client.chat.completions.create.call_count == settings.max_retries

    def test_empty_summary_is_none(self):
        self.client.chat.completions.create.return_value = _reply("   ")
        assert self.oracle.summarize_party("Members: 3") is None


class TestFallbackOracle:
    """Test the neutral fallback."""

    def test_neutral_results(self):
        oracle = FallbackOracle()
        assert oracle.analyze_survey([]) == {}
        assert oracle.extract_delta([], None) == Delta()
        assert oracle.summarize_party("anything") is None


def test_factory_without_key(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "")
    assert isinstance(OracleServiceFactory.create(), FallbackOracle)


if __name__ == "__main__":
    pytest.main([__file__])
