"""Tests for the survey baseline builder."""

import pytest
from partyviews.core.baseline import build_baseline, format_survey_answers
from partyviews.core.constants import PillarConstants
from partyviews.core.models import SurveyAnswer


class TestBuildBaseline:
    """Test baseline repair of oracle analysis."""

    def setup_method(self):
        self.answers = [
            SurveyAnswer(question_id="1", choice="Lower taxes"),
            SurveyAnswer(question_id="2", choice="More council housing", text="Rents are out of control"),
        ]

    def test_complete_analysis(self):
        analysis = {
            "pillars": {axis: {"score": 40 + i, "rationale": f"{axis} view"} for i, axis in enumerate(PillarConstants.AXES)},
            "issues": [{"title": "Housing", "summary": "Needs more homes"}],
        }
        snapshot = build_baseline(self.answers, analysis)
        assert [snapshot.pillars[a].score for a in PillarConstants.AXES] == [40, 41, 42, 43, 44]
        assert snapshot.pillars["social"].rationale == "social view"
        assert [i.to_dict() for i in snapshot.top_issues] == [{"title": "Housing", "summary": "Needs more homes"}]

    def test_missing_axis_is_incomplete(self):
        analysis = {"pillars": {"economy": {"score": 70, "rationale": "Market-minded"}}}
        snapshot = build_baseline(self.answers, analysis)
        assert snapshot.pillars["economy"].score == 70
        for axis in ("social", "environment", "governance", "foreign"):
            assert snapshot.pillars[axis].score == 50
            assert snapshot.pillars[axis].rationale == "incomplete"

    def test_non_numeric_score_is_incomplete(self):
        analysis = {"pillars": {"economy": {"score": "high", "rationale": "?"}, "social": {"score": None}}}
        snapshot = build_baseline(self.answers, analysis)
        assert snapshot.pillars["economy"].score == 50
        assert snapshot.pillars["economy"].rationale == "incomplete"
        assert snapshot.pillars["social"].rationale == "incomplete"

    def test_scores_are_clamped_and_rounded(self):
        analysis = {"pillars": {
            "economy": {"score": 140, "rationale": "a"},
            "social": {"score": -5, "rationale": "b"},
            "environment": {"score": 72.6, "rationale": "c"},
        }}
        snapshot = build_baseline(self.answers, analysis)
        assert snapshot.pillars["economy"].score == 100
        assert snapshot.pillars["social"].score == 0
        assert snapshot.pillars["environment"].score == 73

    def test_bare_number_pillar(self):
        snapshot = build_baseline(self.answers, {"pillars": {"foreign": 65}})
        assert snapshot.pillars["foreign"].score == 65
        assert snapshot.pillars["foreign"].rationale == ""

    @pytest.mark.parametrize("analysis", [None, {}, "not json", {"pillars": []}])
    def test_unusable_analysis_is_neutral(self, analysis):
        snapshot = build_baseline(self.answers, analysis)
        assert set(snapshot.pillars) == set(PillarConstants.AXES)
        assert all(p.score == 50 and p.rationale == "incomplete" for p in snapshot.pillars.values())
        assert snapshot.top_issues == []

    def test_seed_issues_without_title_are_dropped(self):
        analysis = {"issues": [{"summary": "no title"}, {"title": "  "}, {"title": "NHS"}, "junk"]}
        snapshot = build_baseline(self.answers, analysis)
        assert [(i.title, i.summary) for i in snapshot.top_issues] == [("NHS", "")]

    def test_seed_issues_are_not_capped(self):
        analysis = {"issues": [{"title": f"Issue {n}", "summary": "s"} for n in range(12)]}
        snapshot = build_baseline(self.answers, analysis)
        assert len(snapshot.top_issues) == 12


def test_format_survey_answers():
    answers = [
        SurveyAnswer(question_id="1", choice="Agree"),
        SurveyAnswer(question_id="2", choice="Disagree", text="Too expensive"),
    ]
    assert format_survey_answers(answers) == (
        "Question 1: Agree\n\nQuestion 2: Disagree (Additional: Too expensive)"
    )


if __name__ == "__main__":
    pytest.main([__file__])
