"""Tests for export helpers."""

import json

import pytest
from partyviews.core.merge import default_snapshot
from partyviews.core.models import NoData
from partyviews.core.scoring import build_aggregate
from partyviews.utils.data_prep import prepare_export, export_to_json


def test_prepare_export_snapshot():
    export = prepare_export(default_snapshot())
    assert export["kind"] == "snapshot"
    assert export["data"]["pillars"]["economy"] == {"score": 50, "rationale": "default starting point"}
    assert export["metadata"] == {"export_timestamp": None, "version": "1.0.0"}


def test_prepare_export_aggregate():
    export = prepare_export(build_aggregate([("u1", default_snapshot())]))
    assert export["kind"] == "aggregate"
    assert export["data"]["member_count"] == 1
    assert export["data"]["top_contributor"]["display_name"] == "No recent activity"


def test_prepare_export_no_data():
    export = prepare_export(NoData(reason="No user data found"), kind="party")
    assert export["kind"] == "party"
    assert export["data"] == {"no_data": True, "reason": "No user data found"}


def test_export_to_json(tmp_path):
    path = tmp_path / "out.json"
    export_to_json(prepare_export(default_snapshot()), str(path))
    written = json.loads(path.read_text(encoding="utf-8"))
    assert written["metadata"]["export_timestamp"] is not None
    assert written["data"]["top_issues"] == []


if __name__ == "__main__":
    pytest.main([__file__])
