import json

import pytest

from app.core.data_loader import (
    BacklogLoader,
    BacklogValidationError,
    calculate_slice_count_range,
    parse_backlog_json,
    parse_throughput_values,
)
from app.models.slice import OTHER_STATUS


def test_parse_backlog_from_text(backlog_payload):
    backlog = parse_backlog_json(json.dumps(backlog_payload))
    assert [s.title for s in backlog.slices] == ["A", "B", "C", "D"]
    assert backlog.groups[1].slices == ["D"]
    assert backlog.groups[1].exclude is True
    assert backlog.groups[0].targetRelease == "R1"
    assert backlog.forecasts == []


def test_extra_slice_fields_are_kept(backlog_payload):
    backlog = parse_backlog_json(backlog_payload)
    assert backlog.slices[0].model_dump()["owner"] == "sam"


@pytest.mark.parametrize("payload, message", [
    ("{not json", "Invalid JSON"),
    ("[]", "'slices' array"),
    ({"items": []}, "'slices' array"),
    ({"slices": {"title": "A"}}, "'slices' array"),
    ({"slices": [{"title": "A"}, {"status": "Done"}]}, 'slice #2'),
    ({"slices": [{"title": ""}]}, '"title"'),
    ({"slices": [{"title": "   "}]}, '"title"'),
    ({"slices": [{"title": "A"}], "groups": [{"slices": ["A"], "risk": "high"}]}, "groups.0.risk"),
])
def test_invalid_backlogs_are_described(payload, message):
    with pytest.raises(BacklogValidationError) as exc:
        parse_backlog_json(payload)
    assert message in str(exc.value)


def test_missing_status_defaults_to_created():
    backlog = parse_backlog_json({"slices": [{"title": "A"}, {"title": "B", "status": None}]})
    assert [s.status for s in backlog.slices] == ["Created", "Created"]


def test_parse_throughput_values():
    assert parse_throughput_values("10, 12,x, 8.5 ,,") == [10.0, 12.0, 8.5]
    assert parse_throughput_values("") == []


def test_slice_count_range():
    assert calculate_slice_count_range(42) == (42, 42)


def test_candidate_pool(backlog_payload):
    loader = BacklogLoader.from_json(backlog_payload)

    # D sits in an excluded group, C is Done
    assert [s.title for s in loader.candidate_slices(include_done=True)] == ["A", "B", "C"]
    assert [s.title for s in loader.candidate_slices(include_done=False)] == ["A", "B"]
    assert [s.title for s in loader.candidate_slices(True, target_release="R1")] == ["A", "B"]
    assert loader.candidate_slices(True, target_release="R2") == []
    assert loader.slice_count_range(include_done=False) == (2, 2)


def test_loader_risk_ignores_excluded_groups(backlog_payload):
    loader = BacklogLoader.from_json(backlog_payload)
    assert loader.risk(include_done=True) == pytest.approx(2 * 0.5 / 4)


def test_status_breakdown(backlog_payload):
    breakdown = BacklogLoader.from_json(backlog_payload).status_breakdown()

    assert breakdown.total == 4
    assert breakdown.done == 1
    assert breakdown.notDone == 3
    assert breakdown.completionRate == 25
    assert breakdown.byStatus == {"Planned": 2, "Done": 1, "Waiting on vendor": 1}
    assert breakdown.byDisplayStatus == {"Planned": 2, "Done": 1, OTHER_STATUS: 1}
    assert sum(breakdown.byDisplayStatus.values()) == breakdown.total


def test_status_breakdown_of_empty_backlog():
    breakdown = BacklogLoader.from_json({"slices": []}).status_breakdown()
    assert breakdown.total == 0
    assert breakdown.completionRate == 0
