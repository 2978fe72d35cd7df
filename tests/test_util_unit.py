from datetime import datetime, timedelta, timezone

import pytest

from rely.util.time import fmt_display, fmt_relative, utcnow_iso
from rely.util.validation import extract_json_from_text, missing_analysis_fields, validate

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _ago(**delta) -> str:
    return (NOW - timedelta(**delta)).strftime("%Y-%m-%dT%H:%M:%S.000Z")


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        ({"seconds": 10}, "less than a minute ago"),
        ({"minutes": 1}, "1 minute ago"),
        ({"minutes": 5}, "5 minutes ago"),
        ({"minutes": 60}, "about 1 hour ago"),
        ({"hours": 3}, "about 3 hours ago"),
        ({"hours": 30}, "1 day ago"),
        ({"days": 4}, "4 days ago"),
        ({"days": 60}, "2 months ago"),
        ({"days": 800}, "about 2 years ago"),
    ],
)
def test_fmt_relative(delta, expected) -> None:
    assert fmt_relative(_ago(**delta), now=NOW) == expected


def test_fmt_relative_passes_through_garbage() -> None:
    assert fmt_relative("not a date", now=NOW) == "not a date"


def test_utcnow_iso_is_parseable_and_sortable() -> None:
    stamp = utcnow_iso()
    assert stamp.endswith("Z")
    assert fmt_display(stamp).endswith("UTC")


def test_extract_json_handles_prose_and_fences() -> None:
    assert extract_json_from_text('Here you go: {"signal": "safe"} thanks') == {"signal": "safe"}
    assert extract_json_from_text('```json\n{"a": 1}\n```') == {"a": 1}
    assert extract_json_from_text("no json here") is None
    assert extract_json_from_text("[1, 2, 3]") is None


def test_validate_reports_path() -> None:
    schema = {"type": "object", "properties": {"signal": {"enum": ["safe"]}}}
    assert validate({"signal": "safe"}, schema) == []
    errors = validate({"signal": "maybe"}, schema)
    assert errors and errors[0].startswith("signal:")


def test_extract_json_skips_braces_that_are_not_json() -> None:
    reply = 'Checked {the sender}. Verdict:\n```json\n{"signal": "caution", "reasoning": [{"text": "x"}]}\n```'
    assert extract_json_from_text(reply) == {"signal": "caution", "reasoning": [{"text": "x"}]}
    assert extract_json_from_text('{oops} then {"signal": "safe"}') == {"signal": "safe"}


def test_validate_collects_every_error() -> None:
    schema = {
        "type": "object",
        "properties": {"signal": {"enum": ["safe"]}, "delayReducesRisk": {"type": "boolean"}},
    }
    errors = validate({"signal": "maybe", "delayReducesRisk": "yes"}, schema)
    assert len(errors) == 2
    assert errors[0].startswith("delayReducesRisk:")
    assert errors[1].startswith("signal:")


def test_missing_analysis_fields() -> None:
    assert missing_analysis_fields({"signal": "safe", "signalLabel": "Safe", "reasoning": []}) == []
    assert missing_analysis_fields({"signal": "", "reasoning": None}) == ["signal", "signalLabel", "reasoning"]
