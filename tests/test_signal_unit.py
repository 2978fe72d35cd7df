import pytest

from rely.scoring.signal import (
    DISCLOSURE_LIMITED,
    DISCLOSURE_STANDARD,
    DISCLOSURE_UNVERIFIABLE,
    actions_for_signal,
    analyze_content,
    compute_risk,
    signal_badge,
    signal_for_score,
)

NEUTRAL_LONG = (
    "The community garden meets on Saturday mornings to plant tomatoes and herbs. "
    "Volunteers bring their own gloves and share seeds with the neighbours."
)


def test_neutral_long_content_is_safe_with_default_reasoning() -> None:
    analysis = analyze_content(NEUTRAL_LONG, "text")
    assert analysis["signal"] == "safe"
    assert analysis["signal_label"] == "Safe to rely on"
    assert [p["category"] for p in analysis["reasoning"]] == ["coherence", "constraints", "uncertainty"]
    assert analysis["delay_reduces_risk"] is False
    assert analysis["uncertainty_disclosure"] == DISCLOSURE_STANDARD
    assert len(analysis["safe_actions"]) == 3
    assert len(analysis["avoid_actions"]) == 2


def test_scam_message_is_caution() -> None:
    content = "URGENT: verify your bank account and wire the payment immediately or it expires today."
    analysis = analyze_content(content, "text")
    assert analysis["signal"] == "caution"
    assert analysis["signal_label"] == "Use caution — high reliance risk"
    assert analysis["delay_reduces_risk"] is True
    assert analysis["uncertainty_disclosure"] == DISCLOSURE_UNVERIFIABLE
    categories = [p["category"] for p in analysis["reasoning"]]
    assert categories == ["constraints", "coherence", "context-density", "uncertainty"]
    assert "Making immediate financial commitments" in analysis["avoid_actions"]


def test_short_content_adds_context_point_and_limited_disclosure() -> None:
    analysis = analyze_content("Meeting moved to Tuesday.", "text")
    score, flags = compute_risk("Meeting moved to Tuesday.")
    assert flags["short"] is True
    assert score == 1
    assert analysis["signal"] == "safe"
    assert analysis["reasoning"][0] == {
        "category": "context-density",
        "text": "Insufficient context provided to establish a reliable basis for action.",
    }
    assert analysis["uncertainty_disclosure"] == DISCLOSURE_LIMITED


def test_emotional_language_scores_without_its_own_reasoning_point() -> None:
    content = "What an incredible sunset over the lake this evening, the colours lasted for a while."
    score, flags = compute_risk(content)
    assert flags == {"urgency": False, "authority": False, "money": False, "emotional": True, "short": False}
    assert score == 1
    analysis = analyze_content(content, "text")
    assert [p["category"] for p in analysis["reasoning"]] == ["coherence", "constraints", "uncertainty"]
    assert analysis["uncertainty_disclosure"] == DISCLOSURE_LIMITED


def test_money_alone_is_unclear_and_not_delayed() -> None:
    content = "Please find attached the invoice for the payment we discussed during last week's call."
    score, flags = compute_risk(content)
    assert score == 2
    analysis = analyze_content(content, "document")
    assert analysis["signal"] == "unclear"
    assert analysis["signal_label"] == "Unclear — delay or verify"
    assert analysis["delay_reduces_risk"] is False


def test_score_three_recommends_delay_without_urgency() -> None:
    content = "The bank has confirmed that the money transfer to your savings was processed as expected."
    score, flags = compute_risk(content)
    assert flags["urgency"] is False
    assert score == 3
    assert analyze_content(content)["delay_reduces_risk"] is True


def test_keyword_matching_is_case_insensitive() -> None:
    _, flags = compute_risk("ACT FAST — LIMITED TIME offer from the GOVERNMENT for BITCOIN holders only!!")
    assert flags["urgency"] and flags["authority"] and flags["money"]


def test_signal_thresholds() -> None:
    assert signal_for_score(0)[0] == "safe"
    assert signal_for_score(1)[0] == "safe"
    assert signal_for_score(2)[0] == "unclear"
    assert signal_for_score(3)[0] == "unclear"
    assert signal_for_score(4)[0] == "caution"
    assert signal_for_score(7)[0] == "caution"


def test_actions_for_signal_returns_copies() -> None:
    safe, avoid = actions_for_signal("unclear")
    safe.append("mutated")
    again, _ = actions_for_signal("unclear")
    assert "mutated" not in again
    assert avoid[0] == "Treating information as fully verified"


def test_signal_badge_dot_colors() -> None:
    assert "rely-dot-green" in signal_badge("safe")
    assert "background:#9aa0a6" in signal_badge("bogus")
    assert "rely-dot-amber" in signal_badge("unclear")


@pytest.mark.parametrize(
    ("length", "short", "score", "disclosure"),
    [
        (49, True, 1, DISCLOSURE_LIMITED),
        (50, False, 0, DISCLOSURE_LIMITED),
        (99, False, 0, DISCLOSURE_LIMITED),
        (100, False, 0, DISCLOSURE_STANDARD),
    ],
)
def test_length_thresholds_at_their_edges(length, short, score, disclosure) -> None:
    content = ("Tomatoes grow in the garden. " * 5)[:length]
    assert len(content) == length
    got_score, flags = compute_risk(content)
    assert flags["short"] is short
    assert got_score == score
    assert analyze_content(content)["uncertainty_disclosure"] == disclosure
