import pytest

from rely import config
from rely.db.repo import get_analysis, list_recent_analyses
from rely.errors import AnalysisFormatError, EmptyContentError, RateLimitError
from rely.pipeline import analyze_pipeline, gateway_client

GATEWAY_VERDICT = {
    "signal": "safe",
    "signal_label": "Safe to rely on",
    "reasoning": [{"category": "coherence", "text": "Consistent."}],
    "safe_actions": ["Proceed"],
    "avoid_actions": ["Over-relying"],
    "delay_reduces_risk": False,
    "uncertainty_disclosure": "Origin unknown.",
}


def _gateway_returns(monkeypatch, verdict=None, error=None):
    calls = []

    def fake_infer(content, content_type):
        calls.append((content, content_type))
        if error is not None:
            raise error
        return dict(verdict or GATEWAY_VERDICT)

    monkeypatch.setattr(gateway_client, "infer_analysis", fake_infer)
    return calls


def test_ai_mode_uses_gateway_and_saves_history(monkeypatch, conn) -> None:
    calls = _gateway_returns(monkeypatch)
    result = analyze_pipeline.run_analysis("  Lunch is at noon in the usual place.  ", "text", conn=conn)
    assert calls == [("Lunch is at noon in the usual place.", "text")]
    assert result["analysis"]["signal"] == "safe"
    assert result["mode"] == "ai"
    assert result["model_name"] == config.RELY_MODEL_ID
    assert result["history_saved"] is True
    stored = get_analysis(conn, result["analysis_id"])
    assert stored["content"] == "Lunch is at noon in the usual place."
    assert stored["created_at"] == result["created_at"]


def test_heuristic_mode_never_calls_gateway(monkeypatch) -> None:
    calls = _gateway_returns(monkeypatch)
    result = analyze_pipeline.run_analysis(
        "Act fast! Limited time bitcoin offer from a verified account.", "text", mode="heuristic"
    )
    assert calls == []
    assert result["analysis"]["signal"] == "caution"
    assert result["mode"] == "heuristic"
    assert result["model_name"] == analyze_pipeline.HEURISTIC_MODEL_NAME
    assert result["history_saved"] is False


def test_mode_defaults_to_config(monkeypatch) -> None:
    monkeypatch.setattr(config, "RELY_ANALYSIS_MODE", "heuristic")
    calls = _gateway_returns(monkeypatch)
    assert analyze_pipeline.run_analysis("anything at all")["mode"] == "heuristic"
    assert calls == []


def test_empty_content_is_rejected() -> None:
    with pytest.raises(EmptyContentError, match="Content is required"):
        analyze_pipeline.run_analysis("   ", "text")


def test_unknown_content_type_and_mode_are_rejected() -> None:
    with pytest.raises(ValueError):
        analyze_pipeline.run_analysis("hello", "video")
    with pytest.raises(ValueError):
        analyze_pipeline.run_analysis("hello", "text", mode="oracle")


def test_gateway_errors_propagate_without_fallback(monkeypatch, conn) -> None:
    _gateway_returns(monkeypatch, error=AnalysisFormatError())
    with pytest.raises(AnalysisFormatError):
        analyze_pipeline.run_analysis("some content to check", "text", conn=conn)
    assert list_recent_analyses(conn) == []


def test_fallback_uses_heuristic_and_records_error(monkeypatch, conn) -> None:
    monkeypatch.setattr(config, "RELY_HEURISTIC_FALLBACK", True)
    _gateway_returns(monkeypatch, error=AnalysisFormatError())
    result = analyze_pipeline.run_analysis("some content to check", "text", conn=conn)
    assert result["mode"] == "heuristic"
    assert result["pipeline_errors"] == ["Invalid analysis format returned"]
    assert get_analysis(conn, result["analysis_id"])["mode"] == "heuristic"


def test_rate_limit_never_falls_back(monkeypatch) -> None:
    monkeypatch.setattr(config, "RELY_HEURISTIC_FALLBACK", True)
    _gateway_returns(monkeypatch, error=RateLimitError())
    with pytest.raises(RateLimitError):
        analyze_pipeline.run_analysis("some content to check", "text")


def test_history_save_failure_does_not_fail_analysis(monkeypatch, conn) -> None:
    _gateway_returns(monkeypatch)
    conn.execute("DROP TABLE analysis_history")
    result = analyze_pipeline.run_analysis("content that will not be stored", "text", conn=conn)
    assert result["analysis"]["signal"] == "safe"
    assert result["history_saved"] is False


def test_progress_callback_reports_steps(monkeypatch, conn, tmp_path) -> None:
    _gateway_returns(monkeypatch)
    upload = tmp_path / "message.txt"
    upload.write_text("Your parcel is waiting, confirm delivery details.", encoding="utf-8")
    steps = []
    analyze_pipeline.run_analysis(
        "", "document", file_path=upload, conn=conn,
        progress_cb=lambda step, total, msg: steps.append((step, total, msg)),
    )
    assert [s[0] for s in steps] == [1, 2, 3]
    assert all(total == analyze_pipeline.TOTAL_STEPS for _, total, _ in steps)
    assert steps[0][2] == "Uploading file..."


def test_file_upload_is_attached_and_inlined(monkeypatch, conn, tmp_path) -> None:
    calls = _gateway_returns(monkeypatch)
    upload = tmp_path / "forwarded.txt"
    upload.write_text("Please transfer the deposit today.", encoding="utf-8")
    result = analyze_pipeline.run_analysis("Is this legit?", "document", file_path=upload, conn=conn)
    sent_content = calls[0][0]
    assert sent_content.startswith("Is this legit?")
    assert "Attached file forwarded.txt:" in sent_content
    assert "Please transfer the deposit today." in sent_content
    assert result["file_name"] == "forwarded.txt"
    assert result["file_url"].startswith("file://")
    stored = get_analysis(conn, result["analysis_id"])
    assert stored["file_url"] == result["file_url"]
