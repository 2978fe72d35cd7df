"""
Main analysis orchestrator.

Runs one submission through:
  1. Upload (only when a file accompanies the content)
  2. Analysis (gateway, or the local heuristic classifier)
  3. History (append the verdict when a DB connection is given)

Returns a structured result dict with the RelianceAnalysis under "analysis".
"""
import logging
import sqlite3
from pathlib import Path
from typing import Callable, Optional

from rely import config
from rely.db.repo import insert_analysis
from rely.errors import CreditsExhaustedError, EmptyContentError, GatewayError, RateLimitError
from rely.pipeline import gateway_client
from rely.scoring.signal import analyze_content
from rely.storage.uploads import describe_upload, upload_file
from rely.types import CONTENT_TYPES, ContentType, RelianceAnalysis
from rely.util.hashing import hash_string
from rely.util.ids import new_analysis_id
from rely.util.time import utcnow_iso

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]

MODES = ("ai", "heuristic")
HEURISTIC_MODEL_NAME = "rely-heuristic"
TOTAL_STEPS = 3


def _resolve_mode(mode: Optional[str]) -> str:
    mode = (mode or config.RELY_ANALYSIS_MODE).lower()
    if mode not in MODES:
        raise ValueError(f"Unknown analysis mode {mode!r}; expected one of {MODES}")
    return mode


def _analyze(content: str, content_type: ContentType, mode: str, errors: list[str]) -> tuple[RelianceAnalysis, str, str]:
    """Return (analysis, mode_used, model_name)."""
    if mode == "heuristic":
        return analyze_content(content, content_type), "heuristic", HEURISTIC_MODEL_NAME

    try:
        return gateway_client.infer_analysis(content, content_type), "ai", config.RELY_MODEL_ID
    except (RateLimitError, CreditsExhaustedError):
        raise
    except GatewayError as e:
        if not config.RELY_HEURISTIC_FALLBACK:
            raise
        logger.warning("Gateway analysis failed, using heuristic classifier: %s", e)
        errors.append(str(e))
        return analyze_content(content, content_type), "heuristic", HEURISTIC_MODEL_NAME


def save_to_history(conn: sqlite3.Connection, result: dict) -> bool:
    """Append a pipeline result to history. Failures are logged, never raised."""
    try:
        insert_analysis(
            conn,
            analysis_id=result["analysis_id"],
            created_at=result["created_at"],
            content=result["content"],
            content_type=result["content_type"],
            analysis=result["analysis"],
            file_url=result.get("file_url"),
            file_name=result.get("file_name"),
            mode=result["mode"],
            model_name=result["model_name"],
        )
        return True
    except sqlite3.Error as e:
        logger.error("Failed to save to history: %s", e)
        return False


def run_analysis(
    content: str,
    content_type: ContentType = "text",
    file_path: Optional[Path] = None,
    file_url: Optional[str] = None,
    file_name: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
    mode: Optional[str] = None,
    progress_cb: Optional[ProgressCallback] = None,
) -> dict:
    """
    Analyse one submission.

    Args:
        content: Text, URL or description entered by the user
        content_type: "text" | "url" | "image" | "document"
        file_path: Optional local file to upload and attach
        file_url, file_name: An already-uploaded attachment (ignored when file_path is given)
        conn: Optional history DB connection; the verdict is saved when given
        mode: "ai" | "heuristic", defaults to RELY_ANALYSIS_MODE
        progress_cb: Optional callable(step: int, total: int, message: str)

    Returns:
        Result dict with the verdict under "analysis"
    """
    if content_type not in CONTENT_TYPES:
        raise ValueError(f"Unknown content type {content_type!r}")
    mode = _resolve_mode(mode)
    analysis_id = new_analysis_id()
    errors: list[str] = []
    content = (content or "").strip()

    def progress(step: int, msg: str):
        logger.info("[%s] Step %d/%d: %s", analysis_id, step, TOTAL_STEPS, msg)
        if progress_cb:
            progress_cb(step, TOTAL_STEPS, msg)

    # ── Step 1: Upload ────────────────────────────────────────────────────
    if file_path is not None:
        progress(1, "Uploading file...")
        file_url, file_name = upload_file(Path(file_path), file_name)
        content = describe_upload(Path(file_path), file_name, file_url, content)

    if not content:
        raise EmptyContentError()

    # ── Step 2: Analysis ──────────────────────────────────────────────────
    progress(2, "Analyzing content with AI..." if mode == "ai" else "Analyzing content...")
    analysis, mode_used, model_name = _analyze(content, content_type, mode, errors)

    result = {
        "analysis_id": analysis_id,
        "created_at": utcnow_iso(),
        "content": content,
        "content_type": content_type,
        "content_hash": hash_string(content),
        "file_url": file_url or None,
        "file_name": file_name or None,
        "mode": mode_used,
        "model_name": model_name,
        "prompt_version": config.RELY_PROMPT_VERSION,
        "analysis": analysis,
        "pipeline_errors": errors,
        "history_saved": False,
    }

    # ── Step 3: History ───────────────────────────────────────────────────
    if conn is not None:
        progress(3, "Saving to history...")
        result["history_saved"] = save_to_history(conn, result)

    logger.info("[%s] Analysis complete. Signal=%s Mode=%s", analysis_id, analysis["signal"], mode_used)
    return result
