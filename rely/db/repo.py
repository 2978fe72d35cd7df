"""Append-only access to the analysis_history table."""
import json
import sqlite3
from typing import Optional

from rely import config
from rely.types import HistoryEntry, RelianceAnalysis
from rely.util.hashing import hash_string
from rely.util.ids import new_analysis_id
from rely.util.time import utcnow_iso

_JSON_COLUMNS = {
    "reasoning_json": "reasoning",
    "safe_actions_json": "safe_actions",
    "avoid_actions_json": "avoid_actions",
}


def _row_to_entry(row: sqlite3.Row) -> HistoryEntry:
    d = dict(row)
    for column, key in _JSON_COLUMNS.items():
        raw = d.pop(column)
        d[key] = json.loads(raw) if raw else []
    d["delay_reduces_risk"] = bool(d["delay_reduces_risk"])
    return d


def insert_analysis(
    conn: sqlite3.Connection,
    *,
    content: str,
    content_type: str,
    analysis: RelianceAnalysis,
    file_url: Optional[str] = None,
    file_name: Optional[str] = None,
    mode: str = "ai",
    model_name: str = "",
    analysis_id: Optional[str] = None,
    created_at: Optional[str] = None,
) -> str:
    """Store one verdict. Only the first CONTENT_STORE_LIMIT characters of content are kept."""
    analysis_id = analysis_id or new_analysis_id()
    conn.execute(
        """INSERT INTO analysis_history
        (analysis_id, created_at, content, content_type, content_hash,
         signal, signal_label, reasoning_json, safe_actions_json, avoid_actions_json,
         delay_reduces_risk, uncertainty_disclosure, file_url, file_name, mode, model_name)
        VALUES (?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?)""",
        (
            analysis_id,
            created_at or utcnow_iso(),
            content[: config.CONTENT_STORE_LIMIT],
            content_type,
            hash_string(content),
            analysis["signal"],
            analysis["signal_label"],
            json.dumps(analysis.get("reasoning", [])),
            json.dumps(analysis.get("safe_actions", [])),
            json.dumps(analysis.get("avoid_actions", [])),
            int(bool(analysis.get("delay_reduces_risk", False))),
            analysis.get("uncertainty_disclosure", ""),
            file_url or None,
            file_name or None,
            mode,
            model_name,
        ),
    )
    conn.commit()
    return analysis_id


def list_recent_analyses(conn: sqlite3.Connection, limit: int = config.HISTORY_LIMIT) -> list[HistoryEntry]:
    """Newest first, never more than HISTORY_LIMIT entries."""
    limit = max(0, min(limit, config.HISTORY_LIMIT))
    rows = conn.execute(
        "SELECT * FROM analysis_history ORDER BY created_at DESC, rowid DESC LIMIT ?",
        (limit,),
    ).fetchall()
    return [_row_to_entry(r) for r in rows]


def get_analysis(conn: sqlite3.Connection, analysis_id: str) -> Optional[HistoryEntry]:
    row = conn.execute(
        "SELECT * FROM analysis_history WHERE analysis_id=?", (analysis_id,)
    ).fetchone()
    if row is None:
        return None
    return _row_to_entry(row)


def entry_to_analysis(entry: HistoryEntry) -> RelianceAnalysis:
    """Project a stored history entry back onto the verdict fields shown in the UI."""
    return {
        "signal": entry["signal"],
        "signal_label": entry["signal_label"],
        "reasoning": entry.get("reasoning") or [],
        "safe_actions": entry.get("safe_actions") or [],
        "avoid_actions": entry.get("avoid_actions") or [],
        "delay_reduces_risk": bool(entry.get("delay_reduces_risk")),
        "uncertainty_disclosure": entry.get("uncertainty_disclosure", ""),
    }
