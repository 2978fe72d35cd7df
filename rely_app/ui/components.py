"""
Reusable HTML components for the RELY UI.

Provides rendering functions for the signal badge, reasoning list,
safe/avoid action cards, delay notice and uncertainty disclosure, plus the
row formatting used by the history browser.
"""
import html

from rely.scoring.signal import signal_badge
from rely.types import HistoryEntry, RelianceAnalysis
from rely.util.time import fmt_relative

SIGNAL_STYLE = {
    "safe": ("#137333", "#e6f4ea"),
    "unclear": ("#b06000", "#fef7e0"),
    "caution": ("#c5221f", "#fce8e6"),
}

CATEGORY_LABELS = {
    "coherence": "Coherence",
    "constraints": "Constraints",
    "continuity": "Continuity",
    "context-density": "Context density",
    "uncertainty": "Uncertainty",
}

HISTORY_HEADERS = ["Signal", "Type", "File", "Content", "When"]
HISTORY_PREVIEW_CHARS = 80


def truncate_content(text: str, max_length: int = HISTORY_PREVIEW_CHARS) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def signal_badge_html(signal: str, label: str = "") -> str:
    """Render the verdict chip. An empty label renders the dot alone (history rows)."""
    fg, bg = SIGNAL_STYLE.get(signal, ("#5f6368", "#f1f3f4"))
    text = f"<span>{html.escape(label)}</span>" if label else ""
    return (
        f'<span class="rely-signal" style="color:{fg};background:{bg};">'
        f"{signal_badge(signal)}{text}</span>"
    )


def reasoning_html(reasoning: list[dict]) -> str:
    if not reasoning:
        return "<p style='color:#5f6368;'>No reasoning returned.</p>"
    items = []
    for point in reasoning:
        category = point.get("category", "uncertainty")
        tag = CATEGORY_LABELS.get(category, category)
        items.append(
            f'<li class="rely-reason"><span class="rely-tag rely-tag-{html.escape(category)}">{tag}</span>'
            f'{html.escape(point.get("text", ""))}</li>'
        )
    return f'<ul class="rely-reasons">{"".join(items)}</ul>'


def actions_html(safe_actions: list[str], avoid_actions: list[str]) -> str:
    """Two cards side by side: what is safe to do now, and what to avoid."""
    def _card(title: str, actions: list[str], cls: str) -> str:
        lis = "".join(f"<li>{html.escape(a)}</li>" for a in actions) or "<li>None</li>"
        return f'<div class="rely-card {cls}"><div class="rely-card-title">{title}</div><ul>{lis}</ul></div>'

    return (
        '<div class="rely-actions">'
        + _card("Safe actions", safe_actions, "rely-card-safe")
        + _card("Avoid", avoid_actions, "rely-card-avoid")
        + "</div>"
    )


def delay_html(delay_reduces_risk: bool) -> str:
    if delay_reduces_risk:
        return '<div class="rely-delay rely-delay-on">Waiting before acting reduces risk here.</div>'
    return '<div class="rely-delay">Delay is not expected to change the risk.</div>'


def disclosure_html(text: str) -> str:
    return f'<div class="rely-disclosure"><strong>What is unknown:</strong> {html.escape(text)}</div>'


def analysis_html(analysis: RelianceAnalysis) -> str:
    """Full result panel for one verdict."""
    return f'''
    <div class="rely-result">
      <div class="rely-result-head">{signal_badge_html(analysis["signal"], analysis["signal_label"])}</div>
      <h4>Why</h4>
      {reasoning_html(analysis.get("reasoning", []))}
      {actions_html(analysis.get("safe_actions", []), analysis.get("avoid_actions", []))}
      {delay_html(bool(analysis.get("delay_reduces_risk")))}
      {disclosure_html(analysis.get("uncertainty_disclosure", ""))}
    </div>'''


def history_rows(entries: list[HistoryEntry]) -> list[list[str]]:
    """Dataframe rows for the history browser, newest first as stored."""
    rows = []
    for e in entries:
        rows.append([
            e["signal"],
            e["content_type"].capitalize(),
            e.get("file_name") or "",
            truncate_content(e.get("content", "")),
            fmt_relative(e["created_at"]),
        ])
    return rows
