"""
RELY — Reliance-Safety Engine — Gradio application.

Main entrypoint for the RELY web app. Users paste text, a URL, or attach a
file; the content is sent to the inference gateway (or the local heuristic
classifier) and the reliance verdict is rendered with action guidance.

Sections:
  - Analyze: content-type selector, input box, optional upload, verdict panel
  - History: the 50 most recent verdicts, selectable to reopen
  - Settings: runtime configuration display

The page toggles between input and result views with gr.Group visibility.
"""
import html
import sys
import logging
from pathlib import Path

# Ensure project root is on sys.path when run from rely_app/ directly
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import gradio as gr

from rely import config
from rely.db.db import get_conn, init_db
from rely.db.repo import entry_to_analysis, get_analysis, list_recent_analyses
from rely.errors import EmptyContentError, GatewayError
from rely.pipeline.analyze_pipeline import run_analysis
from rely.util.files import write_json
from rely.util.time import fmt_display
from scripts.init_space_storage import ensure_space_storage
from rely_app.ui.components import analysis_html, history_rows
from rely_app.ui.pages import analyze as analyze_page
from rely_app.ui.pages import history as history_page
from rely_app.ui.pages import settings as settings_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

APP_TITLE = "RELY"
DB_PATH = config.DB_PATH

RELY_CSS = """
.rely-header { text-align:center; margin-bottom:8px; }
.rely-header h1 { font-size:1.75rem; font-weight:600; margin:0; }
.rely-header p { color:#5f6368; margin:4px 0 0 0; }
.rely-alert { padding:10px 14px; border-radius:8px; font-size:0.9rem; margin:6px 0; }
.rely-alert-info { background:#e8f0fe; color:#1967d2; }
.rely-alert-success { background:#e6f4ea; color:#137333; }
.rely-alert-error { background:#fce8e6; color:#c5221f; }
.rely-signal { display:inline-flex; align-items:center; gap:8px; padding:6px 14px; border-radius:999px; font-weight:600; }
.rely-dot { display:inline-block; width:10px; height:10px; border-radius:50%; }
.rely-dot-green { background:#34a853; }
.rely-dot-amber { background:#fbbc04; }
.rely-dot-red { background:#ea4335; }
.rely-reasons { list-style:none; padding:0; margin:0 0 12px 0; }
.rely-reason { padding:6px 0; border-bottom:1px solid #f1f3f4; }
.rely-tag { display:inline-block; font-size:0.7rem; text-transform:uppercase; letter-spacing:0.04em;
            background:#f1f3f4; color:#5f6368; border-radius:4px; padding:1px 6px; margin-right:8px; }
.rely-actions { display:flex; gap:12px; flex-wrap:wrap; margin:12px 0; }
.rely-card { flex:1; min-width:220px; border:1px solid #e0e0e0; border-radius:8px; padding:12px; }
.rely-card-title { font-weight:600; margin-bottom:6px; }
.rely-card-safe .rely-card-title { color:#137333; }
.rely-card-avoid .rely-card-title { color:#c5221f; }
.rely-delay { font-size:0.9rem; color:#5f6368; margin:8px 0; }
.rely-delay-on { color:#b06000; font-weight:500; }
.rely-disclosure { font-size:0.85rem; color:#3c4043; background:#f8f9fa; border-radius:8px; padding:10px 12px; }
.rely-footer { text-align:center; color:#9aa0a6; font-size:0.75rem; margin-top:24px; }
"""

HEADER_HTML = f"""
<div class="rely-header">
  <h1>{APP_TITLE}</h1>
  <p>Universal Reliance-Safety Engine</p>
</div>"""

FOOTER_HTML = """
<div class="rely-footer">
  <p>Operates on invariant properties, not stylistic cues.</p>
  <p>Truth is often unknowable. Reliance safety is not.</p>
</div>"""


# ─────────────────────────── Helpers ──────────────────────────────────────

def _default_state() -> dict:
    return {
        "current_result": None,
        "history_ids": [],
    }


def _alert(msg: str, kind: str = "info") -> str:
    return f'<div class="rely-alert rely-alert-{kind}">{html.escape(msg)}</div>'


def load_history(st: dict) -> tuple[dict, list, object]:
    """Return (state, table rows, accordion update) for the history browser."""
    conn = get_conn(DB_PATH)
    entries = list_recent_analyses(conn, limit=config.HISTORY_LIMIT)
    st["history_ids"] = [e["analysis_id"] for e in entries]
    return st, history_rows(entries), gr.update(label=history_page.history_label(len(entries)))


def export_result(st: dict):
    result = st.get("current_result")
    if not result:
        return gr.update(visible=False)
    path = config.EXPORTS_DIR / f"{result['analysis_id']}.json"
    write_json(path, result)
    return gr.update(visible=True, value=str(path))


# ─────────────────────────── Main Blocks app ─────────────────────────────

def main() -> gr.Blocks:
    ensure_space_storage(storage_dir=config.STORAGE_DIR, db_path=DB_PATH)
    init_db(DB_PATH, config.SCHEMA_PATH)

    with gr.Blocks(title=APP_TITLE, css=RELY_CSS) as demo:
        state = gr.State(_default_state())

        gr.HTML(HEADER_HTML)
        page = analyze_page.build()
        hist = history_page.build()
        settings_page.build()
        gr.HTML(FOOTER_HTML)

        # ═══════════════════════════════════════════════════════════════════
        # HANDLERS
        # ═══════════════════════════════════════════════════════════════════

        def show_result(st: dict, html_body: str, status: str):
            return (
                st,
                status,
                html_body,
                gr.update(visible=False),
                gr.update(visible=True),
                gr.update(visible=False, value=None),
            )

        def failed(st: dict, msg: str):
            return (st, _alert(msg, "error"), "", gr.update(), gr.update(), gr.update())

        def evaluate(content: str, content_type: str, file_path, st: dict, progress=gr.Progress()):
            if not (content or "").strip() and not file_path:
                return failed(st, "Please enter some content or attach a file")

            def progress_cb(step: int, total: int, msg: str):
                progress((step, total), desc=msg)

            try:
                result = run_analysis(
                    content,
                    content_type,
                    file_path=Path(file_path) if file_path else None,
                    conn=get_conn(DB_PATH),
                    progress_cb=progress_cb,
                )
            except (EmptyContentError, GatewayError) as e:
                logger.warning("Analysis failed: %s", e)
                return failed(st, f"Analysis failed: {e}")
            except Exception as e:
                logger.exception("Analysis failed")
                return failed(st, f"Analysis failed: {e}")

            st["current_result"] = result
            note = ""
            if result["pipeline_errors"]:
                note = " (gateway unavailable, heuristic verdict shown)"
            status = _alert(f"Analysis complete{note}", "success")
            return show_result(st, analysis_html(result["analysis"]), status)

        def reset(st: dict):
            st["current_result"] = None
            return (
                st,
                "",
                "",
                gr.update(visible=True),
                gr.update(visible=False),
                gr.update(visible=False, value=None),
            )

        def open_from_history(st: dict, evt: gr.SelectData):
            row = evt.index[0] if isinstance(evt.index, (list, tuple)) else evt.index
            ids = st.get("history_ids", [])
            if row is None or row >= len(ids):
                return failed(st, "History entry not found")
            entry = get_analysis(get_conn(DB_PATH), ids[row])
            if entry is None:
                return failed(st, "History entry not found")
            st["current_result"] = {
                "analysis_id": entry["analysis_id"],
                "created_at": entry["created_at"],
                "content": entry["content"],
                "content_type": entry["content_type"],
                "file_url": entry["file_url"],
                "file_name": entry["file_name"],
                "mode": entry["mode"],
                "model_name": entry["model_name"],
                "analysis": entry_to_analysis(entry),
            }
            status = _alert(f"Analysis from {fmt_display(entry['created_at'])}", "info")
            return show_result(st, analysis_html(entry_to_analysis(entry)), status)

        # ═══════════════════════════════════════════════════════════════════
        # WIRE UP
        # ═══════════════════════════════════════════════════════════════════

        _view_outputs = [
            state, page["status_html"], page["result_html"],
            page["input_group"], page["result_group"], page["export_file"],
        ]
        _history_outputs = [state, hist["history_table"], hist["history_accordion"]]

        page["content_type"].change(
            lambda t: gr.update(placeholder=analyze_page.PLACEHOLDERS.get(t, "")),
            inputs=[page["content_type"]],
            outputs=[page["content_input"]],
        )
        page["content_input"].change(
            analyze_page.char_count_md, inputs=[page["content_input"]], outputs=[page["char_count"]]
        )
        page["evaluate_btn"].click(
            evaluate,
            inputs=[page["content_input"], page["content_type"], page["file_input"], state],
            outputs=_view_outputs,
        ).then(load_history, inputs=[state], outputs=_history_outputs)
        page["reset_btn"].click(reset, inputs=[state], outputs=_view_outputs)
        page["export_btn"].click(export_result, inputs=[state], outputs=[page["export_file"]])

        hist["refresh_btn"].click(load_history, inputs=[state], outputs=_history_outputs)
        hist["history_table"].select(open_from_history, inputs=[state], outputs=_view_outputs)
        demo.load(load_history, inputs=[state], outputs=_history_outputs)

    return demo


def launch() -> None:
    main().launch()


if __name__ == "__main__":
    launch()
