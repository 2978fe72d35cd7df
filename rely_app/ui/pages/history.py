"""History page — browse the most recent verdicts and reopen one."""
import gradio as gr

from rely_app.ui.components import HISTORY_HEADERS


def history_label(count: int) -> str:
    return f"Analysis History ({count})"


def build():
    with gr.Accordion(history_label(0), open=False) as history_accordion:
        history_table = gr.Dataframe(
            headers=HISTORY_HEADERS,
            datatype=["str", "str", "str", "str", "str"],
            interactive=False,
            wrap=True,
        )
        gr.Markdown("*Select a row to open that analysis*")
        refresh_btn = gr.Button("Refresh", size="sm")

    return {
        "history_accordion": history_accordion,
        "history_table": history_table,
        "refresh_btn": refresh_btn,
    }
