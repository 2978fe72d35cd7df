"""Settings panel — runtime configuration display."""
import gradio as gr
from rely import config


def build():
    with gr.Accordion("Settings", open=False):
        gr.Markdown(f"**Analysis mode:** `{config.RELY_ANALYSIS_MODE}`")
        gr.Markdown(f"**Heuristic fallback:** `{'enabled' if config.RELY_HEURISTIC_FALLBACK else 'disabled'}`")
        gr.Markdown(f"**Gateway:** `{config.RELY_GATEWAY_URL}`")
        gr.Markdown(f"**Model:** `{config.RELY_MODEL_ID}`")
        gr.Markdown(f"**Prompt version:** `{config.RELY_PROMPT_VERSION}`")
        gr.Markdown(f"**API key:** `{'configured' if config.RELY_API_KEY else 'missing'}`")
        gr.Markdown("*To change these settings, update environment variables and restart the app.*")
