"""Analyze page — capture text/URL/file input and show the reliance verdict."""
import gradio as gr

CONTENT_TYPE_CHOICES = [
    ("Text", "text"),
    ("URL", "url"),
    ("Image", "image"),
    ("Document", "document"),
]

PLACEHOLDERS = {
    "text": "Paste any text, claim, or message you want to evaluate for reliance safety...",
    "url": "Enter a URL to analyze the content at that address...",
    "image": "Paste an image URL or describe the image content...",
    "document": "Paste document text or describe the document contents...",
}


def char_count_md(content: str) -> str:
    return f"`{len(content or ''):,} chars`"


def build():
    """Build the analyze page. Returns dict of key components."""
    with gr.Group(visible=True) as input_group:
        gr.Markdown(
            "Evaluate whether content is safe to rely on for decision-making.  \n"
            "*Not \"real or fake\" — but \"safe to act on given uncertainty.\"*"
        )
        content_type = gr.Radio(
            choices=CONTENT_TYPE_CHOICES,
            value="text",
            label="Content type",
        )
        content_input = gr.Textbox(
            label="Content",
            lines=8,
            placeholder=PLACEHOLDERS["text"],
        )
        char_count = gr.Markdown(char_count_md(""))
        file_input = gr.File(
            label="Attach a file (optional)",
            type="filepath",
        )
        evaluate_btn = gr.Button("Evaluate", variant="primary", size="lg")

    status_html = gr.HTML()

    with gr.Group(visible=False) as result_group:
        result_html = gr.HTML()
        with gr.Row():
            export_btn = gr.Button("Export JSON", size="sm")
            reset_btn = gr.Button("← Evaluate another", size="sm")
        export_file = gr.File(label="Exported analysis", visible=False)

    return {
        "input_group": input_group,
        "content_type": content_type,
        "content_input": content_input,
        "char_count": char_count,
        "file_input": file_input,
        "evaluate_btn": evaluate_btn,
        "status_html": status_html,
        "result_group": result_group,
        "result_html": result_html,
        "export_btn": export_btn,
        "reset_btn": reset_btn,
        "export_file": export_file,
    }
