import logging
import os

import gradio as gr
from dotenv import load_dotenv

load_dotenv()
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from json_table_viewer.config import configure_collation  # noqa: E402
from json_table_viewer.display_types import DISPLAY_TYPE_LABELS, ColumnDisplayType  # noqa: E402
from json_table_viewer.export import EXPORT_FORMATS  # noqa: E402
from json_table_viewer.formats import SUPPORTED_EXTENSIONS  # noqa: E402
from json_table_viewer.handlers import (  # noqa: E402
    SORT_CHOICES,
    SORT_TOGGLE,
    clear_handler,
    column_selected_handler,
    column_type_handler,
    copy_column_handler,
    copy_row_handler,
    export_handler,
    format_json_handler,
    load_sample_handler,
    parse_text_handler,
    resize_handler,
    restore_handler,
    save_now_handler,
    search_handler,
    sort_handler,
    upload_file_handler,
)
from json_table_viewer.samples import DEFAULT_SAMPLE, list_samples  # noqa: E402

configure_collation()

# --- UI Definition ---
with gr.Blocks(title="JSON Table Viewer") as demo:
    gr.Markdown("# JSON Table Viewer")
    gr.Markdown("Paste or upload JSON and browse it as a sortable, searchable table.")

    # State
    session_state = gr.State()

    with gr.Row():
        # Left Panel: Input
        with gr.Column(scale=1):
            gr.Markdown("### 1. Input")
            file_input = gr.File(label="Upload JSON File", file_types=list(SUPPORTED_EXTENSIONS))
            json_input = gr.Textbox(label="JSON", lines=18, max_lines=40, placeholder='[{"name": "Alice", "age": 30}]')
            with gr.Row():
                parse_btn = gr.Button("Show Table", variant="primary")
                format_btn = gr.Button("Format JSON")
                clear_btn = gr.Button("Clear")
                save_btn = gr.Button("Save")
            sample_selector = gr.Dropdown(
                label="Samples",
                choices=[(s['name'], s['key']) for s in list_samples()],
                value=DEFAULT_SAMPLE,
                interactive=True,
            )
            load_sample_btn = gr.Button("Load Sample")
            status_msg = gr.Textbox(label="Status", interactive=False)

        # Right Panel: Table
        with gr.Column(scale=2):
            gr.Markdown("### 2. Table")
            with gr.Row():
                search_box = gr.Textbox(label="Search", placeholder="Search all columns")
                container_width = gr.Slider(
                    label="Table Width (px)", minimum=300, maximum=2400, step=10, value=1200, interactive=True
                )
            table_info = gr.Textbox(label="Table Info", interactive=False)
            with gr.Row():
                column_selector = gr.Dropdown(label="Column", choices=[], interactive=True)
                type_selector = gr.Dropdown(
                    label="Display Type",
                    choices=[(label, t.value) for t, label in DISPLAY_TYPE_LABELS.items()],
                    value=ColumnDisplayType.AUTO.value,
                    interactive=True,
                )
                direction = gr.Radio(
                    choices=[SORT_TOGGLE, *SORT_CHOICES], value=SORT_TOGGLE, label="Sort Direction"
                )
                sort_btn = gr.Button("Sort")
            table_html = gr.HTML()

            gr.Markdown("### 3. Copy & Export")
            with gr.Row():
                include_header = gr.Checkbox(label="Include header", value=False)
                copy_column_btn = gr.Button("Copy Column")
                row_number = gr.Number(label="Row #", value=1, precision=0)
                row_format = gr.Radio(choices=["JSON", "Text"], value="JSON", label="Row Format")
                copy_row_btn = gr.Button("Copy Row")
            copy_output = gr.Textbox(label="Copied Text", lines=6, show_copy_button=True)
            with gr.Row():
                output_format = gr.Radio(choices=list(EXPORT_FORMATS), value="CSV", label="Output Format")
                output_filename = gr.Textbox(label="Output Filename (optional)", placeholder="table")
                export_btn = gr.Button("Export View")
            download_output = gr.File(label="Download Result")

    view = [session_state, table_html, table_info, status_msg, column_selector]

    demo.load(fn=restore_handler, inputs=[session_state], outputs=[*view, json_input, search_box])

    parse_btn.click(fn=parse_text_handler, inputs=[session_state, json_input], outputs=view)
    file_input.upload(fn=upload_file_handler, inputs=[session_state, file_input], outputs=[*view, json_input])
    format_btn.click(fn=format_json_handler, inputs=[json_input], outputs=[json_input, status_msg])
    clear_btn.click(fn=clear_handler, inputs=[session_state], outputs=[*view, json_input, search_box])
    save_btn.click(fn=save_now_handler, inputs=[session_state], outputs=[session_state, status_msg])
    load_sample_btn.click(fn=load_sample_handler, inputs=[session_state, sample_selector], outputs=[*view, json_input])

    search_box.change(fn=search_handler, inputs=[session_state, search_box], outputs=view, trigger_mode="always_last")
    container_width.release(fn=resize_handler, inputs=[session_state, container_width], outputs=view)

    column_selector.change(fn=column_selected_handler, inputs=[session_state, column_selector], outputs=[type_selector])
    type_selector.input(
        fn=column_type_handler, inputs=[session_state, column_selector, type_selector], outputs=view
    )
    sort_btn.click(fn=sort_handler, inputs=[session_state, column_selector, direction], outputs=view)

    copy_column_btn.click(
        fn=copy_column_handler, inputs=[session_state, column_selector, include_header], outputs=[copy_output]
    )
    copy_row_btn.click(fn=copy_row_handler, inputs=[session_state, row_number, row_format], outputs=[copy_output])
    export_btn.click(
        fn=export_handler,
        inputs=[session_state, output_format, output_filename],
        outputs=[download_output, status_msg],
    )

if __name__ == "__main__":
    demo.launch()
