import gradio as gr
from functools import partial

from log_prettifier.config import load_settings
from log_prettifier.handlers_viewer import (
    clear_search_handler,
    jump_to_match_handler,
    load_viewer,
    next_match_handler,
    prettify_handler,
    previous_match_handler,
    scroll_handler,
    scroll_settled_handler,
    search_handler,
)
from log_prettifier.logging_setup import setup_logging
from log_prettifier.search import FrameThrottle

HEAD = """
<script>
let prettifierTicking = false;
let prettifierOwnScroll = false;
let prettifierSettleTimer = null;

window.prettifierScrollToActive = function () {
  setTimeout(function () {
    const pane = document.getElementById("output-pane");
    const pre = document.getElementById("prettifier-output");
    if (!pane || !pre || pre.dataset.scrollTo === undefined) return;
    const target = parseInt(pre.dataset.scrollTo, 10);
    if (pane.scrollTop === target) return;
    // the scroll event this causes is navigation, not a user scroll
    prettifierOwnScroll = true;
    clearTimeout(prettifierSettleTimer);
    pane.scrollTop = target;
  }, 0);
};

window.prettifierSyncMarks = function () {
  const hit = document.querySelector(".hitmap .hit.active");
  const active = hit ? hit.dataset.index : null;
  document.querySelectorAll("#prettifier-output mark[data-match]").forEach(function (mark) {
    mark.classList.toggle("active", mark.dataset.match === active);
  });
};

function prettifierSend(elemId, value) {
  const input = document.querySelector("#" + elemId + " input");
  if (!input) return;
  input.value = String(value);
  input.dispatchEvent(new Event("input", { bubbles: true }));
}

document.addEventListener("keydown", function (e) {
  const box = document.querySelector("#search-box input, #search-box textarea");
  if (e.target !== box || e.key !== "Enter" || !e.shiftKey) return;
  e.preventDefault();
  e.stopPropagation();
  document.getElementById("prev-btn").click();
}, true);

document.addEventListener("click", function (e) {
  const hit = e.target.closest && e.target.closest(".hitmap .hit");
  if (hit) prettifierSend("hit-index", hit.dataset.index);
});

document.addEventListener("scroll", function (e) {
  if (!e.target || e.target.id !== "output-pane") return;
  if (prettifierOwnScroll) {
    prettifierOwnScroll = false;
    return;
  }
  clearTimeout(prettifierSettleTimer);
  prettifierSettleTimer = setTimeout(function () {
    const btn = document.getElementById("scroll-settle-btn");
    if (btn) btn.click();
  }, 150);
  if (prettifierTicking) return;
  prettifierTicking = true;
  requestAnimationFrame(function () {
    prettifierTicking = false;
    prettifierSend("scroll-offset", Math.round(e.target.scrollTop));
  });
}, true);
</script>
"""

SCROLL_JS = "() => { window.prettifierScrollToActive && window.prettifierScrollToActive(); }"
SYNC_MARKS_JS = "() => { window.prettifierSyncMarks && window.prettifierSyncMarks(); }"


def build_css(line_height: int) -> str:
    return f"""
#output-pane {{ max-height: 70vh; overflow-y: auto; position: relative; }}
#prettifier-output {{ margin: 0; line-height: {line_height}px; white-space: pre; font-family: monospace; }}
.offscreen {{ position: absolute !important; left: -10000px; }}
.hitmap {{ position: relative; height: 70vh; width: 14px; background: #eee; }}
.hitmap .hit {{ position: absolute; left: 1px; width: 12px; height: 3px; background: #f0c000; cursor: pointer; }}
.hitmap .hit.active {{ background: #e05000; height: 5px; }}
mark.mark {{ background: #fff3a0; }}
mark.mark.active {{ background: #ffb347; outline: 1px solid #e05000; }}
.tok-key {{ color: #a31515; }}
.tok-string {{ color: #0b7500; }}
.tok-number {{ color: #1750eb; }}
.tok-bool, .tok-null {{ color: #0000ff; font-weight: bold; }}
.tok-punc {{ color: #666; }}
.tok-tag {{ color: #800000; }}
.tok-attr {{ color: #e50000; }}
.tok-eq {{ color: #666; }}
.tok-val {{ color: #0451a5; }}
.tok-comment {{ color: #008000; font-style: italic; }}
"""


def build_demo(settings):
    # --- UI Definition ---
    with gr.Blocks(title="Log Prettifier", css=build_css(settings.line_height), head=HEAD) as demo:
        gr.Markdown("# Log Prettifier")
        gr.Markdown("Paste a log selection. JSON or XML inside it is extracted, pretty-printed and colored.")

        # State
        viewer_state = gr.State()
        # callable value: one throttle per browser session
        throttle_state = gr.State(FrameThrottle)

        with gr.Row():
            # Left Panel: Selection
            with gr.Column(scale=1):
                gr.Markdown("### 1. Selection")
                selection_input = gr.Textbox(label="Selected text", lines=12, placeholder="Paste log output here")
                prettify_btn = gr.Button("Prettify Logs", variant="primary")
                status_msg = gr.Textbox(label="Status", interactive=False)

            # Right Panel: Viewer
            with gr.Column(scale=3):
                gr.Markdown("### 2. Viewer")
                with gr.Row():
                    badge = gr.Textbox(label="Format", interactive=False, scale=1)
                    search_box = gr.Textbox(label="Search", placeholder="Find in output", elem_id="search-box", scale=3)
                    counter = gr.Textbox(label="Matches", value="0 / 0", interactive=False, scale=1)
                with gr.Row():
                    prev_btn = gr.Button("Prev", elem_id="prev-btn")
                    next_btn = gr.Button("Next", elem_id="next-btn")
                    clear_btn = gr.Button("Clear")
                    jump_dropdown = gr.Dropdown(label="Jump to match", choices=[], interactive=True)
                with gr.Row():
                    output_html = gr.HTML(elem_id="output-pane")
                    hitmap_html = gr.HTML(elem_id="hitmap-pane")

                scroll_offset = gr.Number(value=0, elem_id="scroll-offset", elem_classes=["offscreen"])
                hit_index = gr.Number(value=-1, elem_id="hit-index", elem_classes=["offscreen"])
                settle_btn = gr.Button("Sync", elem_id="scroll-settle-btn", elem_classes=["offscreen"])

        view_outputs = [viewer_state, badge, output_html, counter, hitmap_html, jump_dropdown]

        demo.load(fn=partial(load_viewer, settings), inputs=None, outputs=view_outputs)

        prettify_btn.click(
            fn=partial(prettify_handler, settings=settings),
            inputs=[selection_input],
            outputs=view_outputs + [search_box, status_msg],
        )

        search_box.input(
            fn=partial(search_handler, settings=settings),
            inputs=[viewer_state, search_box],
            outputs=view_outputs,
        ).then(fn=None, js=SCROLL_JS)

        search_box.submit(
            fn=partial(next_match_handler, settings=settings),
            inputs=[viewer_state],
            outputs=view_outputs,
        ).then(fn=None, js=SCROLL_JS)

        next_btn.click(
            fn=partial(next_match_handler, settings=settings),
            inputs=[viewer_state],
            outputs=view_outputs,
        ).then(fn=None, js=SCROLL_JS)

        prev_btn.click(
            fn=partial(previous_match_handler, settings=settings),
            inputs=[viewer_state],
            outputs=view_outputs,
        ).then(fn=None, js=SCROLL_JS)

        clear_btn.click(
            fn=partial(clear_search_handler, settings=settings),
            inputs=[viewer_state],
            outputs=view_outputs + [search_box],
        )

        jump_dropdown.input(
            fn=partial(jump_to_match_handler, settings=settings),
            inputs=[viewer_state, jump_dropdown],
            outputs=view_outputs,
        ).then(fn=None, js=SCROLL_JS)

        hit_index.input(
            fn=partial(jump_to_match_handler, settings=settings),
            inputs=[viewer_state, hit_index],
            outputs=view_outputs,
        ).then(fn=None, js=SCROLL_JS)

        sync_outputs = [viewer_state, throttle_state, counter, hitmap_html, jump_dropdown]

        scroll_offset.input(
            fn=partial(scroll_handler, settings=settings),
            inputs=[viewer_state, throttle_state, scroll_offset],
            outputs=sync_outputs,
            show_progress="hidden",
        ).then(fn=None, js=SYNC_MARKS_JS)

        settle_btn.click(
            fn=partial(scroll_settled_handler, settings=settings),
            inputs=[viewer_state, throttle_state],
            outputs=sync_outputs,
            show_progress="hidden",
        ).then(fn=None, js=SYNC_MARKS_JS)

    return demo


if __name__ == "__main__":
    app_settings = load_settings()
    setup_logging(app_settings.log_level)
    build_demo(app_settings).launch(server_port=app_settings.server_port)
