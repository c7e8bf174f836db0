from .renderers import (
    RenderResult,
    render_payload,
    render_kv_table_html,
    render_validation_report,
    render_state,
    render_failure,
    render_outputs,
)

__all__ = [
    "RenderResult",
    "render_payload",
    "render_kv_table_html",
    "render_validation_report",
    "render_state",
    "render_failure",
    "render_outputs",
]
