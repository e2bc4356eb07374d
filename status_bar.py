import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, modes, source, visible_rows,
                  total_rows, visible_cols, total_cols, output_format
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        mode = str(context.get("mode", "row")).upper()
        modes = context.get("modes") or []
        if len(modes) > 1:
            mode = f"{mode} ({len(modes)} modes, Tab)"
        source = context.get("source") or ""
        rows = f"{context.get('visible_rows', 0)}/{context.get('total_rows', 0)} rows"
        visible_cols = context.get("visible_cols", 0)
        total_cols = context.get("total_cols", 0)
        cols = f"{visible_cols} cols"
        if visible_cols != total_cols:
            cols = f"{visible_cols}/{total_cols} cols"
        out = str(context.get("output_format", "plain"))
        text = f" {mode} | {source} | {rows} | {cols} | out:{out}"

    return text.ljust(width)[:width]
