from pagebuilder.utils.versioning import snapshot_widget


def normalize_widget(widget):
    """Accepts a Widget row or an already-snapshotted widget dict."""
    if isinstance(widget, dict):
        return {
            "id": widget.get("id"),
            "page_id": widget.get("page_id"),
            "type": widget.get("type"),
            "position": widget.get("position"),
            "config": widget.get("config") or {},
            "created_at": widget.get("created_at"),
            "updated_at": widget.get("updated_at"),
        }
    return snapshot_widget(widget)
