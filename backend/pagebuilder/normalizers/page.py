from pagebuilder.utils.versioning import to_timestamp
from .widget import normalize_widget


def normalize_page(page, include_widgets=True):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "status": page.status,
        "color_theme": page.color_theme,
        "created_at": to_timestamp(page.created_at),
        "updated_at": to_timestamp(page.updated_at),
    }

    if include_widgets:
        widgets = sorted(page.widgets, key=lambda w: w.position)
        data["widgets"] = [normalize_widget(w) for w in widgets]

    return data
