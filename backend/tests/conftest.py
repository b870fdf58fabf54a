"""Shared fixtures: an app on the in-memory testing config and helpers to seed pages."""

from types import SimpleNamespace
from datetime import datetime, timedelta, timezone

import pytest

from pagebuilder import create_app
from pagebuilder.extensions import db


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_page(app):
    from pagebuilder.application.cms.create_page import create_page

    counter = iter(range(1, 1000))

    def _make(widgets=None, **data):
        n = next(counter)
        payload = {"title": f"Page {n}", "slug": f"page-{n}", **data}
        if widgets is not None:
            payload["widgets"] = widgets
        return create_page(actor_id="tester", data=payload)

    return _make


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def rev(id, parent=None, minutes=0):
    """Lightweight stand-in for a revision row (tree functions are duck-typed)."""
    return SimpleNamespace(
        id=id,
        parent_revision_id=parent,
        created_at=T0 + timedelta(minutes=minutes),
    )
