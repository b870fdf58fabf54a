"""Tests for revision creation and the publish engine."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from pagebuilder.application.cms.create_revision import create_revision
from pagebuilder.application.cms.edit_widgets import replace_widgets
from pagebuilder.application.cms.publish_revision import publish_revision
from pagebuilder.domain.exceptions import (
    PageNotFound,
    RevisionNotFound,
    ValidationFailure,
)
from pagebuilder.extensions import db
from pagebuilder.models.audit_log import AuditLog
from pagebuilder.models.page import Page
from pagebuilder.models.page_revision import PageRevision
from pagebuilder.repositories.sql import SqlPageStore, SqlRevisionStore


def _published(page_id):
    return PageRevision.query.filter_by(page_id=page_id, is_published=True).all()


def _live_types(page_id):
    return [w["type"] for w in SqlPageStore().get_live_widgets(page_id)]


class TestCreateRevision:
    def test_snapshots_live_page(self, make_page):
        page = make_page(widgets=[{"type": "text"}, {"type": "image"}], color_theme="ocean")
        revision = create_revision(page_id=page.id, created_by="alice", data={"notes": "first"})

        assert revision.parent_revision_id is None
        assert revision.is_published is False
        assert revision.title == page.title
        assert revision.color_theme == "ocean"
        assert revision.created_by == "alice"
        assert revision.notes == "first"
        assert [w["type"] for w in revision.widgets] == ["text", "image"]
        assert [w["position"] for w in revision.widgets] == [0, 1]

    def test_payload_overrides_and_normalizes(self, make_page):
        page = make_page()
        revision = create_revision(page_id=page.id, data={
            "title": "Draft title",
            "components": [{"id": "b", "type": "text", "position": 7}, {"id": "a", "type": "hero", "position": 7}],
        })

        assert revision.title == "Draft title"
        assert [(w["id"], w["position"]) for w in revision.widgets] == [("a", 0), ("b", 1)]

    def test_defaults_parent_to_published_revision(self, make_page):
        page = make_page(widgets=[{"type": "text"}])
        first = create_revision(page_id=page.id)
        head = publish_revision(page_id=page.id, revision_id=first.id)

        second = create_revision(page_id=page.id)
        assert second.parent_revision_id == head.id

    def test_explicit_parent(self, make_page):
        page = make_page()
        first = create_revision(page_id=page.id)
        second = create_revision(page_id=page.id, data={"parent_revision_id": first.id})
        assert second.parent_revision_id == first.id

    def test_unknown_parent(self, make_page):
        page = make_page()
        with pytest.raises(RevisionNotFound):
            create_revision(page_id=page.id, data={"parent_revision_id": "missing"})

    def test_unknown_page(self, app):
        with pytest.raises(PageNotFound):
            create_revision(page_id="missing")

    def test_invalid_status(self, make_page):
        page = make_page()
        with pytest.raises(ValidationFailure):
            create_revision(page_id=page.id, data={"status": "archived"})

    def test_widgets_must_be_objects(self, make_page):
        page = make_page()
        with pytest.raises(ValidationFailure) as excinfo:
            create_revision(page_id=page.id, data={"widgets": ["text"]})

        assert excinfo.value.context == {"page_id": page.id}
        assert PageRevision.query.filter_by(page_id=page.id).count() == 0

    def test_hashes_are_unique_per_page(self, make_page):
        page = make_page()
        hashes = {create_revision(page_id=page.id).revision_hash for _ in range(10)}
        assert len(hashes) == 10

    def test_writes_audit_entry(self, make_page):
        page = make_page()
        revision = create_revision(page_id=page.id, created_by="alice")
        entry = AuditLog.query.filter_by(action="revision.create", entity_id=page.id).one()
        assert entry.actor_id == "alice"
        assert entry.payload["revision_id"] == revision.id


class TestPublishRevision:
    def test_first_publish_parents_on_source(self, make_page):
        page = make_page(widgets=[{"type": "text"}])
        source = create_revision(page_id=page.id)

        head = publish_revision(page_id=page.id, revision_id=source.id, published_by="bob")

        assert head.id != source.id
        assert head.parent_revision_id == source.id
        assert head.is_published is True
        assert head.status == "published"
        assert head.created_by == "bob"
        assert head.notes == f"Published from revision {source.revision_hash}"
        assert head.revision_hash != source.revision_hash

    def test_publish_never_mutates_source(self, make_page):
        page = make_page(widgets=[{"type": "text"}])
        source = create_revision(page_id=page.id, data={"status": "draft"})
        publish_revision(page_id=page.id, revision_id=source.id)

        db.session.expire_all()
        reloaded = db.session.get(PageRevision, source.id)
        assert reloaded.is_published is False
        assert reloaded.status == "draft"
        assert reloaded.parent_revision_id is None

    def test_republishing_old_revision_builds_on_current_head(self, make_page):
        page = make_page(widgets=[{"type": "text"}])
        original = create_revision(page_id=page.id)
        first_head = publish_revision(page_id=page.id, revision_id=original.id)

        replace_widgets(page_id=page.id, widgets=[{"type": "hero"}, {"type": "button"}])
        edited = create_revision(page_id=page.id)
        second_head = publish_revision(page_id=page.id, revision_id=edited.id)
        assert second_head.parent_revision_id == first_head.id
        assert _live_types(page.id) == ["hero", "button"]

        restored = publish_revision(page_id=page.id, revision_id=original.id)

        assert restored.parent_revision_id == second_head.id
        assert _live_types(page.id) == ["text"]
        assert [r.id for r in _published(page.id)] == [restored.id]
        assert PageRevision.query.filter_by(page_id=page.id).count() == 5

    def test_updates_live_page(self, make_page):
        page = make_page(widgets=[{"type": "text"}])
        source = create_revision(page_id=page.id, data={"title": "Launch", "color_theme": "dusk"})
        publish_revision(page_id=page.id, revision_id=source.id)

        db.session.expire_all()
        live = db.session.get(Page, page.id)
        assert live.title == "Launch"
        assert live.color_theme == "dusk"
        assert live.status == "published"

    def test_at_most_one_published(self, make_page):
        page = make_page(widgets=[{"type": "text"}])
        revisions = [create_revision(page_id=page.id) for _ in range(3)]
        for revision in revisions:
            publish_revision(page_id=page.id, revision_id=revision.id)

        assert len(_published(page.id)) == 1

    def test_unknown_revision(self, make_page):
        page = make_page()
        with pytest.raises(RevisionNotFound):
            publish_revision(page_id=page.id, revision_id="missing")

    def test_revision_of_other_page(self, make_page):
        page, other = make_page(), make_page()
        foreign = create_revision(page_id=other.id)
        with pytest.raises(RevisionNotFound):
            publish_revision(page_id=page.id, revision_id=foreign.id)

    def test_failed_batch_rolls_back_everything(self, make_page):
        page = make_page(widgets=[{"type": "text"}])
        source = create_revision(page_id=page.id)
        head = publish_revision(page_id=page.id, revision_id=source.id)

        class FailingStore(SqlRevisionStore):
            def run_batch(self, operations):
                super().run_batch(operations[:2])
                raise SQLAlchemyError("connection lost")

        replace_widgets(page_id=page.id, widgets=[{"type": "hero"}])
        edited = create_revision(page_id=page.id)
        before = PageRevision.query.filter_by(page_id=page.id).count()

        with pytest.raises(SQLAlchemyError):
            publish_revision(page_id=page.id, revision_id=edited.id, revisions=FailingStore())

        db.session.expire_all()
        assert PageRevision.query.filter_by(page_id=page.id).count() == before
        assert [r.id for r in _published(page.id)] == [head.id]
        assert _live_types(page.id) == ["hero"]


class TestRevisionImmutability:
    def test_content_cannot_change(self, make_page):
        page = make_page()
        revision = create_revision(page_id=page.id)

        revision.title = "rewritten"
        with pytest.raises(RuntimeError):
            db.session.commit()
        db.session.rollback()

    def test_cannot_delete(self, make_page):
        page = make_page()
        revision = create_revision(page_id=page.id)

        db.session.delete(revision)
        with pytest.raises(RuntimeError):
            db.session.commit()
        db.session.rollback()
