# pagebuilder/models/page_revision.py
from sqlalchemy import event, inspect
from pagebuilder.extensions import db
from .base import BaseModel

# Columns the publish step may flip after insert; everything else is frozen.
MUTABLE_REVISION_FIELDS = {"is_published", "status", "updated_at"}


class PageRevision(BaseModel):
    __tablename__ = "page_revisions"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id"),
        nullable=False
    )

    revision_hash = db.Column(db.String(8), nullable=False)
    parent_revision_id = db.Column(
        db.String(36),
        db.ForeignKey("page_revisions.id"),
        nullable=True,
        index=True
    )

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(20), nullable=False)  # draft | published
    color_theme = db.Column(db.String(100), nullable=True)

    widgets_snapshot = db.Column(db.Text, nullable=False, default="[]")

    created_by = db.Column(db.String(36), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    is_published = db.Column(db.Boolean, nullable=False, default=False, index=True)

    __table_args__ = (
        db.UniqueConstraint("page_id", "revision_hash", name="uq_page_revision_hash"),
        db.Index("idx_page_revision_page", "page_id", "created_at"),
    )

    @property
    def widgets(self):
        from pagebuilder.utils.versioning import decode_snapshot

        return decode_snapshot(self.widgets_snapshot)


@event.listens_for(PageRevision, "before_update")
def prevent_revision_mutation(mapper, connection, target):
    state = inspect(target)
    changed = {
        prop.key
        for prop in mapper.column_attrs
        if state.attrs[prop.key].history.has_changes()
    }
    frozen = changed - MUTABLE_REVISION_FIELDS
    if frozen:
        raise RuntimeError(f"Page revisions are immutable (attempted to change {sorted(frozen)})")


@event.listens_for(PageRevision, "before_delete")
def prevent_revision_delete(mapper, connection, target):
    raise RuntimeError("Page revisions are permanent history")
