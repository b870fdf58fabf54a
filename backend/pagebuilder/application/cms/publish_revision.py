# pagebuilder/application/cms/publish_revision.py
from typing import Optional
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from pagebuilder.models.page_revision import PageRevision
from pagebuilder.repositories.sql import SqlPageStore, SqlRevisionStore
from pagebuilder.repositories.stores import (
    ClearPublishedFlags,
    MarkRevisionPublished,
    PageStore,
    ReplaceLiveWidgets,
    RevisionStore,
    UpdatePageMetadata,
)
from pagebuilder.utils.audit import log_action
from pagebuilder.utils.transaction import transactional
from pagebuilder.utils.versioning import decode_snapshot
from .create_revision import insert_page_revision
from .lookups import require_page, require_revision


def publish_revision(
    *,
    page_id: str,
    revision_id: str,
    published_by: Optional[str] = None,
    revisions: Optional[RevisionStore] = None,
    pages: Optional[PageStore] = None,
) -> PageRevision:
    """
    Publish a historical revision by cherry-picking it onto the head.

    History is never rewound: a new revision carrying the source content is
    created, parented on the currently published revision (or on the source
    when nothing has been published yet), and becomes the live page.

    Responsibilities:
    - row-level lock on the page
    - head revision creation
    - atomic swap of published flag, page metadata and live widgets
    - audit logging

    Retrying after a failure publishes again and therefore creates another
    head; publish is not idempotent.
    """
    revisions = revisions or SqlRevisionStore()
    pages = pages or SqlPageStore()

    try:
        with transactional():
            # 1️⃣ Lock the page and resolve the source revision
            require_page(page_id, for_update=True, pages=pages)
            source = require_revision(page_id, revision_id, revisions=revisions)

            # 2️⃣ Whatever is live right now becomes the parent of the new head
            published = revisions.get_published_revision(page_id)

            # 3️⃣ Cherry-pick the source content onto a new head
            head = insert_page_revision(
                page_id=page_id,
                title=source.title,
                slug=source.slug,
                status="published",
                color_theme=source.color_theme,
                widgets=decode_snapshot(source.widgets_snapshot),
                parent_revision_id=published.id if published else source.id,
                created_by=published_by,
                notes=f"Published from revision {source.revision_hash}",
                revisions=revisions,
            )

            # 4️⃣ Swap the live page over in one batch
            revisions.run_batch([
                ClearPublishedFlags(page_id),
                MarkRevisionPublished(head.id),
                UpdatePageMetadata(
                    page_id,
                    title=head.title,
                    slug=head.slug,
                    status="published",
                    color_theme=head.color_theme,
                ),
                ReplaceLiveWidgets(page_id, decode_snapshot(head.widgets_snapshot)),
            ])

            # 5️⃣ Audit logging
            log_action(
                action="revision.publish",
                entity_type="page",
                entity_id=page_id,
                actor_id=published_by,
                payload={
                    "source_revision_id": source.id,
                    "source_revision_hash": source.revision_hash,
                    "revision_id": head.id,
                    "revision_hash": head.revision_hash,
                    "previous_published_id": published.id if published else None,
                },
            )
    except SQLAlchemyError:
        current_app.logger.exception(
            "Publishing revision %s of page %s failed", revision_id, page_id
        )
        raise

    current_app.logger.info(
        "Published revision %s of page %s as %s",
        source.revision_hash,
        page_id,
        head.revision_hash,
    )
    return head
