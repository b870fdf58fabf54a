from typing import Optional
from pagebuilder.models.page import Page
from pagebuilder.utils.audit import log_action
from pagebuilder.utils.transaction import transactional


def delete_page(
    *,
    page: Page,
    actor_id: Optional[str],
) -> None:
    """
    Soft-delete a page.

    Notes:
    - Revision history is permanent, so revisions stay in place
    - Live widgets are kept with the page row for restore/forensics
    """
    with transactional():
        page.soft_delete()

        log_action(
            action="page.delete",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"slug": page.slug},
        )
