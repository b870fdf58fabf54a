"""
Revision history graph for a single page.

``build_revision_tree`` turns the flat revision table into nodes annotated
with depth and branch lanes for the history view; ``find_heads`` returns the
tips of every branch. Both are pure and work on any objects exposing ``id``,
``parent_revision_id`` and ``created_at``.
"""
from collections import deque
from datetime import datetime, timezone
from itertools import count
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from .exceptions import RevisionTreeError


class RevisionNode:
    """Read-only view of a revision placed in the history graph."""

    __slots__ = ("revision", "children", "depth", "branch")

    def __init__(self, revision: Any):
        self.revision = revision
        self.children: List["RevisionNode"] = []
        self.depth = 0
        self.branch = 0

    @property
    def id(self) -> str:
        return self.revision.id

    @property
    def parent_revision_id(self):
        return self.revision.parent_revision_id

    @property
    def created_at(self):
        return self.revision.created_at

    def __repr__(self) -> str:
        return f"<RevisionNode {self.id} depth={self.depth} branch={self.branch}>"


def _timestamp(revision: Any) -> float:
    value = getattr(revision, "created_at", None)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise RevisionTreeError(
        "Revision is missing a usable created_at",
        revision_id=getattr(revision, "id", None),
    )


def _by_created_at(node: RevisionNode) -> float:
    return _timestamp(node.revision)


def build_revision_tree(revisions: Sequence[Any]) -> List[RevisionNode]:
    """
    Build the branch/depth graph for one page's revisions.

    - Revisions whose parent is present become children of that parent.
    - Unparented revisions (no parent, or a parent outside the set) are
      ordered by creation time. The earliest is the root; the rest are
      orphans, linked into a chronological chain.
    - When the root has no children of its own the orphan chain continues
      under it, so parentless history reads as one line. Otherwise the
      first orphan becomes a second root on its own branch, leaving the
      root's real children where they are.
    - Roots are seeded with consecutive branch numbers, then a breadth-first
      walk assigns depth; the first (oldest) child continues its parent's
      branch and every further child forks a new branch from a counter
      shared by the whole walk.
    - Nodes on a parent cycle are unreachable from any root; the earliest of
      them is detached from its parent and walked as a fresh root.

    Returns every node, newest first.
    """
    if not revisions:
        return []

    nodes: Dict[str, RevisionNode] = {}
    for revision in revisions:
        revision_id = getattr(revision, "id", None)
        if not revision_id:
            raise RevisionTreeError("Revision is missing an id")
        _timestamp(revision)
        nodes[revision_id] = RevisionNode(revision)

    unparented: List[RevisionNode] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_revision_id) if node.parent_revision_id else None
        if parent is not None and parent is not node:
            parent.children.append(node)
        else:
            unparented.append(node)

    roots: List[RevisionNode] = []
    if unparented:
        root, *orphans = sorted(unparented, key=_by_created_at)
        roots.append(root)
        if orphans:
            if root.children:
                roots.append(orphans[0])
            else:
                orphans.insert(0, root)
            for previous, orphan in zip(orphans, orphans[1:]):
                previous.children.append(orphan)

    branches = count()
    visited: set = set()
    result: List[RevisionNode] = []

    result.extend(_walk([(root, next(branches)) for root in roots], branches, visited))

    while len(visited) < len(nodes):
        stranded = min(
            (n for n in nodes.values() if n.id not in visited),
            key=_by_created_at,
        )
        parent = nodes.get(stranded.parent_revision_id)
        if parent is not None and stranded in parent.children:
            parent.children.remove(stranded)
        result.extend(_walk([(stranded, next(branches))], branches, visited))

    result.sort(key=_by_created_at, reverse=True)
    return result


def _walk(seeds: List[Tuple[RevisionNode, int]], branches: Iterator[int], visited: set) -> List[RevisionNode]:
    walked = []
    queue = deque((root, 0, branch) for root, branch in seeds)

    while queue:
        node, depth, lane = queue.popleft()
        if node.id in visited:
            continue
        visited.add(node.id)

        node.depth = depth
        node.branch = lane
        node.children.sort(key=_by_created_at)
        walked.append(node)

        for index, child in enumerate(node.children):
            if child.id in visited:
                continue
            queue.append((child, depth + 1, lane if index == 0 else next(branches)))

    return walked


def find_heads(revisions: Sequence[Any]) -> List[Any]:
    """Revisions that are nobody's parent: the tip of every branch."""
    parent_ids = {r.parent_revision_id for r in revisions if r.parent_revision_id}
    return [r for r in revisions if r.id not in parent_ids]
