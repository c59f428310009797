"""Rebuild a nested, sorted hierarchy from a flat recursive listing."""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Iterator

from repopick.tree.models import Entry, EntryKind, Node

logger = logging.getLogger(__name__)


def _sort_key(node: Node) -> tuple[int, str, str]:
    """Directories first, then accent- and case-folded name, then raw name as tie-break.

    NFKD splits accented letters into base letter plus combining mark, so
    "\u00e9" sorts next to "e" rather than after "z".
    """
    folded = unicodedata.normalize("NFKD", node.name).casefold()
    return (0 if node.is_dir else 1, folded, node.name)


def _sort_recursive(node: Node) -> None:
    if node.children is None:
        return
    node.children.sort(key=_sort_key)
    for child in node.children:
        _sort_recursive(child)


def build_tree(entries: Iterable[Entry], root_name: str = "") -> Node:
    """Build the nested tree for a flat list of entries.

    Every entry ends up exactly once under the returned synthetic root.
    An entry whose parent directory is missing from the listing (for
    example because upstream truncated it) is attached to the root
    instead of being dropped. Output is independent of input order.
    """
    nodes: dict[str, Node] = {}
    for entry in entries:
        # Duplicate paths: last write wins.
        nodes[entry.path] = Node(
            name=entry.path.rsplit("/", 1)[-1],
            path=entry.path,
            kind=entry.kind,
            id=entry.id,
            children=[] if entry.is_dir else None,
        )

    root = Node(name=root_name, path="", kind=EntryKind.DIR, children=[])
    for path, node in nodes.items():
        if "/" not in path:
            root.children.append(node)
            continue

        parent = nodes.get(path.rsplit("/", 1)[0])
        if parent is not None and parent.is_dir:
            parent.children.append(node)
        else:
            logger.debug("parent of %s missing from listing; attaching to root", path)
            root.children.append(node)

    _sort_recursive(root)
    return root


def iter_files(node: Node) -> Iterator[Node]:
    """Yield every file node under ``node`` in display order."""
    if not node.is_dir:
        yield node
        return
    for child in node.children or []:
        yield from iter_files(child)


def count_nodes(node: Node) -> tuple[int, int]:
    """Return (directories, files) below ``node``, not counting ``node`` itself."""
    dirs = files = 0
    for child in node.children or []:
        if child.is_dir:
            dirs += 1
            sub_dirs, sub_files = count_nodes(child)
            dirs += sub_dirs
            files += sub_files
        else:
            files += 1
    return dirs, files
