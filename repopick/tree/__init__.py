"""Flat listing to nested tree reconstruction."""

from repopick.tree.builder import build_tree, count_nodes, iter_files
from repopick.tree.models import Entry, EntryKind, Node

__all__ = [
    "Entry",
    "EntryKind",
    "Node",
    "build_tree",
    "count_nodes",
    "iter_files",
]
