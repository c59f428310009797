"""File selection and combined-document aggregation."""

from repopick.selection.aggregator import FetchBody, ProgressCallback, aggregate
from repopick.selection.models import (
    CombinedDocument,
    EmptySelectionError,
    ProgressEvent,
    Section,
)
from repopick.selection.selection_set import RepoSession, SelectionSet

__all__ = [
    "CombinedDocument",
    "EmptySelectionError",
    "FetchBody",
    "ProgressCallback",
    "ProgressEvent",
    "RepoSession",
    "Section",
    "SelectionSet",
    "aggregate",
]
