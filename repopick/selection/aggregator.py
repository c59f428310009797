"""Sequential fetch-and-join of selected files into one document."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable

from repopick.selection.models import (
    CombinedDocument,
    EmptySelectionError,
    ProgressEvent,
    Section,
)
from repopick.vcs.models import VCSError

logger = logging.getLogger(__name__)

FetchBody = Callable[[str], Awaitable[str]]
ProgressCallback = Callable[[ProgressEvent], None]


async def _fetch_section(path: str, fetch_body: FetchBody) -> Section:
    try:
        body = await fetch_body(path)
    except VCSError as e:
        logger.warning("fetch failed for %s: %s", path, e)
        return Section(path=path, status="error", detail=str(e), http_status=e.status)
    except Exception as e:
        logger.warning("network error fetching %s", path, exc_info=True)
        return Section(path=path, status="error", detail=str(e) or type(e).__name__)
    return Section(path=path, status="ok", body=body)


async def aggregate(
    repository: str,
    paths: Iterable[str],
    fetch_body: FetchBody,
    on_progress: ProgressCallback | None = None,
    *,
    include_header: bool = True,
) -> CombinedDocument:
    """Fetch every selected path one at a time and join the results.

    Paths are processed in case-sensitive lexicographic order. A failed
    fetch becomes an error section and never stops the batch; the
    returned document always has one section per requested path.

    Raises EmptySelectionError before any fetch if ``paths`` is empty.
    """
    ordered = sorted(set(paths))
    if not ordered:
        raise EmptySelectionError()

    emit = on_progress or (lambda event: None)
    total = len(ordered)
    doc = CombinedDocument(repository=repository, paths=ordered, include_header=include_header)
    logger.info("combining %d file(s) from %s", total, repository)

    for index, path in enumerate(ordered, start=1):
        emit(ProgressEvent(kind="fetching", path=path, index=index, total=total))
        section = await _fetch_section(path, fetch_body)
        doc.sections.append(section)
        emit(
            ProgressEvent(
                kind="done" if section.ok else "error", path=path, index=index, total=total
            )
        )

    logger.info(
        "combined %s: %d ok, %d failed", repository, doc.ok_count, doc.error_count
    )
    return doc
