"""The run-query action: pick the section under the cursor and execute it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_QUERY_SUFFIX
from .sections import Position, extract_section
from .session import SessionManager

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EditorDocument:
    """What the run-query action needs from the editor."""

    path: Path | None
    lines: Sequence[str]
    cursor: Position


def is_query_document(document: EditorDocument, suffix: str = DEFAULT_QUERY_SUFFIX) -> bool:
    return document.path is not None and document.path.name.endswith(suffix)


async def run_current_section(
    document: EditorDocument,
    manager: SessionManager,
    *,
    suffix: str = DEFAULT_QUERY_SUFFIX,
) -> str | None:
    """Execute the section at the cursor and return its serialized result.

    Documents that are not query documents are ignored without prompting or
    opening a session.
    """

    if not is_query_document(document, suffix):
        LOG.debug("Ignoring run request for non-query document", extra={"path": str(document.path)})
        return None
    query = extract_section(document.lines, document.cursor)
    return await manager.run_query(query)


__all__ = ["EditorDocument", "is_query_document", "run_current_section"]
