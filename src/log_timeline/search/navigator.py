"""Match set computation and cyclic navigation across matches."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from log_timeline.corpus import searchable_text
from log_timeline.ingestion.models import LogRecord
from log_timeline.search.query import evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchState:
    """Ordered match indices into the corpus plus the current position.

    Every navigation method returns a new state; out-of-range requests return
    ``self`` unchanged.
    """

    matches: tuple[int, ...] = ()
    current_index: Optional[int] = None
    show_only_matches: bool = False
    query: str = ""

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def current_record_index(self) -> Optional[int]:
        """Corpus index of the current match."""
        if self.current_index is None:
            return None
        return self.matches[self.current_index]

    @property
    def target(self) -> Optional[int]:
        """Index to scroll to in the list currently on display.

        In matches-only mode that list is the matches themselves, so the
        target is the match's rank; otherwise it is the corpus index.
        """
        if self.current_index is None:
            return None
        if self.show_only_matches:
            return self.current_index
        return self.matches[self.current_index]

    def next(self) -> MatchState:
        if not self.matches:
            return self
        current = -1 if self.current_index is None else self.current_index
        return replace(self, current_index=(current + 1) % len(self.matches))

    def previous(self) -> MatchState:
        if not self.matches:
            return self
        current = 0 if self.current_index is None else self.current_index
        return replace(self, current_index=(current - 1) % len(self.matches))

    def go_to(self, number: int) -> MatchState:
        """Jump to the 1-based match ``number``."""
        if not 1 <= number <= len(self.matches):
            return self
        return replace(self, current_index=number - 1)

    def toggle_show_only_matches(self) -> MatchState:
        return replace(self, show_only_matches=not self.show_only_matches)

    def view(self, records: Sequence[LogRecord]) -> list[LogRecord]:
        """The matched records, in corpus order."""
        return [records[i] for i in self.matches]


def search(
    query: str, records: Sequence[LogRecord], show_only_matches: bool = False
) -> MatchState:
    """Scan ``records`` in order and collect the indices matching ``query``."""
    if not query or not query.strip():
        return MatchState(show_only_matches=show_only_matches)

    matches = tuple(
        i for i, record in enumerate(records) if evaluate(query, searchable_text(record))
    )
    logger.info('Found %d matches for "%s"', len(matches), query)
    return MatchState(
        matches=matches,
        current_index=0 if matches else None,
        show_only_matches=show_only_matches,
        query=query,
    )
