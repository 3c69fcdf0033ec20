"""Viewer state as one immutable, versioned value plus pure reducers.

Each reducer takes a ``ViewerState`` and returns a new one; nothing is
mutated in place. ``scroll_target`` is the index into ``view`` that the host
should bring into the viewport after the transition (None when the
transition does not ask for scrolling).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from log_timeline.config import TimelineConfig
from log_timeline.corpus import FilterState, LogCorpus, TimeRange, apply_filter
from log_timeline.ingestion.models import LogRecord
from log_timeline.search.navigator import MatchState, search
from log_timeline.timeline.layout import TimelineLayout


@dataclass(frozen=True)
class ViewerState:
    version: int = 0
    corpus: LogCorpus = field(default_factory=LogCorpus)
    filter: FilterState = field(default_factory=FilterState)
    view: tuple[LogRecord, ...] = ()
    match: MatchState = field(default_factory=MatchState)
    selected: Optional[LogRecord] = None
    scroll_target: Optional[int] = None


def _advance(state: ViewerState, **changes) -> ViewerState:
    changes.setdefault("scroll_target", None)
    return replace(state, version=state.version + 1, **changes)


def loaded(state: ViewerState, corpus: LogCorpus) -> ViewerState:
    """Replace everything with a freshly loaded corpus."""
    return _advance(
        state,
        corpus=corpus,
        filter=FilterState(),
        view=corpus.records,
        match=MatchState(),
        selected=None,
    )


def filtered(
    state: ViewerState,
    start: Optional[str] = None,
    end: Optional[str] = None,
    query: Optional[str] = None,
) -> ViewerState:
    """Re-filter the full corpus by time range and, optionally, a new query."""
    new_filter = FilterState(
        time_range=TimeRange(start or None, end or None),
        search_query=state.filter.search_query if query is None else query,
    )
    return _advance(state, filter=new_filter, view=apply_filter(state.corpus, new_filter))


def _match_view(state: ViewerState, match: MatchState) -> tuple[LogRecord, ...]:
    if match.show_only_matches and match.query:
        return tuple(match.view(state.corpus.records))
    return state.corpus.records


def _focus(state: ViewerState, match: MatchState, view: tuple[LogRecord, ...]) -> ViewerState:
    index = match.current_record_index
    return _advance(
        state,
        match=match,
        view=view,
        selected=state.corpus[index] if index is not None else state.selected,
        scroll_target=match.target,
    )


def search_submitted(state: ViewerState, query: str) -> ViewerState:
    """Recompute the match set over the full corpus."""
    show_only = state.match.show_only_matches
    new_filter = replace(state.filter, search_query=query)

    if not query.strip():
        return _advance(
            state,
            filter=new_filter,
            match=MatchState(show_only_matches=show_only),
            view=apply_filter(state.corpus, new_filter),
        )

    match = search(query, state.corpus.records, show_only_matches=show_only)
    state = replace(state, filter=new_filter)
    return _focus(state, match, _match_view(state, match))


def next_match(state: ViewerState) -> ViewerState:
    if not state.match.matches:
        return state
    return _focus(state, state.match.next(), state.view)


def previous_match(state: ViewerState) -> ViewerState:
    if not state.match.matches:
        return state
    return _focus(state, state.match.previous(), state.view)


def go_to_match(state: ViewerState, number: int) -> ViewerState:
    """Jump to the 1-based match ``number``; out of range is a no-op."""
    match = state.match.go_to(number)
    if match is state.match:
        return state
    return _focus(state, match, state.view)


def show_only_matches_toggled(state: ViewerState) -> ViewerState:
    match = state.match.toggle_show_only_matches()
    if not match.query:
        return _advance(state, match=match)
    return _advance(
        state,
        match=match,
        view=_match_view(state, match),
        scroll_target=match.target,
    )


def filter_reset(state: ViewerState) -> ViewerState:
    """Clear time range, query and matches; show the whole corpus."""
    return _advance(
        state,
        filter=FilterState(),
        match=MatchState(show_only_matches=state.match.show_only_matches),
        view=state.corpus.records,
    )


def selected(state: ViewerState, record: Optional[LogRecord]) -> ViewerState:
    return _advance(state, selected=record)


def layout_for(
    state: ViewerState,
    config: Optional[TimelineConfig] = None,
    viewport_width: Optional[float] = None,
) -> TimelineLayout:
    """Fresh layout of the records currently on display."""
    return TimelineLayout(state.view, config=config, viewport_width=viewport_width)
