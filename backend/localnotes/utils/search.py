from __future__ import annotations

from typing import Protocol, Sequence, TypeVar


class _Searchable(Protocol):
    title: str
    content: str


N = TypeVar("N", bound=_Searchable)


def project(notes: Sequence[N], search_term: str | None) -> list[N]:
    """Return the notes whose title or content contains `search_term`, case-insensitively.

    An empty term keeps every note. Order is preserved and the input is never mutated.
    """
    if not search_term:
        return list(notes)
    needle = search_term.casefold()
    return [
        n for n in notes
        if needle in (n.title or "").casefold() or needle in (n.content or "").casefold()
    ]
