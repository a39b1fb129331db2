"""Structural fields derived from a slash-delimited tag path."""
from typing import List, NamedTuple

SEPARATOR = "/"


class TagPath(NamedTuple):
    """Canonical path plus its prefix, last segment and segment count."""

    path: str
    prefix: str
    name: str
    depth: int


def _segments(path: str) -> List[str]:
    # Empty segments from doubled separators are dropped
    return [segment for segment in path.split(SEPARATOR) if segment]


def derive(path: str) -> TagPath:
    """Derive path, prefix, name and depth from a raw tag path.

    Leading and trailing separators are ignored, so deriving from an
    already canonical path yields the same fields.

    Examples:
        >>> derive("tag")
        TagPath(path='/tag', prefix='/', name='tag', depth=1)
        >>> derive("/top/subpath/tag/")
        TagPath(path='/top/subpath/tag', prefix='/top/subpath', name='tag', depth=3)
    """
    segments = _segments(path)
    if not segments:
        return TagPath(path=SEPARATOR, prefix=SEPARATOR, name="", depth=1)

    *head, name = segments
    return TagPath(
        path=SEPARATOR + SEPARATOR.join(segments),
        prefix=SEPARATOR + SEPARATOR.join(head),
        name=name,
        depth=len(segments),
    )


def canonical(path: str) -> str:
    return derive(path).path


def parent_path(path: str) -> str:
    """Return the path with its last segment dropped ("/" for top level)."""
    return derive(path).prefix
