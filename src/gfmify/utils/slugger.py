"""GitHub-compatible heading slugs.

:class:`Slugger` is a per-document registry: it turns heading text into a
URL fragment the way GitHub does (lowercase, punctuation dropped, spaces
to hyphens) and appends ``-1``, ``-2``, ... to repeats so that no two
headings in one document share an ``id``.

A slugger holds state for exactly one document.  Create a new one per
render call; never share it between calls.
"""

from __future__ import annotations

import re

# Everything that is not a word character, hyphen or plain space.
_DISALLOWED_RE = re.compile(r"[^\w\- ]")


def slugify(value: str) -> str:
    """Return the GitHub slug for *value* without de-duplication.

    Examples
    --------
    >>> slugify("Hello, World!")
    'hello-world'
    >>> slugify("Foo  bar")
    'foo--bar'
    """
    return _DISALLOWED_RE.sub("", value.lower()).replace(" ", "-")


class Slugger:
    """Unique slug registry for a single document."""

    __slots__ = ("_occurrences",)

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, value: str) -> str:
        """Return a slug for *value* that is unique within this registry."""
        result = slugify(value)
        original = result
        while result in self._occurrences:
            self._occurrences[original] += 1
            result = f"{original}-{self._occurrences[original]}"
        self._occurrences[result] = 0
        return result
