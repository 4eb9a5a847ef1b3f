"""Parsing of whitespace-delimited event name lists."""

from __future__ import annotations

from collections.abc import Iterable

NameInput = str | Iterable[str] | None


def split_names(name_or_names: NameInput) -> list[str]:
    """Return the individual event names contained in ``name_or_names``.

    ``None`` and blank strings yield an empty list. Strings are split on runs
    of whitespace; other iterables are flattened with each element split the
    same way, so ``["a b", "c"]`` yields ``["a", "b", "c"]``.
    """
    if name_or_names is None:
        return []
    if isinstance(name_or_names, str):
        return name_or_names.split()
    names: list[str] = []
    for item in name_or_names:
        names.extend(split_names(item))
    return names
