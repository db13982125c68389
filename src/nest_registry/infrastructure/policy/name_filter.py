"""Blocklist-backed package name policy."""

from __future__ import annotations

from collections.abc import Iterable

from nest_registry.application.ports.name_policy import NamePolicyPort


class BlocklistNamePolicy(NamePolicyPort):
    """Refuses exact blocked names and names containing blocked fragments.

    Matching is case-insensitive and ignores ``-``/``_``/``.`` so that
    ``Std_Lib`` and ``std-lib`` are treated alike.
    """

    def __init__(
        self,
        *,
        blocked_names: Iterable[str] = (),
        blocked_fragments: Iterable[str] = (),
    ) -> None:
        self._names = frozenset(_fold(name) for name in blocked_names if name.strip())
        self._fragments = tuple(_fold(part) for part in blocked_fragments if part.strip())

    def is_allowed(self, name: str) -> bool:
        folded = _fold(name)
        if folded in self._names:
            return False
        return not any(fragment in folded for fragment in self._fragments)


def _fold(value: str) -> str:
    return value.strip().lower().replace("-", "").replace("_", "").replace(".", "")


__all__ = ["BlocklistNamePolicy"]
