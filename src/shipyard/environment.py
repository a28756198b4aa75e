"""Environment store shared by every stage of a run.

Stages propagate derived facts (image name, app name, version) to later
stages through this store, and external commands receive it as their
process environment.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum


class MergePolicy(str, Enum):
    OVERWRITE = "overwrite"
    IF_ABSENT = "if_absent"


class EnvironmentStore:
    """Ordered string-to-string map with two write modes.

    ``set`` always overwrites. ``set_if_absent`` only writes when the key
    is missing or blank, which is how values read from files are kept
    from clobbering values a stage already derived.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = {}
        if initial:
            self.merge(initial, MergePolicy.OVERWRITE)

    def set(self, key: str, value: str) -> None:
        self._data[key] = "" if value is None else str(value)

    def set_if_absent(self, key: str, value: str) -> bool:
        """Write *value* unless *key* already holds a non-blank value.

        Returns True when the write happened.
        """
        if self._data.get(key, "").strip():
            return False
        self.set(key, value)
        return True

    def get(self, key: str) -> str:
        """Return the value for *key*, or an empty string when absent."""
        return self._data.get(key, "")

    def merge(self, values: Mapping[str, str], policy: MergePolicy) -> list[str]:
        """Apply a batch of values under one policy.

        Returns the keys that were actually written.
        """
        written: list[str] = []
        for key, value in values.items():
            if policy is MergePolicy.OVERWRITE:
                self.set(key, value)
                written.append(key)
            elif self.set_if_absent(key, value):
                written.append(key)
        return written

    def as_dict(self) -> dict[str, str]:
        return dict(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"EnvironmentStore({self._data!r})"
