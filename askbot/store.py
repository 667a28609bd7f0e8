"""
askbot/store.py
---------------
Keyed store of outstanding prompts (conversation key -> PendingPrompt).

The registry owns one store; callers may hand in their own mapping to
pre-seed it or share it between registries, and that mapping is used
as-is.
"""
from __future__ import annotations

from typing import Iterator, MutableMapping, Optional

from .identity import Key
from .pending import PendingPrompt


class PromptStore:
    def __init__(self, mapping: Optional[MutableMapping[Key, PendingPrompt]] = None):
        self._map: MutableMapping[Key, PendingPrompt] = {} if mapping is None else mapping

    def get(self, key: Key) -> Optional[PendingPrompt]:
        return self._map.get(key)

    def set(self, key: Key, prompt: PendingPrompt) -> Optional[PendingPrompt]:
        """Store ``prompt`` and return the entry it replaced, if any."""
        previous = self._map.get(key)
        self._map[key] = prompt
        return previous

    def delete(self, key: Key) -> None:
        self._map.pop(key, None)

    def is_current(self, key: Key, prompt: PendingPrompt) -> bool:
        return self._map.get(key) is prompt

    def keys(self) -> Iterator[Key]:
        return iter(list(self._map))

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)
