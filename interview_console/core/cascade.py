"""
Dependent dropdowns.

A cascade is an ordered chain of selects where each level's options depend
on every value above it, e.g. university → program → batch. Changing a level
resets every level below it; options for the next level are loaded only when
the new value is non-empty.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Mapping, Sequence

from interview_console.core.fetcher import LatestOnlyFetcher

logger = logging.getLogger(__name__)

# Receives the ancestor values, outermost first
OptionsLoader = Callable[..., Awaitable[Any]]


def _as_options(payload: Any) -> list[str]:
    if not isinstance(payload, list):
        return []
    return [str(item) for item in payload if item not in (None, "")]


class CascadingSelect:
    """
    Values and option lists for a chain of dependent selects.

    Args:
        name: Used for logging and fetcher names
        levels: Level names, outermost first
        loaders: Level name -> coroutine function taking the ancestor values
        on_change: Called with (level, value) whenever a level is selected
    """

    def __init__(
        self,
        name: str,
        levels: Sequence[str],
        loaders: Mapping[str, OptionsLoader],
        on_change: Callable[[str, str], None] | None = None,
    ):
        if not levels:
            raise ValueError("A cascade needs at least one level")

        self.name = name
        self.levels: tuple[str, ...] = tuple(levels)
        self._loaders = dict(loaders)
        self._on_change = on_change

        self.values: dict[str, str] = {level: "" for level in self.levels}
        self.options: dict[str, list[str]] = {level: [] for level in self.levels}

        self._fetchers: dict[str, LatestOnlyFetcher[Any]] = {
            level: LatestOnlyFetcher(
                f"{name}.{level}",
                on_result=partial(self._set_options, level),
                on_error=partial(self._options_failed, level),
            )
            for level in self.levels
        }

    # =========================================================================
    # STATE
    # =========================================================================

    def _set_options(self, level: str, payload: Any) -> None:
        self.options[level] = _as_options(payload)

    def _options_failed(self, level: str, error: Exception) -> None:
        logger.warning(f"{self.name}: failed to load {level} options: {error}")
        self.options[level] = []

    def _index(self, level: str) -> int:
        try:
            return self.levels.index(level)
        except ValueError:
            raise KeyError(f"Unknown level: {level}") from None

    def descendants(self, level: str) -> tuple[str, ...]:
        return self.levels[self._index(level) + 1:]

    def ancestors(self, level: str) -> tuple[str, ...]:
        return self.levels[:self._index(level)]

    def is_enabled(self, level: str) -> bool:
        """A level is selectable once every ancestor has a value."""
        return all(self.values[ancestor] for ancestor in self.ancestors(level))

    def key_for(self, level: str) -> tuple[str, ...]:
        """Ancestor values keying ``level``'s options."""
        return tuple(self.values[ancestor] for ancestor in self.ancestors(level))

    @property
    def is_complete(self) -> bool:
        return all(self.values.values())

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def load_root(self) -> asyncio.Task | None:
        """Load options of the outermost level."""
        return self._load(self.levels[0])

    def select(self, level: str, value: str | None) -> asyncio.Task | None:
        """
        Set a level's value, reset its descendants and load the next level.

        Returns:
            The options fetch for the next level, if one was started
        """
        value = value or ""
        index = self._index(level)
        self.values[level] = value

        for descendant in self.descendants(level):
            self.values[descendant] = ""
            self.options[descendant] = []
            self._fetchers[descendant].cancel()

        if self._on_change is not None:
            self._on_change(level, value)

        if not value or index + 1 >= len(self.levels):
            return None
        return self._load(self.levels[index + 1])

    def reset(self) -> None:
        """Clear every value; only the root options survive."""
        self.select(self.levels[0], "")

    def _load(self, level: str) -> asyncio.Task | None:
        loader = self._loaders.get(level)
        if loader is None:
            return None
        key = self.key_for(level)
        return self._fetchers[level].trigger(lambda: loader(*key), key=key)

    async def wait(self) -> None:
        """Wait for every outstanding options fetch."""
        for fetcher in self._fetchers.values():
            await fetcher.wait()

    def close(self) -> None:
        for fetcher in self._fetchers.values():
            fetcher.close()

    def as_dict(self) -> dict[str, Any]:
        return {
            level: {
                "value": self.values[level],
                "options": list(self.options[level]),
                "enabled": self.is_enabled(level),
            }
            for level in self.levels
        }
