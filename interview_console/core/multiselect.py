"""
Dropdown widgets used by the admin forms.

CreatableMultiSelect keeps its selection in one of three states:

    EMPTY ──select sentinel──► SENTINEL_ONLY ──select other──► CUSTOM_SET
      ▲                           │   ▲                          │
      └──────deselect sentinel────┘   └──────select sentinel─────┘

The sentinel ("No specific industry") never shares the selection with any
other value.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, Sequence

logger = logging.getLogger(__name__)

NO_SPECIFIC_INDUSTRY = "No specific industry"

MAX_VISIBLE_CHIPS = 2


class SelectionState(str, Enum):
    """Selection states of a multi-select with an exclusive sentinel."""

    EMPTY = "empty"
    SENTINEL_ONLY = "sentinel_only"
    CUSTOM_SET = "custom_set"


def _fold(value: str) -> str:
    return value.strip().casefold()


class SelectionMachine:
    """Transition rules over a selection list. Never mutates its input."""

    def __init__(self, sentinel: str | None = None):
        self.sentinel = sentinel

    def state(self, selected: Sequence[str]) -> SelectionState:
        if not selected:
            return SelectionState.EMPTY
        if self.sentinel is not None and list(selected) == [self.sentinel]:
            return SelectionState.SENTINEL_ONLY
        return SelectionState.CUSTOM_SET

    def add(self, selected: Sequence[str], value: str) -> list[str]:
        if value == self.sentinel:
            return [value]
        result = [item for item in selected if item != self.sentinel]
        if value not in result:
            result.append(value)
        return result

    def remove(self, selected: Sequence[str], value: str) -> list[str]:
        return [item for item in selected if item != value]

    def toggle(self, selected: Sequence[str], value: str) -> list[str]:
        if value in selected:
            return self.remove(selected, value)
        return self.add(selected, value)


class CreatableMultiSelect:
    """
    Multi-select with chip overflow, filtering and optional value creation.

    The widget owns only its presentation state; every selection change is
    pushed upward through ``on_change``.
    """

    def __init__(
        self,
        label: str,
        options: Iterable[str] = (),
        selected: Iterable[str] = (),
        allow_create: bool = False,
        exclusive_option: str | None = None,
        on_change: Callable[[list[str]], None] | None = None,
        placeholder: str = "Select...",
    ):
        self.label = label
        self.options: list[str] = list(options)
        self.allow_create = allow_create
        self.placeholder = placeholder
        self.machine = SelectionMachine(exclusive_option)
        self._on_change = on_change

        self.selected: list[str] = []
        for value in selected:
            self.selected = self.machine.add(self.selected, value)

        self.is_open = False
        self.query = ""

    # =========================================================================
    # DERIVED VIEW
    # =========================================================================

    @property
    def state(self) -> SelectionState:
        return self.machine.state(self.selected)

    @property
    def visible_chips(self) -> list[str]:
        return self.selected[:MAX_VISIBLE_CHIPS]

    @property
    def overflow_count(self) -> int:
        return max(len(self.selected) - MAX_VISIBLE_CHIPS, 0)

    @property
    def overflow_label(self) -> str | None:
        return f"+{self.overflow_count} more" if self.overflow_count else None

    @property
    def filtered_options(self) -> list[str]:
        needle = _fold(self.query)
        if not needle:
            return list(self.options)
        return [option for option in self.options if needle in option.casefold()]

    def _matching_option(self, text: str) -> str | None:
        needle = _fold(text)
        for option in self.options:
            if option.casefold() == needle:
                return option
        return None

    def _is_selected_value(self, text: str) -> bool:
        needle = _fold(text)
        return any(item.casefold() == needle for item in self.selected)

    @property
    def show_create_row(self) -> bool:
        """Offer "create" only for non-blank text matching nothing known."""
        if not self.allow_create or not self.query.strip():
            return False
        return self._matching_option(self.query) is None and not self._is_selected_value(self.query)

    @property
    def create_label(self) -> str | None:
        return f'Add "{self.query.strip()}"' if self.show_create_row else None

    def is_selected(self, option: str) -> bool:
        return option in self.selected

    # =========================================================================
    # INTERACTION
    # =========================================================================

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.query = ""

    def type(self, text: str) -> None:
        self.query = text
        self.is_open = True

    def set_options(self, options: Iterable[str]) -> None:
        self.options = list(options)

    def _commit(self, selected: list[str]) -> None:
        if selected == self.selected:
            return
        self.selected = selected
        if self._on_change is not None:
            self._on_change(list(self.selected))

    def toggle(self, option: str) -> None:
        self._commit(self.machine.toggle(self.selected, option))

    def select(self, option: str) -> None:
        self._commit(self.machine.add(self.selected, option))

    def remove(self, option: str) -> None:
        self._commit(self.machine.remove(self.selected, option))

    def clear(self) -> None:
        self._commit([])

    def create(self) -> str | None:
        """Add the typed text as a new value when creation is allowed."""
        if not self.show_create_row:
            return None
        value = self.query.strip()
        self._commit(self.machine.add(self.selected, value))
        self.query = ""
        return value

    def handle_key(self, key: str) -> bool:
        """
        Keyboard handling inside the search input.

        Returns:
            True when the key was consumed
        """
        if key == "Backspace":
            if self.query or not self.selected:
                return False
            self.remove(self.selected[-1])
            return True

        if key == "Enter":
            text = self.query.strip()
            if not text:
                return False
            if self.create() is None:
                match = self._matching_option(text)
                if match is not None:
                    self.select(match)
                self.query = ""
            return True

        if key == "Escape":
            self.close()
            return True

        return False

    def as_dict(self) -> dict:
        return {
            "label": self.label,
            "selected": list(self.selected),
            "chips": self.visible_chips,
            "overflow": self.overflow_label,
            "placeholder": self.placeholder if not self.selected else None,
            "is_open": self.is_open,
            "query": self.query,
            "options": self.filtered_options,
            "create": self.create_label,
        }


class SingleSelectDropdown:
    """Single-value dropdown with filtering. No value creation."""

    def __init__(
        self,
        label: str,
        options: Iterable[str] = (),
        value: str = "",
        on_change: Callable[[str], None] | None = None,
        placeholder: str = "Select...",
    ):
        self.label = label
        self.options: list[str] = list(options)
        self.value = value
        self.placeholder = placeholder
        self._on_change = on_change
        self.is_open = False
        self.query = ""

    @property
    def filtered_options(self) -> list[str]:
        needle = _fold(self.query)
        if not needle:
            return list(self.options)
        return [option for option in self.options if needle in option.casefold()]

    @property
    def display_value(self) -> str:
        return self.value or self.placeholder

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.query = ""

    def type(self, text: str) -> None:
        self.query = text
        self.is_open = True

    def set_options(self, options: Iterable[str]) -> None:
        self.options = list(options)
        if self.value and self.value not in self.options:
            self._commit("")

    def _commit(self, value: str) -> None:
        if value == self.value:
            return
        self.value = value
        if self._on_change is not None:
            self._on_change(value)

    def select(self, option: str) -> None:
        if option not in self.options:
            raise ValueError(f"{option!r} is not an option of {self.label}")
        self._commit(option)
        self.close()

    def clear(self) -> None:
        self._commit("")

    def handle_key(self, key: str) -> bool:
        if key == "Escape":
            self.close()
            return True
        if key == "Enter":
            matches = self.filtered_options
            if len(matches) == 1:
                self.select(matches[0])
                return True
            return False
        return False

    def as_dict(self) -> dict:
        return {
            "label": self.label,
            "value": self.value,
            "display": self.display_value,
            "is_open": self.is_open,
            "query": self.query,
            "options": self.filtered_options,
        }
