"""
Two-stage filter state for list views.

``inputs`` is what the admin is editing; ``applied`` is what the list was
last loaded with. Applied values move only on Apply/Clear, except for
free-text fields which follow their input straight away (the fetch that
follows is debounced).
"""

from typing import Any, Iterable, Mapping


class FilterState:
    """Input and applied copies of a view's filters."""

    def __init__(self, fields: Iterable[str], text_fields: Iterable[str] = ()):
        self.fields: tuple[str, ...] = tuple(fields)
        self.text_fields: frozenset[str] = frozenset(text_fields)

        unknown = self.text_fields.difference(self.fields)
        if unknown:
            raise ValueError(f"Unknown text fields: {sorted(unknown)}")

        self.inputs: dict[str, str] = {name: "" for name in self.fields}
        self.applied: dict[str, str] = {name: "" for name in self.fields}

    def _check(self, name: str) -> None:
        if name not in self.inputs:
            raise KeyError(f"Unknown filter: {name}")

    def set_input(self, name: str, value: str | None) -> bool:
        """
        Edit one input.

        Returns:
            True when the applied filters changed (text fields only)
        """
        self._check(name)
        value = value or ""
        self.inputs[name] = value

        if name in self.text_fields and self.applied[name] != value:
            self.applied[name] = value
            return True
        return False

    def apply(self) -> bool:
        """Apply staged inputs. Returns True when anything changed."""
        if self.applied == self.inputs:
            return False
        self.applied = dict(self.inputs)
        return True

    def clear(self) -> bool:
        """Reset inputs and applied filters. Returns True when applied changed."""
        changed = self.is_active
        self.inputs = {name: "" for name in self.fields}
        self.applied = {name: "" for name in self.fields}
        return changed

    def drop(self, name: str) -> bool:
        """Blank one filter in both copies. Returns True when applied changed."""
        self._check(name)
        self.inputs[name] = ""
        if self.applied[name]:
            self.applied[name] = ""
            return True
        return False

    @property
    def is_active(self) -> bool:
        """Whether any applied filter is set (drives the Clear button)."""
        return any(self.applied.values())

    @property
    def has_pending_changes(self) -> bool:
        """Whether Apply would change anything."""
        return self.applied != self.inputs

    def to_params(self, mapping: Mapping[str, str] | None = None) -> dict[str, Any]:
        """
        Applied filters as request parameters, empty values omitted.

        Args:
            mapping: filter name -> API parameter name, where they differ
        """
        mapping = mapping or {}
        return {
            mapping.get(name, name): value
            for name, value in self.applied.items()
            if value
        }
