"""
Tests for the dropdown widgets
"""
import pytest

from interview_console.core.multiselect import (
    NO_SPECIFIC_INDUSTRY,
    CreatableMultiSelect,
    SelectionMachine,
    SelectionState,
    SingleSelectDropdown,
)

INDUSTRIES = [NO_SPECIFIC_INDUSTRY, "Finance", "Healthcare", "Retail"]


@pytest.fixture
def industries() -> CreatableMultiSelect:
    return CreatableMultiSelect(
        "Industries",
        options=INDUSTRIES,
        allow_create=True,
        exclusive_option=NO_SPECIFIC_INDUSTRY,
    )


class TestSelectionMachine:
    """Sentinel exclusivity rules"""

    def test_sentinel_replaces_custom_values(self):
        machine = SelectionMachine(NO_SPECIFIC_INDUSTRY)
        assert machine.add(["Finance", "Retail"], NO_SPECIFIC_INDUSTRY) == [NO_SPECIFIC_INDUSTRY]

    def test_custom_value_drops_sentinel(self):
        machine = SelectionMachine(NO_SPECIFIC_INDUSTRY)
        assert machine.add([NO_SPECIFIC_INDUSTRY], "Finance") == ["Finance"]

    def test_states(self):
        machine = SelectionMachine(NO_SPECIFIC_INDUSTRY)
        assert machine.state([]) == SelectionState.EMPTY
        assert machine.state([NO_SPECIFIC_INDUSTRY]) == SelectionState.SENTINEL_ONLY
        assert machine.state(["Finance"]) == SelectionState.CUSTOM_SET

    def test_input_not_mutated(self):
        machine = SelectionMachine(NO_SPECIFIC_INDUSTRY)
        selected = ["Finance"]
        machine.add(selected, NO_SPECIFIC_INDUSTRY)
        assert selected == ["Finance"]


class TestCreatableMultiSelect:
    """Selection, creation and chip overflow"""

    def test_initial_selection_is_reduced(self):
        widget = CreatableMultiSelect(
            "Industries",
            options=INDUSTRIES,
            selected=["Finance", NO_SPECIFIC_INDUSTRY],
            exclusive_option=NO_SPECIFIC_INDUSTRY,
        )
        assert widget.selected == [NO_SPECIFIC_INDUSTRY]

    def test_toggle_sentinel_then_custom(self, industries):
        industries.toggle(NO_SPECIFIC_INDUSTRY)
        assert industries.state == SelectionState.SENTINEL_ONLY
        industries.toggle("Finance")
        assert industries.selected == ["Finance"]
        industries.toggle("Finance")
        assert industries.state == SelectionState.EMPTY

    def test_on_change_receives_copies(self):
        seen = []
        widget = CreatableMultiSelect("Industries", options=INDUSTRIES, on_change=seen.append)
        widget.select("Finance")
        widget.select("Finance")
        assert seen == [["Finance"]]
        seen[0].append("mutated")
        assert widget.selected == ["Finance"]

    def test_create_row_hidden_for_known_values(self, industries):
        industries.type("  finance ")
        assert industries.show_create_row is False
        industries.type("   ")
        assert industries.show_create_row is False

    def test_create_row_hidden_for_selected_custom_value(self, industries):
        industries.type("Logistics")
        assert industries.create() == "Logistics"
        industries.type("logistics")
        assert industries.show_create_row is False

    def test_create_row_shown_for_new_text(self, industries):
        industries.type(" Logistics ")
        assert industries.show_create_row is True
        assert industries.create_label == 'Add "Logistics"'

    def test_create_disallowed(self):
        widget = CreatableMultiSelect("Roles", options=["Analyst"])
        widget.type("Engineer")
        assert widget.show_create_row is False
        assert widget.create() is None
        assert widget.selected == []

    def test_enter_creates_or_selects_match(self, industries):
        industries.type("healthcare")
        assert industries.handle_key("Enter") is True
        assert industries.selected == ["Healthcare"]
        industries.type("Energy")
        industries.handle_key("Enter")
        assert industries.selected == ["Healthcare", "Energy"]
        assert industries.query == ""

    def test_backspace_removes_last_chip_only_with_empty_query(self, industries):
        industries.select("Finance")
        industries.select("Retail")
        industries.type("x")
        assert industries.handle_key("Backspace") is False
        industries.type("")
        assert industries.handle_key("Backspace") is True
        assert industries.selected == ["Finance"]

    def test_chip_overflow(self, industries):
        for value in ("Finance", "Healthcare", "Retail"):
            industries.select(value)
        assert industries.visible_chips == ["Finance", "Healthcare"]
        assert industries.overflow_label == "+1 more"
        state = industries.as_dict()
        assert state["placeholder"] is None
        assert state["overflow"] == "+1 more"

    def test_escape_closes_and_clears_query(self, industries):
        industries.type("Fin")
        assert industries.filtered_options == ["Finance"]
        industries.handle_key("Escape")
        assert industries.is_open is False
        assert industries.query == ""


class TestSingleSelectDropdown:
    """Single-value dropdown"""

    def test_select_unknown_option_raises(self):
        dropdown = SingleSelectDropdown("Role", options=["Analyst"])
        with pytest.raises(ValueError):
            dropdown.select("Engineer")

    def test_value_cleared_when_options_drop_it(self):
        seen = []
        dropdown = SingleSelectDropdown("Role", options=["Analyst", "Engineer"], on_change=seen.append)
        dropdown.select("Engineer")
        dropdown.set_options(["Analyst"])
        assert dropdown.value == ""
        assert seen == ["Engineer", ""]

    def test_enter_selects_single_match(self):
        dropdown = SingleSelectDropdown("Role", options=["Analyst", "Engineer"])
        dropdown.type("eng")
        assert dropdown.handle_key("Enter") is True
        assert dropdown.value == "Engineer"
        assert dropdown.is_open is False
