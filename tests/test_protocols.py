"""Tests for cell control protocols and adapters."""

import pytest


def test_line_edit_adapter(qapp):
    """LineEditAdapter implements the value and signal protocols."""
    from pyqt_editgrid.protocols import (
        LineEditAdapter, ValueGettable, ValueSettable,
        ChangeSignalEmitter, CommitSignalEmitter
    )

    adapter = LineEditAdapter()
    assert isinstance(adapter, ValueGettable)
    assert isinstance(adapter, ValueSettable)
    assert isinstance(adapter, ChangeSignalEmitter)
    assert isinstance(adapter, CommitSignalEmitter)

    adapter.set_value("test")
    assert adapter.get_value() == "test"
    adapter.set_value(None)
    assert adapter.get_value() == ""


def test_combo_box_adapter_values(qapp):
    """ComboBoxAdapter stores option values and reports the current option."""
    from pyqt_editgrid.protocols import ComboBoxAdapter
    from pyqt_editgrid.types import SelectOption

    adapter = ComboBoxAdapter()
    adapter.set_options([SelectOption("Developer", "dev"), SelectOption("Operations", "ops")])
    assert adapter.get_value() is None

    adapter.set_value("ops")
    assert adapter.get_value() == "ops"
    assert adapter.current_option() == SelectOption("Operations", "ops")

    adapter.set_value("missing")
    assert adapter.get_value() is None
    assert adapter.current_option() is None


def test_combo_box_change_signal(qapp):
    from pyqt_editgrid.protocols import ComboBoxAdapter
    from pyqt_editgrid.types import SelectOption

    adapter = ComboBoxAdapter()
    adapter.set_options([SelectOption("A", "a"), SelectOption("B", "b")])
    seen = []
    adapter.connect_change_signal(seen.append)

    adapter.setCurrentIndex(1)
    assert seen == ["b"]


def test_combo_box_apply_filter(qapp):
    from pyqt_editgrid.protocols import ComboBoxAdapter
    from pyqt_editgrid.types import SelectOption

    adapter = ComboBoxAdapter()
    adapter.set_options([
        SelectOption("Developer", "dev"),
        SelectOption("Operations", "ops"),
        SelectOption("Design", "des"),
    ])
    adapter.enable_search()

    assert adapter.apply_filter("De") == 2
    assert adapter.apply_filter("ops") == 1
    assert adapter.apply_filter("") == 3


@pytest.mark.parametrize("search, expected", [
    (None, True),
    ("", True),
    ("Dev", True),       # label
    ("dev", True),       # value
    ("DEV", False),      # case-sensitive
    ("^Dev.*er$", True),  # regex
    ("ops", False),
])
def test_default_filter_option(search, expected):
    from pyqt_editgrid.protocols import default_filter_option
    from pyqt_editgrid.types import SelectOption

    assert default_filter_option(search, SelectOption("Developer", "dev")) is expected


def test_default_filter_option_invalid_pattern_is_literal():
    from pyqt_editgrid.protocols import default_filter_option
    from pyqt_editgrid.types import SelectOption

    assert default_filter_option("(a", SelectOption("(a) first", 1))
    assert not default_filter_option("(a", SelectOption("a", 2))
