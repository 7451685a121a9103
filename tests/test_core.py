"""Tests for core utilities and configuration."""

import pytest


def test_deferred_call_fires_once_after_delay(qapp):
    """DeferredCall runs its handler once the delay elapses."""
    from PyQt6.QtTest import QTest
    from pyqt_editgrid.core import DeferredCall

    called = []
    deferred = DeferredCall(delay_ms=5, handler=lambda: called.append(1))
    deferred.schedule()
    assert deferred.pending

    QTest.qWait(100)
    assert called == [1]
    assert not deferred.pending


def test_deferred_call_cancel(qapp):
    """A cancelled call never fires."""
    from PyQt6.QtTest import QTest
    from pyqt_editgrid.core import DeferredCall

    called = []
    deferred = DeferredCall(delay_ms=5, handler=lambda: called.append(1))
    deferred.schedule()
    deferred.cancel()
    assert not deferred.pending

    QTest.qWait(50)
    assert called == []


def test_deferred_call_reschedule_collapses(qapp):
    """Scheduling twice before the delay elapses fires only once."""
    from PyQt6.QtTest import QTest
    from pyqt_editgrid.core import DeferredCall

    called = []
    deferred = DeferredCall(delay_ms=5, handler=lambda: called.append(1))
    deferred.schedule()
    deferred.schedule()

    QTest.qWait(100)
    assert called == [1]


def test_deferred_call_force():
    """force() runs the handler immediately without a timer."""
    from pyqt_editgrid.core import DeferredCall

    called = []
    deferred = DeferredCall(delay_ms=1000, handler=lambda: called.append(1))
    deferred.force()
    assert called == [1]


def test_grid_config_defaults_and_override():
    """get_grid_config returns defaults until an application sets one."""
    from pyqt_editgrid.config import (
        EditGridConfig, QueryOrdering, get_grid_config, set_grid_config
    )

    config = get_grid_config()
    assert config.initial_query_delay_ms == 199
    assert config.default_page_size == 10
    assert config.backup_suffix == "_old"
    assert config.query_ordering is QueryOrdering.LAST_ISSUED

    custom = EditGridConfig(default_page_size=25)
    set_grid_config(custom)
    assert get_grid_config() is custom


def test_pagination_merge_only_overrides_present_fields():
    from pyqt_editgrid.types import Pagination

    window = Pagination(current=3, page_size=20, total=95)
    merged = window.merged(Pagination(current=1))
    assert merged == Pagination(current=1, page_size=20, total=95)
    assert window.without_total() == Pagination(current=3, page_size=20)


def test_query_result_coerce_from_mapping():
    from pyqt_editgrid.types import QueryResult

    result = QueryResult.coerce({"data": [{"id": 1}], "total": 1})
    assert result.data == [{"id": 1}]
    assert result.current is None
    assert result.total == 1

    with pytest.raises(KeyError):
        QueryResult.coerce({"total": 1})
