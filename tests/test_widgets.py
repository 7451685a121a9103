"""Tests for the editable table widget."""

import asyncio

import pytest

from pyqt_editgrid.types import (
    ColumnDef, EditDescriptor, InputConfig, Pagination, QueryResult, SelectConfig, SelectOption
)

COLUMNS = [
    ColumnDef("Id", "id"),
    ColumnDef("Name", "name", edit=EditDescriptor(input=InputConfig()), sortable=True),
    ColumnDef("Role", "role", edit=EditDescriptor(
        select=SelectConfig(options=[SelectOption("Developer", "dev"), SelectOption("Operations", "ops")])
    )),
]


@pytest.fixture
def table_factory(qapp):
    tables = []

    def make(**kwargs):
        from pyqt_editgrid.widgets import EditableTable

        table = EditableTable(COLUMNS, **kwargs)
        tables.append(table)
        return table

    yield make
    for table in tables:
        table.teardown()
        table.deleteLater()


def test_render_binds_forms_and_controls(table_factory, rows):
    from pyqt_editgrid.protocols import ComboBoxAdapter, LineEditAdapter

    table = table_factory(data_source=rows)

    assert table.table_widget.rowCount() == 3
    assert len(table.handle.forms) == 3
    assert table.table_widget.item(0, 0).text() == "1"
    assert isinstance(table.table_widget.cellWidget(0, 1), LineEditAdapter)
    assert isinstance(table.table_widget.cellWidget(0, 2), ComboBoxAdapter)
    assert table.table_widget.cellWidget(1, 2).get_value() == "ops"
    assert table.controller.mounted
    assert table.controller.initial_query_pending


def test_shrinking_rows_drops_trailing_forms(table_factory, rows):
    table = table_factory(data_source=rows)
    forms = table.handle.forms
    first = forms[0]

    table.set_data_source(rows[:1])

    assert table.table_widget.rowCount() == 1
    assert len(table.handle.forms) == 1
    assert table.handle.forms is forms
    assert table.handle.forms[0] is first


def test_edit_commit_and_reset_through_handle(table_factory, rows):
    commits = []
    table = table_factory(data_source=rows, on_field_change=commits.append)
    signalled = []
    table.field_committed.connect(signalled.append)

    editor = table.table_widget.cellWidget(0, 1)
    editor.setText("z")
    assert table.handle.data[0]["name"] == "z"
    assert commits == []

    editor.editingFinished.emit()
    assert [(c.field, c.value, c.row_index) for c in commits] == [("name", "z", 0)]
    assert signalled == commits

    table.handle.reset_forms()
    assert table.handle.data[0]["name"] == "a"
    assert table.table_widget.cellWidget(0, 1).get_value() == "a"


def test_handle_query_and_pager(table_factory):
    requests = []
    changes = []

    async def query(request):
        requests.append(request)
        page = request.pagination.current
        return QueryResult(data=[{"id": page, "name": f"row {page}", "role": "dev"}], current=page, total=25)

    table = table_factory(query=query, on_change=lambda *args: changes.append(args))

    async def scenario():
        await table.handle.query(payload={"team": "core"})
        await table.emit_table_change(Pagination(current=2, page_size=10, total=25), extra={'action': 'paginate'})

    asyncio.run(scenario())

    assert [r.pagination.current for r in requests] == [1, 2]
    assert requests[1].payload == {"team": "core"}
    assert table.handle.data == [{"id": 2, "name": "row 2", "role": "dev", "name_old": "row 2", "role_old": "dev"}]
    assert table.page_label.text() == "2 / 3"
    assert table.prev_button.isEnabled()
    assert changes[0][0] == Pagination(current=2, page_size=10, total=25)
    assert changes[0][3]["action"] == "paginate"


def test_loading_state_disables_table(table_factory):
    table = table_factory()

    table.controller.loading_changed.emit(True)
    assert not table.table_widget.isEnabled()
    assert table.status_label.text() == "Loading..."

    table.controller.loading_changed.emit(False)
    assert table.table_widget.isEnabled()


def test_pager_hidden_without_paging(table_factory, rows):
    table = table_factory(data_source=rows, pagination=False)

    assert table.controller.pagination is None
    assert table.page_label.isHidden()


def test_teardown_cancels_initial_query(table_factory):
    table = table_factory()
    table.teardown()

    assert not table.controller.initial_query_pending
    assert table.controller.torn_down


def test_queries_run_in_plain_qt_application(table_factory, wait_until):
    """Without an asyncio loop the initial query and handle.query still load rows."""
    from pyqt_editgrid.config import EditGridConfig

    requests = []

    async def query(request):
        requests.append(request)
        await asyncio.sleep(0)
        return QueryResult(data=[{"id": 7, "name": "g", "role": "ops"}], total=1)

    table = table_factory(query=query, config=EditGridConfig(initial_query_delay_ms=5))

    wait_until(lambda: len(table.handle.data) == 1)
    assert [r.count for r in requests] == [1]
    assert table.table_widget.rowCount() == 1
    assert table.table_widget.cellWidget(0, 1).get_value() == "g"
    assert table.table_widget.isEnabled()

    table.handle.query(payload={"team": "core"})
    wait_until(lambda: len(requests) == 2 and not table.controller.loading)
    assert requests[1].payload == {"team": "core"}
    assert requests[1].pagination == Pagination(current=1, page_size=10)
    assert table.page_label.text() == "1 / 1"


def test_reset_forms_uses_configured_backup_suffix(table_factory, rows):
    from pyqt_editgrid.config import EditGridConfig

    table = table_factory(data_source=rows, config=EditGridConfig(backup_suffix="__orig"))

    editor = table.table_widget.cellWidget(0, 1)
    editor.setText("z")
    editor.editingFinished.emit()
    assert rows[0]["name__orig"] == "a"

    table.handle.reset_forms()

    assert table.handle.data[0]["name"] == "a"
    assert table.table_widget.cellWidget(0, 1).get_value() == "a"


def test_sort_without_paging_reports_no_pagination(table_factory, rows):
    requests = []
    changes = []
    spawned = []

    async def query(request):
        requests.append(request)
        return None

    table = table_factory(
        query=query, data_source=rows, pagination=False,
        spawn=spawned.append, on_change=lambda *args: changes.append(args),
    )

    table.table_widget.horizontalHeader().sectionClicked.emit(1)
    asyncio.run(spawned[0])

    assert changes[0][0] is None
    assert changes[0][2] == {"field": "name", "order": "ascend"}
    assert requests[0].pagination is None
    assert requests[0].changes.sorter == {"field": "name", "order": "ascend"}
