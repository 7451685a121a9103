"""
Data contracts shared by the grid engine.

Rows themselves are plain mutable dicts; everything here describes what flows
around them: paging, query requests/results, table interaction deltas, cell
edit descriptors, and commit notifications.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

Row = Dict[str, Any]


@dataclass(frozen=True)
class Pagination:
    """Paging window. Unset fields are None; ``total`` is only ever received."""
    current: Optional[int] = None
    page_size: Optional[int] = None
    total: Optional[int] = None

    def without_total(self) -> 'Pagination':
        return replace(self, total=None)

    def merged(self, other: Optional['Pagination']) -> 'Pagination':
        """Return a copy where every field set on ``other`` overrides ours."""
        if other is None:
            return self
        overrides = {
            name: value for name, value in (
                ('current', other.current),
                ('page_size', other.page_size),
                ('total', other.total),
            ) if value is not None
        }
        return replace(self, **overrides)

    @classmethod
    def coerce(cls, value: Union['Pagination', Mapping[str, Any], None]) -> Optional['Pagination']:
        """Accept a Pagination, a partial mapping, or None."""
        if value is None or isinstance(value, Pagination):
            return value
        return cls(
            current=value.get('current'),
            page_size=value.get('page_size'),
            total=value.get('total'),
        )


@dataclass(frozen=True)
class TableChanges:
    """Deltas reported by a table interaction (paging, sorting, filtering)."""
    pagination: Optional[Pagination]
    filters: Mapping[str, Any] = field(default_factory=dict)
    sorter: Mapping[str, Any] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QueryArgs:
    """Caller-side arguments of one logical query."""
    pagination: Optional[Pagination] = None
    payload: Any = None
    changes: Optional[TableChanges] = None


@dataclass(frozen=True)
class QueryRequest:
    """What the host query operation receives."""
    count: int
    pagination: Optional[Pagination] = None
    payload: Any = None
    changes: Optional[TableChanges] = None


@dataclass
class QueryResult:
    """One page of rows plus whatever paging fields the server reported."""
    data: List[Row]
    current: Optional[int] = None
    page_size: Optional[int] = None
    total: Optional[int] = None

    @property
    def pagination(self) -> Pagination:
        return Pagination(current=self.current, page_size=self.page_size, total=self.total)

    @classmethod
    def coerce(cls, value: Union['QueryResult', Mapping[str, Any]]) -> 'QueryResult':
        if isinstance(value, QueryResult):
            return value
        return cls(
            data=list(value['data']),
            current=value.get('current'),
            page_size=value.get('page_size'),
            total=value.get('total'),
        )


@dataclass(frozen=True)
class FieldCommit:
    """Hard update: a field edit the host should persist or validate."""
    field: str
    value: Any
    row_index: int


@dataclass(frozen=True)
class SelectOption:
    label: str
    value: Any


@dataclass
class InputConfig:
    """Text input control. Host callbacks run before the engine's bookkeeping."""
    placeholder: Optional[str] = None
    allow_clear: bool = True
    read_only: bool = False
    max_length: Optional[int] = None
    on_change: Optional[Callable[[Any], None]] = None
    on_blur: Optional[Callable[[Any], None]] = None


@dataclass
class SelectConfig:
    """Selection control; every change is also a commit."""
    options: Sequence[SelectOption] = ()
    placeholder: Optional[str] = None
    show_search: bool = True
    filter_option: Optional[Callable[[str, SelectOption], bool]] = None
    on_change: Optional[Callable[[Any, Optional[SelectOption]], None]] = None


# (form, record, index) -> config, or None to render a plain cell for that row
InputFactory = Callable[[Any, Row, int], Optional[InputConfig]]
SelectFactory = Callable[[Any, Row, int], Optional[SelectConfig]]
RenderFactory = Callable[[Any, Row, int], Any]


@dataclass
class EditDescriptor:
    """
    Makes a column editable.

    When several are given the first that resolves wins, in the order
    render > input > select.
    """
    render: Optional[RenderFactory] = None
    input: Union[InputConfig, InputFactory, None] = None
    select: Union[SelectConfig, SelectFactory, None] = None


@dataclass
class ColumnDef:
    """Declarative column configuration for the editable table."""
    title: str
    data_index: str
    edit: Optional[EditDescriptor] = None
    width: Optional[int] = None
    sortable: bool = False
