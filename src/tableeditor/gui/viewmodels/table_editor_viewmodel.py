"""Pure Python TableEditorViewModel (MVVM): no Qt dependency.

Owns the fetched rows, the local edit overlay, the selection and the
filter/sort query, and re-derives the visible rows after every change.  The
presentation layer reads :meth:`view_rows` and friends and dispatches intents;
it never gets hold of the mutable containers.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple, Union

from tableeditor.application.services.edit_overlay import EditOverlay
from tableeditor.application.services.paginated_loader import (
    PageSource,
    PaginationStatus,
    Paginator,
)
from tableeditor.application.services.row_store import RowStore
from tableeditor.application.services.selection import SelectionSet
from tableeditor.config import PAGE_SIZE, SCROLL_THRESHOLD_PX
from tableeditor.domain.models.core import Page, Patch, Row
from tableeditor.domain.models.query import SortDirection, ViewQuery
from tableeditor.domain.services.view_pipeline import filter_rows, merge_rows, sort_rows
from tableeditor.errors.handler import ErrorHandler, ErrorSeverity
from tableeditor.events.bus import EventBus
from tableeditor.events.table_events import (
    PageLoadedEvent,
    RowAddedEvent,
    RowEditedEvent,
    RowsResetEvent,
)
from tableeditor.gui.viewmodels.base import BaseViewModel
from tableeditor.gui.viewmodels.edit_session import CellRef, EditSession
from tableeditor.gui.viewmodels.scroll_trigger import ScrollTrigger
from tableeditor.gui.viewmodels.signal import ObservableProperty, Signal

_logger = logging.getLogger(__name__)


class TableEditorViewModel(BaseViewModel):
    """Table editor engine.

    Signals
    -------
    rows_changed(view_rows)
        The derived rows differ from the previous derivation.
    selection_changed(ids)
        Selection membership changed.
    status_changed(status)
        :class:`PaginationStatus` transition.
    error_occurred(message)
        A page fetch failed; the UI should offer :meth:`retry`.
    """

    def __init__(
        self,
        source: PageSource,
        *,
        page_size: int = PAGE_SIZE,
        scroll_threshold: float = SCROLL_THRESHOLD_PX,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
        overlay: Optional[EditOverlay] = None,
    ) -> None:
        super().__init__()
        self._store = RowStore()
        self._paginator = Paginator(source, self._store, page_size=page_size)
        self._overlay = overlay if overlay is not None else EditOverlay()
        self._selection = SelectionSet()
        self._edit = EditSession()
        self._events = event_bus
        self._errors = error_handler or ErrorHandler(_logger, event_bus)
        self._query = ViewQuery()
        self._merged: Tuple[Row, ...] = ()
        self._view: Tuple[Row, ...] = ()
        self._started = False

        # Observable properties
        self.filter_text = ObservableProperty("")
        self.sort_field = ObservableProperty(None)
        self.sort_direction = ObservableProperty(SortDirection.ASC)
        self.status = ObservableProperty(self._paginator.status)

        # Signals
        self.rows_changed = Signal()
        self.selection_changed = Signal()
        self.status_changed = Signal()
        self.error_occurred = Signal()

        self.scroll_trigger = ScrollTrigger(self, scroll_threshold)
        self.track_connection(self._paginator.status_changed, self._on_status_changed)
        self._refresh()

    # -- read side ----------------------------------------------------------

    def view_rows(self) -> Tuple[Row, ...]:
        return self._view

    def merged_rows(self) -> Tuple[Row, ...]:
        return self._merged

    def stored_rows(self) -> Tuple[Row, ...]:
        return self._store.rows

    def row(self, row_id: str) -> Optional[Row]:
        for row in self._merged:
            if row.id == row_id:
                return row
        return None

    def selection(self) -> frozenset[str]:
        return self._selection.ids()

    def is_selected(self, row_id: str) -> bool:
        return self._selection.is_selected(row_id)

    def all_selected(self) -> bool:
        return self._selection.all_selected(len(self._view))

    def pagination_status(self) -> PaginationStatus:
        return self._paginator.status

    @property
    def paginator(self) -> Paginator:
        return self._paginator

    @property
    def edit_session(self) -> EditSession:
        return self._edit

    @property
    def query(self) -> ViewQuery:
        return self._query

    @property
    def can_fetch(self) -> bool:
        return self._paginator.can_fetch

    def is_initial_load(self) -> bool:
        return self._paginator.in_flight and self._paginator.pages_loaded == 0

    def is_view_reduced(self) -> bool:
        """True when filtering hides some of the merged rows."""
        return len(self._view) != len(self._merged)

    def summary(self) -> str:
        text = f"Showing {len(self._view)} rows"
        if len(self._selection):
            text += f" • {len(self._selection)} selected"
        return text

    # -- loading ------------------------------------------------------------

    async def start(self) -> Optional[Page]:
        """Issue the initial page request once per view model."""
        if self._started:
            return None
        self._started = True
        return await self.fetch_next()

    async def fetch_next(self) -> Optional[Page]:
        cursor = self._paginator.cursor
        page = await self._paginator.fetch_next()
        if page is not None:
            self._publish(
                PageLoadedEvent(
                    source=__name__,
                    cursor=cursor,
                    row_count=len(page),
                    next_cursor=page.next_cursor,
                )
            )
        return page

    async def retry(self) -> Optional[Page]:
        """Discard fetched rows and selection, then reload from the start.

        Local edits are kept and re-applied as their rows come back.
        """
        discarded = len(self._store)
        self._started = True
        self._edit.cancel()
        if self._selection.clear():
            self.selection_changed.emit(self._selection.ids())
        self._publish(RowsResetEvent(source=__name__, discarded_rows=discarded))
        page = await self._paginator.retry()
        if page is not None:
            self._publish(
                PageLoadedEvent(
                    source=__name__,
                    cursor=0,
                    row_count=len(page),
                    next_cursor=page.next_cursor,
                )
            )
        return page

    # -- query --------------------------------------------------------------

    def set_filter_text(self, text: Optional[str]) -> None:
        self._query = self._query.with_filter(text)
        self.filter_text.value = self._query.filter_text
        self._refresh()

    def set_sort(
        self,
        field_name: Optional[str],
        direction: Union[SortDirection, str] = SortDirection.ASC,
    ) -> None:
        self._query = self._query.with_sort(field_name, SortDirection(direction))
        self._sync_sort()

    def toggle_sort(self, field_name: str) -> None:
        self._query = self._query.toggled_sort(field_name)
        self._sync_sort()

    def _sync_sort(self) -> None:
        self.sort_field.value = self._query.sort_field
        self.sort_direction.value = self._query.sort_direction
        self._refresh()

    # -- editing ------------------------------------------------------------

    def commit_edit(self, row_id: str, field_name: str, value: str) -> Optional[Row]:
        patch = self._overlay.commit(row_id, field_name, value)
        canonical = Patch.check_field(field_name)
        self._refresh()
        self._publish(
            RowEditedEvent(
                source=__name__,
                row_id=row_id,
                field=canonical,
                value=patch.values[canonical],
            )
        )
        return self.row(row_id)

    def add_row(self, initial: Optional[Mapping[str, Any]] = None) -> str:
        row_id = self._overlay.add_row(initial)
        self._refresh()
        self._publish(RowAddedEvent(source=__name__, row_id=row_id))
        return row_id

    def begin_edit(self, row_id: str, field_name: str) -> CellRef:
        current = self.row(row_id)
        value = current.text(field_name) if current is not None else ""
        return self._edit.begin(row_id, field_name, value)

    def update_edit(self, value: str) -> None:
        self._edit.update(value)

    def commit_active_edit(self) -> Optional[Row]:
        edit = self._edit.commit()
        if edit is None:
            return None
        return self.commit_edit(edit.row_id, edit.field, edit.value)

    def cancel_edit(self) -> bool:
        return self._edit.cancel()

    def handle_edit_key(self, key: str) -> Optional[Row]:
        edit = self._edit.handle_key(key)
        if edit is None:
            return None
        return self.commit_edit(edit.row_id, edit.field, edit.value)

    # -- selection ----------------------------------------------------------

    def toggle_select(self, row_id: str) -> bool:
        selected = self._selection.toggle(row_id)
        self.selection_changed.emit(self._selection.ids())
        return selected

    def toggle_select_all(self) -> None:
        self._selection.toggle_all(row.id for row in self._view)
        self.selection_changed.emit(self._selection.ids())

    # -- internal -----------------------------------------------------------

    def _refresh(self) -> None:
        patches = self._overlay.patches()
        self._merged = merge_rows(self._store.rows, patches)
        visible = filter_rows(self._merged, self._query.filter_text)
        view = sort_rows(visible, self._query.sort_field, self._query.sort_direction)
        if view != self._view:
            self._view = view
            self.rows_changed.emit(view)

    def _on_status_changed(self, status: PaginationStatus) -> None:
        self._refresh()
        if self.status.value == status:
            return
        self.status.value = status
        self.status_changed.emit(status)
        if status is PaginationStatus.ERRORED:
            error = self._paginator.error
            self._errors.handle(
                error,
                ErrorSeverity.ERROR,
                context={"cursor": self._paginator.cursor},
            )
            self.error_occurred.emit(str(error))

    def _publish(self, event) -> None:
        if self._events is not None:
            self._events.publish(event)
