"""Tests for Paginator: cursor advance, exhaustion, failure and retry."""

from __future__ import annotations

import asyncio

import pytest

from conftest import ControlledSource, FlakySource, make_records, settle
from tableeditor.application.services.paginated_loader import (
    DEFAULT_PAGE_SIZE,
    INITIAL_CURSOR,
    PaginationStatus,
    Paginator,
)
from tableeditor.application.services.row_store import RowStore
from tableeditor.domain.models.core import Page, Row
from tableeditor.errors import FetchError
from tableeditor.infrastructure.sources.memory_source import InMemoryPageSource


def _page(*ids: str, next_cursor=None) -> Page:
    return Page(rows=tuple(Row(id=i) for i in ids), next_cursor=next_cursor)


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------


class TestInitialState:
    def test_defaults(self):
        paginator = Paginator(InMemoryPageSource([]))
        assert paginator.cursor == INITIAL_CURSOR
        assert paginator.page_size == DEFAULT_PAGE_SIZE
        assert paginator.status is PaginationStatus.IDLE
        assert paginator.can_fetch
        assert len(paginator.store) == 0

    def test_uses_given_store(self):
        store = RowStore()
        assert Paginator(InMemoryPageSource([]), store).store is store


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestFetchNext:
    def test_pages_through_all_records(self):
        source = InMemoryPageSource(make_records(120), page_size=50)
        paginator = Paginator(source, page_size=50)

        async def scenario():
            sizes = []
            for _ in range(3):
                await paginator.fetch_next()
                sizes.append(len(paginator.store))
            return sizes

        assert asyncio.run(scenario()) == [50, 100, 120]
        assert paginator.exhausted
        assert paginator.status is PaginationStatus.EXHAUSTED
        assert paginator.pages_loaded == 3
        assert source.requests == [0, 1, 2]

    def test_fetch_after_exhaustion_is_noop(self):
        source = InMemoryPageSource(make_records(10), page_size=50)
        paginator = Paginator(source, page_size=50)

        async def scenario():
            await paginator.fetch_next()
            return await paginator.fetch_next()

        assert asyncio.run(scenario()) is None
        assert source.requests == [0]
        assert len(paginator.store) == 10

    def test_empty_source_exhausts_immediately(self):
        paginator = Paginator(InMemoryPageSource([]))
        page = asyncio.run(paginator.fetch_next())
        assert page is not None and len(page) == 0
        assert paginator.status is PaginationStatus.EXHAUSTED

    def test_cursor_comes_from_source(self):
        source = ControlledSource()
        paginator = Paginator(source)

        async def scenario():
            task = asyncio.create_task(paginator.fetch_next())
            await settle()
            source.resolve(0, _page("a", next_cursor=7))
            await task
            task = asyncio.create_task(paginator.fetch_next())
            await settle()
            source.resolve(1, _page("b"))
            await task

        asyncio.run(scenario())
        assert source.calls == [0, 7]
        assert paginator.store.ids() == ["a", "b"]

    def test_only_one_request_in_flight(self):
        source = ControlledSource()
        paginator = Paginator(source)

        async def scenario():
            task = asyncio.create_task(paginator.fetch_next())
            await settle()
            assert paginator.in_flight
            assert paginator.status is PaginationStatus.FETCHING
            assert await paginator.fetch_next() is None
            source.resolve(0, _page("a", next_cursor=1))
            await task

        asyncio.run(scenario())
        assert source.calls == [0]
        assert paginator.status is PaginationStatus.IDLE

    def test_status_listener_sees_transitions(self):
        paginator = Paginator(InMemoryPageSource(make_records(60), page_size=50), page_size=50)
        seen = []
        paginator.status_changed.connect(seen.append)

        asyncio.run(paginator.fetch_next())

        assert seen == [PaginationStatus.FETCHING, PaginationStatus.IDLE]

    def test_page_loaded_and_reset_signals(self):
        paginator = Paginator(InMemoryPageSource(make_records(60), page_size=50), page_size=50)
        pages, resets = [], []
        paginator.page_loaded.connect(lambda page: pages.append(len(page)))
        paginator.reset_performed.connect(resets.append)

        async def scenario():
            await paginator.fetch_next()
            await paginator.fetch_next()
            await paginator.retry()

        asyncio.run(scenario())
        assert pages == [50, 10, 50]
        assert resets == [60]

    def test_failing_listener_does_not_break_fetch(self):
        paginator = Paginator(InMemoryPageSource(make_records(5)))

        def boom(status):
            raise RuntimeError("listener")

        paginator.status_changed.connect(boom)
        asyncio.run(paginator.fetch_next())
        assert len(paginator.store) == 5


# ---------------------------------------------------------------------------
# Failure and retry
# ---------------------------------------------------------------------------


class TestFailureAndRetry:
    def test_failure_sets_error_and_keeps_rows(self):
        source = ControlledSource()
        paginator = Paginator(source)

        async def scenario():
            task = asyncio.create_task(paginator.fetch_next())
            await settle()
            source.resolve(0, _page("a", "b", next_cursor=1))
            await task
            task = asyncio.create_task(paginator.fetch_next())
            await settle()
            source.fail(1, ConnectionError("reset by peer"))
            return await task

        assert asyncio.run(scenario()) is None
        assert paginator.status is PaginationStatus.ERRORED
        assert isinstance(paginator.error, FetchError)
        assert isinstance(paginator.error.__cause__, ConnectionError)
        assert paginator.store.ids() == ["a", "b"]
        assert paginator.cursor == 1

    def test_fetch_error_passes_through_unwrapped(self):
        error = FetchError("bad payload")
        paginator = Paginator(FlakySource([], failures=1, exc=error))
        asyncio.run(paginator.fetch_next())
        assert paginator.error is error

    def test_fetch_next_while_errored_is_noop(self):
        source = FlakySource(make_records(10), failures=1)
        paginator = Paginator(source)

        async def scenario():
            await paginator.fetch_next()
            return await paginator.fetch_next()

        assert asyncio.run(scenario()) is None
        assert source.calls == [0]
        assert paginator.status is PaginationStatus.ERRORED

    def test_retry_after_failure_reloads_first_page(self):
        source = FlakySource(make_records(120), failures=1, page_size=50)
        paginator = Paginator(source, page_size=50)
        seen = []

        async def scenario():
            await paginator.fetch_next()
            paginator.status_changed.connect(seen.append)
            await paginator.retry()

        asyncio.run(scenario())
        assert seen[0] is PaginationStatus.FETCHING
        assert paginator.status is PaginationStatus.IDLE
        assert paginator.error is None
        assert len(paginator.store) == 50
        assert paginator.cursor == 1

    def test_retry_reads_fetching_while_pending(self):
        source = ControlledSource()
        paginator = Paginator(source)

        async def scenario():
            task = asyncio.create_task(paginator.retry())
            await settle()
            assert paginator.status is PaginationStatus.FETCHING
            source.resolve(0, _page("a"))
            await task

        asyncio.run(scenario())

    def test_retry_discards_rows_and_resets_cursor(self):
        source = InMemoryPageSource(make_records(120), page_size=50)
        paginator = Paginator(source, page_size=50)

        async def scenario():
            await paginator.fetch_next()
            await paginator.fetch_next()
            await paginator.retry()

        asyncio.run(scenario())
        assert source.requests == [0, 1, 0]
        assert len(paginator.store) == 50
        assert paginator.generation == 1
        assert paginator.pages_loaded == 1

    def test_stale_result_is_discarded(self):
        source = ControlledSource()
        paginator = Paginator(source)

        async def scenario():
            first = asyncio.create_task(paginator.fetch_next())
            await settle()
            second = asyncio.create_task(paginator.retry())
            await settle()
            source.resolve(0, _page("stale", next_cursor=1))
            assert await first is None
            assert len(paginator.store) == 0
            assert paginator.in_flight
            source.resolve(1, _page("fresh"))
            await second

        asyncio.run(scenario())
        assert paginator.store.ids() == ["fresh"]
        assert paginator.status is PaginationStatus.EXHAUSTED

    def test_stale_failure_is_discarded(self):
        source = ControlledSource()
        paginator = Paginator(source)

        async def scenario():
            first = asyncio.create_task(paginator.fetch_next())
            await settle()
            second = asyncio.create_task(paginator.retry())
            await settle()
            source.fail(0, ConnectionError("late"))
            await first
            source.resolve(1, _page("fresh", next_cursor=1))
            await second

        asyncio.run(scenario())
        assert paginator.error is None
        assert paginator.status is PaginationStatus.IDLE


@pytest.mark.parametrize("total,expected_requests", [(0, 1), (49, 1), (50, 1), (51, 2), (100, 2), (101, 3)])
def test_request_count_matches_page_boundaries(total, expected_requests):
    source = InMemoryPageSource(make_records(total), page_size=50)
    paginator = Paginator(source, page_size=50)

    async def drain():
        while paginator.can_fetch:
            await paginator.fetch_next()

    asyncio.run(drain())
    assert len(source.requests) == expected_requests
    assert len(paginator.store) == total
