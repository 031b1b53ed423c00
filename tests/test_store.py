"""Tests for the local and HTTP baseline stores."""

import asyncio

import httpx
import pytest

from conformgate.errors import (
    BaselineNotFound,
    ComparisonUnavailable,
    ReadOnlyStoreError,
    SnapshotFormatError,
)
from conformgate.store import (
    HttpBaselineStore,
    LocalBaselineStore,
    read_snapshot,
    resolve_store,
)
from conformgate.types import BaselineRef, Counters, OutcomeStatus, ResultSnapshot, TestOutcome


def _snapshot():
    return ResultSnapshot(
        suite_name="bfs",
        outcomes=[TestOutcome(identifier="test_a", status=OutcomeStatus.FAILED)],
        counters=Counters(total=3, passed=2, failed=1),
        metadata={"sha": "abc"},
    )


def test_local_save_then_fetch(tmp_path):
    store = LocalBaselineStore(tmp_path)
    ref = BaselineRef(suite_name="bfs", branch="main")
    asyncio.run(store.save(_snapshot(), ref))

    assert (tmp_path / "main" / "bfs.json").exists()
    fetched = asyncio.run(store.fetch(ref))
    assert fetched == _snapshot()


def test_local_missing_baseline(tmp_path):
    store = LocalBaselineStore(tmp_path)
    with pytest.raises(BaselineNotFound):
        asyncio.run(store.fetch(BaselineRef(suite_name="gnu")))


def test_local_malformed_baseline(tmp_path):
    (tmp_path / "main").mkdir()
    (tmp_path / "main" / "gnu.json").write_text('{"outcomes": "nope"}')
    store = LocalBaselineStore(tmp_path)
    with pytest.raises(SnapshotFormatError):
        asyncio.run(store.fetch(BaselineRef(suite_name="gnu")))


def test_read_snapshot_missing_file(tmp_path):
    with pytest.raises(ComparisonUnavailable):
        read_snapshot(tmp_path / "nope.json")


def test_http_fetch():
    body = _snapshot().model_dump_json()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/baselines/main/bfs.json"
        return httpx.Response(200, text=body)

    store = HttpBaselineStore(
        "https://ci.example.org/baselines/", transport=httpx.MockTransport(handler)
    )
    fetched = asyncio.run(store.fetch(BaselineRef(suite_name="bfs")))
    assert fetched.failing_identifiers() == ["test_a"]


def test_http_not_found_is_missing_baseline():
    store = HttpBaselineStore(
        "https://ci.example.org",
        transport=httpx.MockTransport(lambda request: httpx.Response(404)),
    )
    with pytest.raises(BaselineNotFound, match="HTTP 404"):
        asyncio.run(store.fetch(BaselineRef(suite_name="bfs")))


def test_http_connection_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    store = HttpBaselineStore("https://ci.example.org", transport=httpx.MockTransport(handler))
    with pytest.raises(ComparisonUnavailable, match="ConnectError"):
        asyncio.run(store.fetch(BaselineRef(suite_name="bfs")))


def test_http_store_is_read_only():
    store = HttpBaselineStore("https://ci.example.org")
    with pytest.raises(ReadOnlyStoreError):
        asyncio.run(store.save(_snapshot(), BaselineRef(suite_name="bfs")))


def test_resolve_store(tmp_path):
    assert isinstance(resolve_store(tmp_path), LocalBaselineStore)
    assert isinstance(resolve_store(tmp_path, "https://ci.example.org"), HttpBaselineStore)


def test_http_timeout_is_not_a_missing_baseline():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    store = HttpBaselineStore("https://ci.example.org", transport=httpx.MockTransport(handler))
    with pytest.raises(ComparisonUnavailable, match="timed out") as excinfo:
        asyncio.run(store.fetch(BaselineRef(suite_name="bfs")))
    assert not isinstance(excinfo.value, BaselineNotFound)


def test_http_server_error_is_not_a_missing_baseline():
    store = HttpBaselineStore(
        "https://ci.example.org",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )
    with pytest.raises(ComparisonUnavailable, match="HTTP 503") as excinfo:
        asyncio.run(store.fetch(BaselineRef(suite_name="bfs")))
    assert not isinstance(excinfo.value, BaselineNotFound)
