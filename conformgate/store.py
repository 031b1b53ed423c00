"""Baseline store: resolve a BaselineRef to a previously recorded snapshot."""

from __future__ import annotations

import abc
from pathlib import Path

import httpx
from pydantic import ValidationError

from conformgate.errors import (
    BaselineNotFound,
    ComparisonUnavailable,
    ReadOnlyStoreError,
    SnapshotFormatError,
)
from conformgate.logging import get_logger
from conformgate.types import BaselineRef, ResultSnapshot

logger = get_logger(__name__)


def load_snapshot_text(text: str, source: str = "snapshot") -> ResultSnapshot:
    """Parse a serialized snapshot, raising SnapshotFormatError if malformed."""
    try:
        return ResultSnapshot.model_validate_json(text)
    except ValidationError as exc:
        raise SnapshotFormatError(f"Invalid snapshot in {source}: {exc}") from exc


def read_snapshot(path: str | Path) -> ResultSnapshot:
    path = Path(path)
    if not path.exists():
        raise ComparisonUnavailable(f"snapshot {path}", "file not found")
    return load_snapshot_text(path.read_text(encoding="utf-8"), str(path))


def write_snapshot(snapshot: ResultSnapshot, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
    return path


class BaselineStore(abc.ABC):
    """Baselines are keyed by reference branch and suite name."""

    name: str = "base"

    @abc.abstractmethod
    async def fetch(self, ref: BaselineRef) -> ResultSnapshot:
        """Return the baseline snapshot.

        Raises BaselineNotFound when none was recorded, ComparisonUnavailable
        when the store could not be read.
        """
        ...

    @abc.abstractmethod
    async def save(self, snapshot: ResultSnapshot, ref: BaselineRef) -> None:
        """Record ``snapshot`` as the baseline for ``ref``."""
        ...


class LocalBaselineStore(BaselineStore):
    """One JSON file per suite under ``<root>/<branch>/``."""

    name = "local"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, ref: BaselineRef) -> Path:
        return self.root / ref.branch / f"{ref.suite_name}.json"

    async def fetch(self, ref: BaselineRef) -> ResultSnapshot:
        path = self.path_for(ref)
        if not path.exists():
            raise BaselineNotFound(
                f"baseline '{ref.suite_name}' on '{ref.branch}'", f"{path} not found"
            )
        return load_snapshot_text(path.read_text(encoding="utf-8"), str(path))

    async def save(self, snapshot: ResultSnapshot, ref: BaselineRef) -> None:
        path = write_snapshot(snapshot, self.path_for(ref))
        logger.info(f"Baseline for '{ref.suite_name}' on '{ref.branch}' written to {path}")


class HttpBaselineStore(BaselineStore):
    """Reads ``<base_url>/<branch>/<suite>.json`` published by earlier gate runs."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    def url_for(self, ref: BaselineRef) -> str:
        return f"{self.base_url}/{ref.branch}/{ref.suite_name}.json"

    async def fetch(self, ref: BaselineRef) -> ResultSnapshot:
        url = self.url_for(ref)
        what = f"baseline '{ref.suite_name}' on '{ref.branch}'"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ComparisonUnavailable(what, f"timed out fetching {url}") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            error_cls = BaselineNotFound if status == 404 else ComparisonUnavailable
            raise error_cls(what, f"HTTP {status} from {url}") from exc
        except httpx.HTTPError as exc:
            raise ComparisonUnavailable(what, f"{type(exc).__name__} fetching {url}") from exc

        return load_snapshot_text(resp.text, url)

    async def save(self, snapshot: ResultSnapshot, ref: BaselineRef) -> None:
        raise ReadOnlyStoreError(f"{self.name} baseline store at {self.base_url} is read-only")


def resolve_store(baseline_dir: str | Path | None = None, baseline_url: str = "",
                  timeout_s: float = 30.0) -> BaselineStore:
    """An explicit URL selects the HTTP store; otherwise the local directory."""
    if baseline_url:
        return HttpBaselineStore(baseline_url, timeout_s=timeout_s)
    if baseline_dir is None:
        from conformgate.config import settings

        baseline_dir = settings.baseline_dir
    return LocalBaselineStore(baseline_dir)
