import asyncio
from typing import Dict, List, Optional

import pytest

from framecheck.core.fetcher import FetchError
from framecheck.core.models import FetchResult
from framecheck.core.probe import FrameHost


class RecordingLog:
    """Stand-in for reporters.console.Log that keeps messages instead of printing."""

    def __init__(self, verbose: int = 2):
        self.verbose = verbose
        self.lines: List[str] = []

    def info(self, msg):
        self.lines.append(f"INFO {msg}")

    def warn(self, msg):
        self.lines.append(f"WARNING {msg}")

    def ok(self, msg):
        self.lines.append(f"SUCCESS {msg}")

    def fail(self, msg):
        self.lines.append(f"FAIL {msg}")

    def debug(self, msg):
        self.lines.append(f"DEBUG {msg}")

    def has(self, fragment: str) -> bool:
        return any(fragment in line for line in self.lines)


class FakeHost(FrameHost):
    """Embedding host with scripted load timing and access behaviour."""

    def __init__(self, delay: float = 0.0, loads: bool = True,
                 access: Optional[bool] = True,
                 load_error: Optional[Exception] = None,
                 access_error: Optional[Exception] = None,
                 delays: Optional[Dict[str, float]] = None):
        self.delay = delay
        self.delays = delays or {}
        self.loads = loads
        self.access = access
        self.load_error = load_error
        self.access_error = access_error
        self.resets = 0
        self.started: List[str] = []
        self.finished: List[str] = []

    async def reset(self):
        self.resets += 1

    async def load(self, url):
        self.started.append(url)
        await asyncio.sleep(self.delays.get(url, self.delay))
        self.finished.append(url)
        if self.load_error:
            raise self.load_error
        return self.loads

    async def can_access(self):
        if self.access_error:
            raise self.access_error
        return self.access


class FakeFetcher:
    def __init__(self, results: Dict[str, object]):
        self.results = results
        self.calls: List[str] = []

    async def fetch(self, url):
        self.calls.append(url)
        result = self.results[url]
        if isinstance(result, FetchError):
            raise result
        return result


@pytest.fixture
def log():
    return RecordingLog()


@pytest.fixture
def make_host():
    return FakeHost


@pytest.fixture
def make_fetcher():
    def factory(results):
        return FakeFetcher({
            url: (FetchResult(**r) if isinstance(r, dict) else r)
            for url, r in results.items()
        })
    return factory
