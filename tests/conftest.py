"""Shared pytest fixtures and configuration for pytest."""

import asyncio
import contextlib
import sys
import tempfile
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from sockrpc.rpc.server import run_server


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for platform-specific tests."""
    config.addinivalue_line("markers", "unix_only: mark test to run only on Unix")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-skip Unix socket tests where AF_UNIX is unavailable."""
    skip_unix = pytest.mark.skip(reason="Unix-only test")

    for item in items:
        if "unix_only" in item.keywords and sys.platform == "win32":
            item.add_marker(skip_unix)


@pytest.fixture
def socket_path() -> Iterator[Path]:
    """A socket path short enough for sun_path (pytest's tmp_path can be too long)."""
    with tempfile.TemporaryDirectory(prefix="srpc-") as directory:
        yield Path(directory) / "rpc.sock"


@pytest.fixture(autouse=True)
def _no_socket_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's SOCKRPC_SOCKET_PATH from leaking into tests."""
    monkeypatch.delenv("SOCKRPC_SOCKET_PATH", raising=False)


@pytest_asyncio.fixture
async def serve(socket_path: Path) -> AsyncIterator[Callable[..., Awaitable[Path]]]:
    """Start run_server on socket_path; servers are cancelled at teardown."""
    tasks: list[asyncio.Task[None]] = []

    async def _start(**kwargs: Any) -> Path:
        started = asyncio.Event()
        task = asyncio.create_task(
            run_server(socket_path, started_event=started, **kwargs)
        )
        tasks.append(task)
        await asyncio.wait_for(started.wait(), timeout=5.0)
        return socket_path

    yield _start

    for task in tasks:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
