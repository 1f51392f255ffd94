# File: tests/conftest.py
from pathlib import Path
from typing import Awaitable, Callable, Dict

import pytest
import pytest_asyncio
from aiohttp import web

from sitewatch.config import CrawlerConfig

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@pytest_asyncio.fixture
async def serve(unused_tcp_port: int):
    """
    Start an aiohttp app for a ``{path: handler}`` mapping on a free port.
    Returns the base URL (no trailing slash); the app is cleaned up afterwards.
    """
    runners = []

    async def _serve(routes: Dict[str, Handler]) -> str:
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{unused_tcp_port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def output_dir(tmp_path) -> Path:
    path = tmp_path / "run"
    path.mkdir()
    return path


@pytest.fixture()
def make_config(tmp_path):
    """
    Factory for a CrawlerConfig pointing at *root_url* with output under tmp_path.
    """

    def _make(root_url: str = "https://example.com", **overrides) -> CrawlerConfig:
        data = {
            "root_url": root_url,
            "file_path": tmp_path / "output",
            "request_timeout": 5.0,
            "user_agent": "TestAgent/1.0",
        }
        data.update(overrides)
        return CrawlerConfig(**data)

    return _make


@pytest.fixture()
def config_file(tmp_path) -> Path:
    """
    Write a minimal YAML config and return its path.
    """
    path = tmp_path / "config.yaml"
    path.write_text(
        "root_url: https://example.com/\n"
        f"file_path: '{tmp_path / 'output'}'\n"
        "url_limit: ''\n"
        "time_limit: ''\n",
        encoding="utf-8",
    )
    return path
