"""Shared fixtures: a local HTTP origin standing in for the Mojang endpoints."""

import json
from collections import Counter
from typing import Dict, List

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from glauncher.config import LauncherConfig
from glauncher.events import DownloadProgress, EventSink
from glauncher.versions.download_manager import DownloadManager

MANIFEST_PATH = "/mc/game/version_manifest.json"


class FakeOrigin:
    """Serves registered bodies and counts every request per path."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.statuses: Dict[str, int] = {}
        self.failures: Dict[str, int] = {}
        self.hits: Counter = Counter()
        self.server = None

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))

    def add(self, path: str, body: bytes) -> str:
        self.files[path] = body
        return self.url(path)

    def add_json(self, path: str, data) -> str:
        return self.add(path, json.dumps(data).encode("utf-8"))

    def fail(self, path: str, status: int, times: int = 10 ** 6):
        self.statuses[path] = status
        self.failures[path] = times

    async def handle(self, request: web.Request) -> web.Response:
        path = request.path
        self.hits[path] += 1
        if self.failures.get(path, 0) > 0:
            self.failures[path] -= 1
            return web.Response(status=self.statuses[path])
        if path not in self.files:
            return web.Response(status=404)
        return web.Response(body=self.files[path])


class RecordingSink(EventSink):
    def __init__(self):
        self.logs: List[str] = []
        self.statuses: List[str] = []
        self.progresses: List[DownloadProgress] = []
        self.items: List[tuple] = []
        self.failures: List[str] = []
        self.closed: List[int] = []

    def log(self, message):
        self.logs.append(message)

    def status(self, message):
        self.statuses.append(message)

    def progress(self, progress):
        self.progresses.append(progress)

    def item_progress(self, done, total):
        self.items.append((done, total))

    def failed(self, message):
        self.failures.append(message)

    def game_closed(self, exit_code):
        self.closed.append(exit_code)


@pytest_asyncio.fixture
async def origin():
    fake = FakeOrigin()
    app = web.Application()
    app.router.add_route("GET", "/{tail:.*}", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.server = server
    yield fake
    await server.close()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def config(tmp_path, origin):
    return LauncherConfig(
        data_dir=tmp_path / "data",
        manifest_url=origin.url(MANIFEST_PATH),
        resources_url=origin.url("/resources"),
        retry_backoff=0,
        os_name="linux",
        arch="64",
    )


@pytest_asyncio.fixture
async def downloads(config, sink):
    async with DownloadManager(config, sink) as dm:
        yield dm
