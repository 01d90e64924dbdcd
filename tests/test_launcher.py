"""End-to-end tests of the launch pipeline against a local origin."""

import hashlib
import sys

import pytest

from glauncher.core.launcher import Launcher
from glauncher.errors import LaunchSpawnError, ManifestFetchError, VersionNotFoundError

from .conftest import MANIFEST_PATH
from .helpers import library, make_jar, modern_version, version_entry


@pytest.fixture
def published(origin, tmp_path):
    """1.20.1 with one library, one native archive and one asset, all served by ``origin``."""
    asset = b"sound"
    asset_hash = hashlib.sha1(asset).hexdigest()
    origin.add(f"/resources/{asset_hash[:2]}/{asset_hash}", asset)
    origin.add_json("/indexes/5.json", {"objects": {"minecraft/sounds/a.ogg": {"hash": asset_hash, "size": len(asset)}}})
    origin.add("/client/1.20.1.jar", b"client jar")
    natives = make_jar(tmp_path / "natives.jar", {"liblwjgl.so": b"so"})

    descriptor = modern_version(origin, "1.20.1", libraries=[
        library("org.lwjgl:lwjgl:3.3.1", "org/lwjgl/lwjgl/3.3.1/lwjgl-3.3.1.jar", url=origin.add("/libs/lwjgl.jar", b"lwjgl")),
        {
            "name": "org.lwjgl.lwjgl:lwjgl-platform:2.9.4",
            "natives": {"linux": "natives-linux"},
            "downloads": {"classifiers": {"natives-linux": {
                "path": "org/lwjgl/lwjgl-platform-natives-linux.jar",
                "url": origin.add("/libs/natives-linux.jar", natives.read_bytes()),
            }}},
        },
    ])
    origin.add_json("/v1/packages/1.20.1.json", descriptor)
    origin.add_json(MANIFEST_PATH, {
        "latest": {"release": "1.20.1"},
        "versions": [version_entry(origin, "1.20.1", "2023-06-12T13:25:51+00:00")],
    })
    return asset_hash


@pytest.mark.asyncio
async def test_prepare_materializes_everything(config, sink, published):
    async with Launcher(config, sink) as launcher:
        plan = await launcher.prepare("Steve", "1.20.1")

    data = config.data_dir
    assert config.version_json_path("1.20.1").exists()
    assert config.version_jar_path("1.20.1").read_bytes() == b"client jar"
    assert (config.libraries_dir / "org/lwjgl/lwjgl/3.3.1/lwjgl-3.3.1.jar").read_bytes() == b"lwjgl"
    assert (config.natives_dir("1.20.1") / "liblwjgl.so").read_bytes() == b"so"
    assert (data / "assets" / "objects" / published[:2] / published).read_bytes() == b"sound"

    assert plan.classpath.split(":")[-1] == str(config.version_jar_path("1.20.1"))
    assert "net.minecraft.client.main.Main" in plan.args
    assert plan.args[plan.args.index("--username") + 1] == "Steve"
    assert sink.statuses
    assert sink.failures == []


@pytest.mark.asyncio
async def test_second_prepare_is_offline_for_artifacts(config, sink, origin, published):
    async with Launcher(config, sink) as launcher:
        first = await launcher.prepare("Steve", "1.20.1")
    hits = dict(origin.hits)

    async with Launcher(config, sink) as launcher:
        second = await launcher.prepare("Steve", "1.20.1")

    assert first == second
    assert dict(origin.hits) == hits


@pytest.mark.asyncio
async def test_launch_relays_output_and_exit_code(config, sink, published):
    config.java_path = sys.executable
    config.extra_jvm_args = ["-c", "import sys; print('game ready'); print('oops', file=sys.stderr); sys.exit(3)"]

    async with Launcher(config, sink) as launcher:
        exit_code = await launcher.launch("Steve", "1.20.1")

    assert exit_code == 3
    assert sink.closed == [3]
    assert "[MC] game ready" in sink.logs
    assert "[MC ERR] oops" in sink.logs
    assert sink.failures == []


@pytest.mark.asyncio
async def test_spawn_failure(config, sink, published, tmp_path):
    config.java_path = str(tmp_path / "no-such-java")

    async with Launcher(config, sink) as launcher:
        with pytest.raises(LaunchSpawnError):
            await launcher.launch("Steve", "1.20.1")

    assert len(sink.failures) == 1
    assert sink.closed == []


@pytest.mark.asyncio
async def test_unknown_version_aborts_before_downloads(config, sink, origin, published):
    async with Launcher(config, sink) as launcher:
        with pytest.raises(VersionNotFoundError):
            await launcher.launch("Steve", "0.0.0")

    assert len(sink.failures) == 1
    assert origin.hits["/client/1.20.1.jar"] == 0


@pytest.mark.asyncio
async def test_list_versions(config, sink, published):
    async with Launcher(config, sink) as launcher:
        versions = await launcher.list_versions()
    assert [v.id for v in versions] == ["1.20.1"]


@pytest.mark.asyncio
async def test_manifest_outage_is_reported(config, sink, origin):
    origin.fail(MANIFEST_PATH, 503)
    async with Launcher(config, sink) as launcher:
        with pytest.raises(ManifestFetchError):
            await launcher.launch("Steve", "1.20.1")
    assert len(sink.failures) == 1


@pytest.mark.asyncio
async def test_launch_relays_very_long_lines(config, sink, published):
    config.java_path = sys.executable
    config.extra_jvm_args = ["-c", "print('x' * 200000); print('tail', end='')"]

    async with Launcher(config, sink) as launcher:
        exit_code = await launcher.launch("Steve", "1.20.1")

    assert exit_code == 0
    assert sink.closed == [0]
    assert "[MC] " + "x" * 200000 in sink.logs
    assert "[MC] tail" in sink.logs
