"""Builders for version JSON fragments used across tests."""

import json
import zipfile


def version_entry(origin, version_id, release_time, version_type="release"):
    """Manifest entry pointing at ``/v1/packages/<id>.json`` on the origin."""
    return {
        "id": version_id,
        "type": version_type,
        "url": origin.url(f"/v1/packages/{version_id}.json"),
        "time": release_time,
        "releaseTime": release_time,
    }


def library(name, path, url=None, rules=None, **extra):
    lib = {"name": name, "downloads": {"artifact": {"path": path, "url": url or f"https://libraries.invalid/{path}"}}}
    if rules is not None:
        lib["rules"] = rules
    lib.update(extra)
    return lib


def write_version(config, version_id, data):
    """Install a version JSON locally, as a mod loader installer would."""
    path = config.version_json_path(version_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"id": version_id, **data}), encoding="utf-8")
    return path


def make_jar(path, files):
    """Write a zip archive holding ``files`` (name -> bytes)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, body in files.items():
            zf.writestr(name, body)
    return path


def modern_version(origin, version_id, libraries=(), asset_index_id="5"):
    """A version JSON in the 1.13+ layout, with client jar and asset index on ``origin``."""
    return {
        "id": version_id,
        "type": "release",
        "releaseTime": "2023-06-12T13:25:51+00:00",
        "mainClass": "net.minecraft.client.main.Main",
        "assetIndex": {"id": asset_index_id, "url": origin.url(f"/indexes/{asset_index_id}.json")},
        "downloads": {"client": {"url": origin.url(f"/client/{version_id}.jar")}},
        "libraries": list(libraries),
        "arguments": {
            "game": [
                "--username", "${auth_player_name}",
                "--version", "${version_name}",
                "--assetIndex", "${assets_index_name}",
                "--uuid", "${auth_uuid}",
                {"rules": [{"action": "allow", "features": {"is_demo_user": True}}], "value": "--demo"},
            ],
            "jvm": [
                {"rules": [{"action": "allow", "os": {"name": "osx"}}], "value": ["-XstartOnFirstThread"]},
                {"rules": [{"action": "allow", "os": {"name": "linux"}}], "value": "-Dos.linux=true"},
                "-Djava.library.path=${natives_directory}",
                "-cp",
                "${classpath}",
            ],
        },
    }
