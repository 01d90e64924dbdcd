"""Command line entry point."""

import argparse
import asyncio
import logging
import sys

from .auth import OfflineAuthenticator
from .config import LauncherConfig
from .core import Launcher
from .errors import LauncherError
from .utils.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="glauncher", description="Offline Minecraft launcher")
    parser.add_argument("--data-dir", help="Game data directory (default: ~/.minecraft)")
    parser.add_argument("--java", help="Java executable to launch with")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    versions = sub.add_parser("versions", help="List available versions")
    versions.add_argument("--limit", type=int, default=20)

    launch = sub.add_parser("launch", help="Install if needed and start a version")
    launch.add_argument("version")
    launch.add_argument("-u", "--username", required=True)
    return parser


async def run(args: argparse.Namespace) -> int:
    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.java:
        overrides["java_path"] = args.java
    config = LauncherConfig.from_env(**overrides)

    async with Launcher(config) as launcher:
        if args.command == "versions":
            for version in (await launcher.list_versions())[:args.limit]:
                print(f"{version.id:<24} {version.type:<10} {version.releaseTime:%Y-%m-%d}")
            return 0

        profile = await OfflineAuthenticator.authenticate(args.username)
        exit_code = await launcher.launch(profile.name, args.version)
        return exit_code


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        return asyncio.run(run(args))
    except (LauncherError, ValueError) as e:
        logging.getLogger("glauncher").error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
