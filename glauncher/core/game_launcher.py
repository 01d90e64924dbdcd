"""Launch command synthesis and game process spawning."""

import asyncio
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..auth.offline import offline_uuid
from ..config import LauncherConfig
from ..errors import LaunchSpawnError
from ..runtime.java_manager import JavaManager
from ..utils.platform import classpath_separator
from ..versions.models import ConditionalArgument, LaunchPlan, VersionDescriptor
from ..versions.rules import rules_allow

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute(template: str, replacements: Dict[str, str]) -> str:
    """Replace every ``${name}`` in one pass. Unknown names are left as they are."""
    return PLACEHOLDER.sub(lambda m: replacements.get(m.group(1), m.group(0)), template)


class GameLauncher:
    def __init__(self, config: LauncherConfig, java: Optional[JavaManager] = None):
        self.config = config
        self.java = java or JavaManager(config)

    def library_paths(self, descriptor: VersionDescriptor) -> List[Path]:
        """Local jars of the rule-allowed libraries, in declaration order."""
        paths = []
        for lib in descriptor.libraries:
            if not rules_allow(lib.rules, self.config.os_name):
                continue
            artifact = lib.artifact
            if artifact and artifact.path:
                paths.append(self.config.libraries_dir / artifact.path)
        return paths

    def assemble_classpath(self, descriptor: VersionDescriptor, client_jar: Path) -> str:
        """Assemble Java classpath; the client jar always comes last."""
        paths = [str(p) for p in self.library_paths(descriptor)]
        paths.append(str(client_jar))
        return classpath_separator(self.config.os_name).join(paths)

    def build_replacements(self, descriptor: VersionDescriptor, username: str,
                           classpath: str, natives_dir: Path) -> Dict[str, str]:
        uuid = offline_uuid(username)
        if descriptor.assetIndex:
            asset_index_id = descriptor.assetIndex.id
        else:
            asset_index_id = descriptor.assets or "legacy"

        return {
            "auth_player_name": username,
            "version_name": descriptor.id,
            "version_type": descriptor.type or "release",
            "game_directory": str(self.config.data_dir),
            "assets_root": str(self.config.assets_dir),
            "assets_index_name": asset_index_id,
            "auth_uuid": uuid,
            "auth_access_token": uuid,
            "auth_session": uuid,
            "user_type": "legacy",
            "user_properties": "{}",
            "clientid": self.config.client_id,
            "auth_xuid": "0",
            "natives_directory": str(natives_dir),
            "launcher_name": self.config.launcher_name,
            "launcher_version": self.config.launcher_version,
            "classpath": classpath,
            "classpath_separator": classpath_separator(self.config.os_name),
            "library_directory": str(self.config.libraries_dir),
        }

    def build_arguments(self, descriptor: VersionDescriptor, replacements: Dict[str, str]) -> Tuple[List[str], List[str]]:
        """JVM and game arguments, substituted."""
        jvm_args = list(self.config.extra_jvm_args)
        game_args = []

        if descriptor.arguments is not None:
            for arg in descriptor.arguments.jvm:
                if isinstance(arg, ConditionalArgument):
                    if rules_allow(arg.rules, self.config.os_name):
                        jvm_args.extend(substitute(v, replacements) for v in arg.values)
                else:
                    jvm_args.append(substitute(arg, replacements))
            for arg in descriptor.arguments.game:
                # Conditional game arguments (demo mode, custom resolution...) are never enabled
                if isinstance(arg, str):
                    game_args.append(substitute(arg, replacements))
        else:
            jvm_args.append(f"-Djava.library.path={replacements['natives_directory']}")
            jvm_args.extend(["-cp", replacements["classpath"]])
            for token in (descriptor.minecraftArguments or "").split():
                game_args.append(substitute(token, replacements))

        return jvm_args, game_args

    def synthesize(self, descriptor: VersionDescriptor, username: str,
                   client_jar: Path, natives_dir: Path) -> LaunchPlan:
        """Prepare launch command."""
        classpath = self.assemble_classpath(descriptor, client_jar)
        replacements = self.build_replacements(descriptor, username, classpath, natives_dir)
        jvm_args, game_args = self.build_arguments(descriptor, replacements)

        args = [a for a in [*jvm_args, descriptor.mainClass, *game_args] if a]
        return LaunchPlan(
            executable=self.java.find_java(),
            args=args,
            classpath=classpath,
            natives_dir=str(natives_dir),
            cwd=str(self.config.data_dir),
        )

    async def launch_game(self, plan: LaunchPlan) -> asyncio.subprocess.Process:
        """Launch the game process."""
        try:
            return await asyncio.create_subprocess_exec(
                *plan.command,
                cwd=plan.cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise LaunchSpawnError(f"Could not start {plan.executable}: {e}") from e
