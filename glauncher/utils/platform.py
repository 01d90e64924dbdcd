"""Host platform detection in the vocabulary version JSONs use."""

import platform
import sys


def current_os() -> str:
    """Return 'windows', 'osx', 'linux' or 'unknown'."""
    system = platform.system()
    if system == "Windows":
        return "windows"
    elif system == "Darwin":
        return "osx"
    elif system == "Linux":
        return "linux"
    return "unknown"


def current_arch() -> str:
    """Data-model bits of the running interpreter, as substituted into ``${arch}``."""
    return "64" if sys.maxsize > 2 ** 32 else "32"


def classpath_separator(os_name: str) -> str:
    return ";" if os_name == "windows" else ":"
