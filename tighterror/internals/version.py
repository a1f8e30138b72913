from __future__ import annotations
import sys, platform

import yaml

from tighterror import __version__ as app_ver, __dev__ as is_dev


def _get_versions() -> dict[str, str]:
    return {
        "app": app_ver,
        "python": platform.python_version(),
        "pyyaml": getattr(yaml, "__version__", "unknown"),
    }


def version_text() -> str:
    v = _get_versions()
    dev_marker = " (dev)" if is_dev else ""
    return f"tighterror {v['app']}{dev_marker} • Python {v['python']} • PyYAML {v['pyyaml']}"


def print_banner(stream=None) -> None:
    stream = stream or sys.stdout

    # Only use ANSI styling if the stream is a TTY
    if getattr(stream, "isatty", lambda: False)():
        BOLD, RESET = "\x1b[1m", "\x1b[0m"
    else:
        BOLD, RESET = "", ""

    print(f"{BOLD}{version_text()}{RESET}", file=stream)
