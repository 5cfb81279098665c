"""General helpers: error classification, text formatting and host details."""

from __future__ import annotations

import platform
import urllib.error
import webbrowser
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

INDENTATION = "  "

_NETWORK_ERRORS = (
    "network error",
    "connection refused",
    "no such host",
    "i/o timeout",
    "server misbehaving",
    "blocked",
)

_In = TypeVar("_In")
_Out = TypeVar("_Out")


@dataclass(frozen=True)
class OSInfo:
    """Basic facts about the host operating system."""

    os: str
    platform_version: str
    kernel_version: str


def parse_error_to_string(err: Any) -> str:
    """Turn an error, a message or any other value into a string."""
    if isinstance(err, str):
        return err
    return str(err)


def is_network_error(err: BaseException) -> bool:
    """Tell whether an error looks like a failure to reach the network."""
    message = str(err).lower()
    if any(marker in message for marker in _NETWORK_ERRORS):
        return True
    return isinstance(err, urllib.error.URLError)


def map_slice(inputs: Iterable[_In], f: Callable[[_In], _Out]) -> list[_Out]:
    """Apply ``f`` to every input and return the results as a list."""
    return [f(item) for item in inputs]


def detect_os_info() -> OSInfo:
    """Collect the operating system name, its version and the kernel version."""
    system = platform.system().lower()
    if system == "linux":
        try:
            version = platform.freedesktop_os_release().get("VERSION_ID", "")
        except OSError:
            version = ""
    elif system == "darwin":
        version = platform.mac_ver()[0]
    else:
        version = platform.version()
    return OSInfo(os=system, platform_version=version, kernel_version=platform.release())


def example(s: str) -> str:
    """Trim a usage example and indent each of its lines."""
    if not s:
        return s
    return "\n".join(INDENTATION + line.strip() for line in s.strip().split("\n"))


def validate_stdin_path_argument(paths: list[str]) -> None:
    """Check path arguments, where a single "-" stands for standard input."""
    if not paths:
        raise ValueError("requires at least 1 arg")
    if paths[0] == "-" and len(paths) > 1:
        raise ValueError(f"unexpected args: [{','.join(paths[1:])}]")


def open_browser(url: str) -> None:
    """Open ``url`` in the user's web browser."""
    print(f"Opening {url} in your browser.")
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as exc:
        raise RuntimeError(f"error opening url: {exc}") from exc
    if not opened:
        raise RuntimeError("error opening url: no runnable browser found")