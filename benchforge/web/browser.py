import subprocess
import sys
from typing import Callable, Sequence

from benchforge.logging import logger

# Prefix of the command that opens a URL, per sys.platform
OPENERS: dict[str, tuple[str, ...]] = {
    "darwin": ("open",),
    "win32": ("cmd", "/c", "start"),
}
DEFAULT_OPENER: tuple[str, ...] = ("xdg-open",)

Launcher = Callable[[Sequence[str]], None]


def _spawn(argv: Sequence[str]) -> None:
    # Not waited on; the opener may outlive us
    subprocess.Popen(
        list(argv),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


def opener_command(url: str, platform: str = sys.platform) -> list[str]:
    return [*OPENERS.get(platform, DEFAULT_OPENER), url]


def start_browser(
    url: str, *, platform: str = sys.platform, launch: Launcher = _spawn
) -> bool:
    """Try to open `url` in a browser and report whether the opener started.

    True does not mean a window appeared, only that the opener process was
    spawned.
    """
    argv = opener_command(url, platform)
    try:
        launch(argv)
    except OSError as exc:
        logger.debug("Could not start browser with %s: %s", argv, exc)
        return False
    return True
