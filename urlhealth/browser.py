"""Best-effort launch of the platform default browser."""

import logging
import subprocess
import sys
import threading
from typing import Optional

logger = logging.getLogger(__name__)

# Seconds to wait after startup before opening the browser, so the
# listener is accepting connections by the time the page loads.
BROWSER_OPEN_DELAY = 1.0


def _browser_command(platform: str, url: str) -> list[str]:
    """Return the command that opens a URL in the default browser."""
    if platform.startswith("win"):
        return ["rundll32", "url.dll,FileProtocolHandler", url]
    if platform == "darwin":
        return ["open", url]
    return ["xdg-open", url]


class BrowserOpener:
    """Opens URLs with the launcher native to the current platform."""

    def __init__(self, platform: Optional[str] = None) -> None:
        self.platform = platform or sys.platform

    def command(self, url: str) -> list[str]:
        return _browser_command(self.platform, url)

    def open(self, url: str) -> bool:
        """Start the browser process without waiting for it.

        Returns True if the process was started, False otherwise.
        Failures are logged and never raised.
        """
        cmd = self.command(url)
        try:
            subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning("Failed to open browser: %s", e)
            return False
        logger.debug("Opened browser with %s", " ".join(cmd))
        return True


def open_browser_later(
    url: str,
    delay: float = BROWSER_OPEN_DELAY,
    opener: Optional[BrowserOpener] = None,
) -> threading.Timer:
    """Open the browser after a delay on a daemon timer thread."""
    opener = opener or BrowserOpener()
    timer = threading.Timer(delay, opener.open, args=(url,))
    timer.name = "browser-open"
    timer.daemon = True
    timer.start()
    return timer
