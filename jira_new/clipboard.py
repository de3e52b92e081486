"""Best-effort copy to the system clipboard through whatever utility the platform ships."""

import logging
import subprocess
import sys

logger = logging.getLogger("jira_new.clipboard")


def _commands() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if sys.platform == "win32":
        return [["clip"]]
    return [["wl-copy"], ["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]]


def copy(text: str) -> bool:
    """Copy text to the clipboard. Returns False instead of raising when nothing worked."""
    for cmd in _commands():
        try:
            result = subprocess.run(cmd, input=text.encode("utf-8"), capture_output=True, timeout=1)
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("%s unavailable: %s", cmd[0], exc)
            continue
        if result.returncode == 0:
            return True
        logger.debug("%s exited %s", cmd[0], result.returncode)
    return False
