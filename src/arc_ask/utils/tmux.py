"""tmux pane helpers: target validation, capture and pane listing."""

import logging
import re

from arc_ask.errors import InvalidInputError, NotFoundError
from arc_ask.utils.process import ProcessRunner, default_runner

logger = logging.getLogger(__name__)

TARGET_PATTERN = re.compile(r"^[^:\s]+:[^:.\s]+\.\d+$")
PANE_FORMAT = "#{session_name}:#{window_index}.#{pane_index}"


class PaneNotFound(NotFoundError):
    """The tmux binary ran but the pane could not be captured."""


def validate_target(target: str) -> None:
    """Raise InvalidInputError unless ``target`` looks like ``session:window.pane``."""
    if not TARGET_PATTERN.match(target or ""):
        raise InvalidInputError(
            f"invalid pane target '{target}'",
            hint="Pane format must be: session:window.pane (e.g., fe:0.0)",
        )


def capture(target: str, lines: int = 200, runner: ProcessRunner | None = None) -> str:
    """Return the text of a pane, limited to the last ``lines`` lines (0 = all)."""
    runner = runner or default_runner
    if not runner.which("tmux"):
        raise NotFoundError("tmux not found", hint="Install tmux to capture panes")

    start = "-" if lines <= 0 else f"-{lines}"
    try:
        result = runner.run(["tmux", "capture-pane", "-p", "-J", "-t", target, "-S", start])
    except OSError as e:
        raise PaneNotFound(f"pane '{target}' not found", cause=e) from e
    if result.returncode != 0:
        raise PaneNotFound(f"pane '{target}' not found", cause=(result.stderr or "").strip() or None)
    logger.debug(f"Captured {len(result.stdout)} chars from pane {target}")
    return result.stdout


def list_panes(runner: ProcessRunner | None = None) -> list[str]:
    """List every pane as ``session:window.pane``; empty when tmux is unavailable."""
    runner = runner or default_runner
    if not runner.which("tmux"):
        return []
    try:
        result = runner.run(["tmux", "list-panes", "-a", "-F", PANE_FORMAT])
    except OSError as e:
        logger.debug(f"tmux list-panes failed: {e}")
        return []
    if result.returncode != 0:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]
