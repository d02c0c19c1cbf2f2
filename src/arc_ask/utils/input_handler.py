import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from arc_ask.errors import NotFoundError, ReadError
from arc_ask.utils import tmux
from arc_ask.utils.process import ProcessRunner, default_runner

logger = logging.getLogger(__name__)


class InputKind(str, Enum):
    NONE = "none"
    STDIN = "stdin"
    PANE = "pane"


@dataclass
class InputSource:
    """Raw text collected for one invocation and where it came from."""

    kind: InputKind = InputKind.NONE
    text: str = ""
    pane: str | None = None
    lines: int = 0


class InputCollector:
    """Collects input from a tmux pane or from redirected standard input."""

    def __init__(self, stdin: TextIO | None = None, runner: ProcessRunner | None = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.runner = runner or default_runner

    def collect(self, pane: str | None = None, lines: int = 200) -> InputSource:
        """Return the text for this run.

        A pane target wins over stdin. Without a pane, stdin is only read when
        it is redirected; an interactive terminal yields empty input instead of
        waiting for someone to type.
        """
        if pane:
            return self._capture_pane(pane, lines)

        if self._is_interactive():
            return InputSource()

        try:
            data = self.stdin.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError("failed to read piped input", cause=e) from e
        logger.debug(f"Read {len(data)} chars from stdin")
        return InputSource(kind=InputKind.STDIN, text=data)

    def _is_interactive(self) -> bool:
        try:
            return self.stdin.isatty()
        except (AttributeError, ValueError, OSError) as e:
            raise ReadError("failed to check stdin", cause=e) from e

    def _capture_pane(self, pane: str, lines: int) -> InputSource:
        tmux.validate_target(pane)
        try:
            content = tmux.capture(pane, lines, runner=self.runner)
        except tmux.PaneNotFound as e:
            known = tmux.list_panes(runner=self.runner)[:5]
            raise NotFoundError(
                f"pane '{pane}' not found",
                cause=e.cause or e.message,
                hint="Check that the tmux session and pane exist",
                suggestions=["tmux list-panes -a", *[f"--pane {p}" for p in known]],
            ) from e
        return InputSource(kind=InputKind.PANE, text=content, pane=pane, lines=lines)


def gather_input(
    pane: str | None = None,
    lines: int = 200,
    stdin: TextIO | None = None,
    runner: ProcessRunner | None = None,
) -> InputSource:
    """Convenience wrapper around InputCollector.collect."""
    return InputCollector(stdin=stdin, runner=runner).collect(pane, lines)
