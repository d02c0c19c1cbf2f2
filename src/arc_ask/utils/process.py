"""Thin wrapper around executable lookup and subprocess execution.

Components that shell out (tmux capture, the pi fallback) receive a runner
instead of calling ``shutil``/``subprocess`` directly so tests can hand in a fake.
"""

import logging
import shutil
import subprocess
from typing import Sequence

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs external commands with captured text output."""

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def run(
        self,
        args: Sequence[str],
        input: str | None = None,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess:
        """Run ``args`` to completion.

        Never raises on a non-zero exit status; callers inspect ``returncode``.
        Raises ``subprocess.TimeoutExpired`` when ``timeout`` elapses and
        ``OSError`` when the executable cannot be started.
        """
        logger.debug(f"Running {list(args)!r} (timeout={timeout})")
        return subprocess.run(
            list(args),
            input=input,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )


default_runner = ProcessRunner()
