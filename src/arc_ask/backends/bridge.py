"""Bridge to the arc-ai daemon, with a direct ``pi`` fallback.

When the daemon's Unix socket exists the request goes to the daemon, which
provides tools and extensions. Otherwise a note is printed on stderr and the
``pi`` coding agent is run once as a subprocess instead.
"""

import logging
import os
import subprocess

import httpx
from rich.console import Console

from ..core import ResolvedPrompt
from ..errors import BackendError, BackendTimeoutError, NotFoundError
from ..utils.config import BACKEND_BRIDGE, Config
from ..utils.logging import get_console
from ..utils.process import ProcessRunner, default_runner
from .base import AskOptions, Backend, BackendResult

logger = logging.getLogger(__name__)

SOCKET_ENV = "ARC_AI_SOCKET"
DEFAULT_SOCKET_PATH = "~/.config/arc/ai/daemon.sock"
DAEMON_BASE_URL = "http://arc-ai"
DAEMON_ASK_PATH = "/v1/ask"
PI_EXECUTABLE = "pi"
PI_INSTALL = "npm install -g @mariozechner/pi-coding-agent"
# Linux caps a single argv element at 128 KiB
PI_MAX_ARG_BYTES = 100 * 1024
PI_STDIN_REQUEST = "Answer the request given on standard input."


def get_socket_path() -> str:
    """Daemon socket from $ARC_AI_SOCKET (or the default), with ~ expanded."""
    return os.path.expanduser(os.environ.get(SOCKET_ENV) or DEFAULT_SOCKET_PATH)


class BridgeBackend(Backend):
    """Talks to the arc-ai daemon, falling back to running pi directly."""

    name = BACKEND_BRIDGE

    def __init__(
        self,
        config: Config,
        runner: ProcessRunner | None = None,
        socket_path: str | None = None,
        console: Console | None = None,
    ):
        self.config = config
        self.runner = runner or default_runner
        self.socket_path = os.path.expanduser(socket_path) if socket_path else get_socket_path()
        self.timeout = config.REQUEST_TIMEOUT
        self.console = console or get_console()

    def is_available(self) -> bool:
        # Re-checked on every call; the daemon may start or stop between runs
        return os.path.exists(self.socket_path)

    def ask(self, prompt: ResolvedPrompt, options: AskOptions | None = None) -> BackendResult:
        options = options or AskOptions()
        if self.is_available():
            text = self._ask_daemon(prompt, options)
            return BackendResult(text=text, provider="arc-ai", model=prompt.model, backend=self.name)

        self.console.print("[yellow]Note:[/yellow] arc-ai daemon not running. Using fallback mode.")
        self.console.print("[dim]For better performance, run: arc-ai start[/dim]")
        text = self._ask_fallback(prompt, options)
        return BackendResult(text=text, provider=PI_EXECUTABLE, model=prompt.model, backend=self.name)

    def ask_with_context(
        self,
        prompt: str,
        context: str,
        system: str = "",
        model: str | None = None,
        tools: list[str] | None = None,
    ) -> str:
        """Ask pi about ``context``, which is fed on its standard input."""
        return self._run_pi(prompt, system=system, model=model, context=context, tools=tools)

    def ask_with_tools(self, prompt: str, tools: list[str], system: str = "", model: str | None = None) -> str:
        """Ask pi with the named tools enabled."""
        return self._run_pi(prompt, system=system, model=model, tools=tools)

    def _ask_fallback(self, prompt: ResolvedPrompt, options: AskOptions) -> str:
        """Run pi once; a prompt too large for one argument goes on its stdin instead."""
        if len(prompt.user.encode("utf-8", errors="surrogateescape")) > PI_MAX_ARG_BYTES:
            logger.debug(f"Prompt exceeds {PI_MAX_ARG_BYTES} bytes, sending it to pi on stdin")
            return self.ask_with_context(
                PI_STDIN_REQUEST, prompt.user, system=prompt.system, model=prompt.model, tools=options.tools
            )
        if options.tools:
            return self.ask_with_tools(prompt.user, options.tools, system=prompt.system, model=prompt.model)
        return self._run_pi(prompt.user, system=prompt.system, model=prompt.model)

    def _ask_daemon(self, prompt: ResolvedPrompt, options: AskOptions) -> str:
        payload = {
            "prompt": prompt.user,
            "system": prompt.system,
            "model": prompt.model,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "tools": list(options.tools),
        }
        logger.debug(f"Sending request to arc-ai daemon at {self.socket_path}")
        transport = httpx.HTTPTransport(uds=self.socket_path)
        try:
            with httpx.Client(transport=transport, base_url=DAEMON_BASE_URL, timeout=self.timeout) as client:
                response = client.post(DAEMON_ASK_PATH, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(self.timeout, cause=e) from e
        except (httpx.HTTPError, ValueError) as e:
            raise BackendError(
                "arc-ai daemon request failed",
                cause=e,
                hint="Restart the daemon with: arc-ai restart",
            ) from e

        if not isinstance(data, dict):
            raise BackendError("arc-ai daemon request failed", cause="unexpected response body")
        if data.get("error"):
            raise BackendError("arc-ai daemon request failed", cause=data["error"])
        return str(data.get("response", "")).strip()

    def _run_pi(
        self,
        prompt: str,
        system: str = "",
        model: str | None = None,
        context: str = "",
        tools: list[str] | None = None,
    ) -> str:
        pi_path = self.runner.which(PI_EXECUTABLE)
        if not pi_path:
            raise NotFoundError("Pi not found", hint=f"Install: {PI_INSTALL}", suggestions=[PI_INSTALL])

        args = [pi_path, "--print"]
        if model:
            args += ["--model", model]
        if tools:
            args += ["--tools", ",".join(tools)]
        if system:
            args += ["--system-prompt", system]
        args.append(prompt)

        try:
            result = self.runner.run(args, input=context or None, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise BackendTimeoutError(self.timeout, cause=e) from e
        except OSError as e:
            raise BackendError("failed to run pi", cause=e) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").rstrip("\n")
            raise BackendError(f"pi failed: {stderr}")
        return (result.stdout or "").strip()
