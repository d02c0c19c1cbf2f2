from .base import AskOptions, Backend, BackendResult
from .bridge import BridgeBackend
from .direct import DirectBackend

from ..errors import InvalidInputError
from ..utils.config import BACKENDS, BACKEND_BRIDGE, BACKEND_DIRECT, Config
from ..utils.process import ProcessRunner


def get_backend(
    config: Config,
    backend: str | None = None,
    provider: str | None = None,
    runner: ProcessRunner | None = None,
) -> Backend:
    """Pick the backend strategy named by ``backend`` or ``config.BACKEND``."""
    name = (backend or config.BACKEND or BACKEND_DIRECT).strip().lower()
    if name == BACKEND_DIRECT:
        return DirectBackend(config, provider=provider)
    if name == BACKEND_BRIDGE:
        return BridgeBackend(config, runner=runner)
    raise InvalidInputError(
        f"unknown backend '{name}'",
        hint=f"Supported backends: {', '.join(BACKENDS)}",
    )


__all__ = ['AskOptions', 'Backend', 'BackendResult', 'BridgeBackend', 'DirectBackend', 'get_backend']
