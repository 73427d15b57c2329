import logging
from typing import Protocol

from fastapi import Request

logger = logging.getLogger('siteserver.service.observability')


class ObservabilityHook(Protocol):
    """Receives every exception that reaches the terminal error handler."""

    def capture_exception(self, exc: BaseException, request: Request) -> None:
        ...


class NoopHook:
    def capture_exception(self, exc: BaseException, request: Request) -> None:
        return None


class LoggingHook:
    """Records one summary line per captured exception on its own logger."""

    def __init__(self, logger_name: str = 'siteserver.observability'):
        self.logger = logging.getLogger(logger_name)

    def capture_exception(self, exc: BaseException, request: Request) -> None:
        self.logger.warning(f"{request.method} {request.url.path} raised {type(exc).__name__}: {exc}")


def build_hook(target) -> ObservabilityHook:
    """
    Turn a resolved OBSERVABILITY_TARGET into a hook.

    Accepts an object with ``capture_exception``, a zero-argument factory
    returning one, or None for the no-op hook.
    """
    if target is None:
        return NoopHook()
    if isinstance(target, type):
        return target()
    if hasattr(target, "capture_exception"):
        return target
    if callable(target):
        return target()
    raise TypeError(f"Observability target {target!r} has no capture_exception")
