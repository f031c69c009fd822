"""
Error Boundary
==============
One-shot latch around a render callable.

The first exception raised by the wrapped callable trips the boundary: the
exception is logged and a static Fallback is returned. Once tripped, the
wrapped callable is never invoked again. Only ``reload()`` (a full page
reload) clears the latch.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from bugtracker.core.constants import BOUNDARY_FALLBACK, BOUNDARY_RELOAD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fallback:
    message: str = BOUNDARY_FALLBACK
    action_label: str = BOUNDARY_RELOAD


class ErrorBoundary:
    def __init__(
        self,
        render: Callable[..., Any],
        on_reload: Optional[Callable[[], None]] = None,
        fallback: Fallback = Fallback(),
    ) -> None:
        self._render = render
        self._on_reload = on_reload
        self.fallback = fallback
        self.error: Optional[BaseException] = None

    @property
    def tripped(self) -> bool:
        return self.error is not None

    def render(self, *args, **kwargs) -> Any:
        if self.tripped:
            return self.fallback
        try:
            return self._render(*args, **kwargs)
        except Exception as exc:
            logger.error("Render failed, showing fallback: %s", exc, exc_info=exc)
            self.error = exc
            return self.fallback

    def reload(self) -> None:
        if self._on_reload is not None:
            self._on_reload()
        self.error = None
