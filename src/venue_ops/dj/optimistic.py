"""Optimistic local updates with rollback on remote failure.

A command bundles three callables: ``forward`` mutates local state right
away, ``remote`` confirms the change with the server, and ``inverse``
undoes exactly what ``forward`` did. Inverses touch only the entries their
own forward step added or removed, so two commands in flight at once never
undo each other's work.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from venue_ops.errors import RemoteCallError

logger = logging.getLogger(__name__)


@dataclass
class OptimisticCommand:
    name: str
    forward: Callable[[], None]
    inverse: Callable[[], None]
    remote: Callable[[], Awaitable[Any]]
    error_message: str = "Request failed"


class OptimisticExecutor:
    """Apply forward, await remote, apply inverse if remote fails.

    There is no retry: a failed command reports through ``on_error`` and
    the caller decides whether to issue it again.
    """

    def __init__(
        self,
        on_error: Callable[[str], None] | None = None,
        is_active: Callable[[], bool] | None = None,
    ) -> None:
        self._on_error = on_error
        self._is_active = is_active or (lambda: True)

    async def run(self, command: OptimisticCommand) -> bool:
        command.forward()
        try:
            await command.remote()
        except RemoteCallError as exc:
            if not self._is_active():
                logger.debug("%s failed after teardown, ignoring", command.name)
                return False
            logger.warning("%s failed, rolling back: %s", command.name, exc)
            command.inverse()
            if self._on_error is not None:
                self._on_error(command.error_message)
            return False
        logger.debug("%s confirmed", command.name)
        return True
