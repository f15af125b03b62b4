"""Bridge to the standard library `logging` module."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..foundation.types import LogMessage


@dataclass(slots=True)
class StdlibSink:
    """Forward messages to a stdlib logger.

    Levels map onto DEBUG/INFO/WARNING. Component, domain and data are attached
    as record attributes (`component`, `domain`, `data`) for formatters and
    handlers that want them.
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("logscope"))

    def emit(self, message: LogMessage) -> None:
        if not self.logger.isEnabledFor(message.level):
            return
        self.logger.log(
            int(message.level),
            message.text,
            extra={"component": message.component, "domain": message.qualified_domain, "data": message.data},
        )
