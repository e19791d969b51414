"""Best-effort observability events for engine runs."""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

EventSink = Callable[[str, Mapping], None]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def log_event(event_name: str, context: Mapping) -> None:
    """Default sink: one INFO record carrying the context as extra fields."""
    logger.info(
        "%s %s",
        event_name,
        dict(context),
        extra={"event": event_name, "context": dict(context)},
    )


def emit_safely(sink: Optional[EventSink], event_name: str, context: Mapping) -> None:
    """Call the sink, never letting its failure reach the caller."""
    if sink is None:
        return
    try:
        sink(event_name, context)
    except Exception:
        logger.debug("event sink failed for %s", event_name, exc_info=True)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
