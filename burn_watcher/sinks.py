from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Protocol

from loguru import logger

from burn_watcher.db import BurnRecord, session_scope
from burn_watcher.detector import BurnEvent


class EventSink(Protocol):
    def emit(self, event: BurnEvent, detected_at: float) -> None: ...


def format_text(event: BurnEvent, detected_at: float) -> str:
    label = "BURN (inner) detected" if event.inner else "BURN detected"
    return (
        f"[{int(detected_at)}] {label}: tx={event.signature} mint={event.mint} "
        f"source={event.source} amount={event.amount}"
    )


def format_json(event: BurnEvent, detected_at: float) -> str:
    return json.dumps({"ts": int(detected_at), **event.to_dict()}, sort_keys=True)


@dataclass
class ConsoleSink:
    output_format: str = "text"
    write: Callable[[str], None] = print

    def emit(self, event: BurnEvent, detected_at: float) -> None:
        if self.output_format == "json":
            self.write(format_json(event, detected_at))
        else:
            self.write(format_text(event, detected_at))


@dataclass
class DatabaseSink:
    SessionFactory: Callable
    watch_address: str | None = None

    def emit(self, event: BurnEvent, detected_at: float) -> None:
        with session_scope(self.SessionFactory) as s:
            exists = s.query(BurnRecord.id).filter(BurnRecord.signature == event.signature).first()
            if exists:
                logger.debug("Burn {} already stored; skipping", event.signature)
                return
            s.add(
                BurnRecord(
                    signature=event.signature,
                    mint=event.mint,
                    source=event.source,
                    amount=event.amount,
                    inner=event.inner,
                    watch_address=self.watch_address,
                    detected_at=datetime.fromtimestamp(detected_at, tz=timezone.utc).replace(tzinfo=None),
                )
            )


@dataclass
class SinkFanout:
    """Send each event to every sink; one failing sink does not block the rest."""

    sinks: list[EventSink] = field(default_factory=list)
    clock: Callable[[], float] = time.time

    def emit(self, event: BurnEvent) -> int:
        detected_at = self.clock()
        failures = 0
        for sink in self.sinks:
            try:
                sink.emit(event, detected_at)
            except Exception as e:
                failures += 1
                logger.exception("Sink {} failed for {}: {}", type(sink).__name__, event.signature, e)
        return failures
