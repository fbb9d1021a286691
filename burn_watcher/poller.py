from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from loguru import logger

from burn_watcher.config import AppSettings
from burn_watcher.detector import SPL_TOKEN_PROGRAM, BurnEvent, detect
from burn_watcher.rpc import RpcError, SolanaRpcClient
from burn_watcher.signatures import extract_signatures, new_since
from burn_watcher.sinks import ConsoleSink, DatabaseSink, EventSink, SinkFanout


class _ScanFailed(Exception):
    pass


@dataclass(frozen=True)
class WatcherState:
    # Newest signature already handled; None until the first cycle completes
    watermark: str | None = None


@dataclass
class CycleReport:
    state: WatcherState
    fetched: int = 0
    new: int = 0
    attempted: int = 0
    burns: list[BurnEvent] = field(default_factory=list)
    failures: int = 0


@dataclass
class BurnPoller:
    client: SolanaRpcClient
    watch_address: str
    sinks: SinkFanout = field(default_factory=SinkFanout)
    signature_limit: int = 20
    token_program: str = SPL_TOKEN_PROGRAM
    bootstrap: str = "adopt"
    poll_interval_sec: float = 10.0
    sleep: Callable[[float], None] = time.sleep

    @classmethod
    def create(cls, settings: AppSettings, SessionFactory=None) -> BurnPoller:
        client = SolanaRpcClient.create(settings.rpc_url, timeout=settings.rpc_timeout_sec)
        sinks: list[EventSink] = [ConsoleSink(output_format=settings.output_format)]
        if SessionFactory is not None:
            sinks.append(DatabaseSink(SessionFactory, watch_address=settings.watch_address))
        return cls(
            client=client,
            watch_address=settings.watch_address,
            sinks=SinkFanout(sinks=sinks),
            signature_limit=settings.signature_limit,
            token_program=settings.token_program,
            bootstrap=settings.bootstrap,
            poll_interval_sec=settings.poll_interval_sec,
        )

    def run_cycle(self, state: WatcherState) -> CycleReport:
        """
        One poll: list recent signatures, scan the new ones oldest first and
        move the watermark to the newest attempted signature. Failed
        signatures are logged and not retried.
        """
        try:
            entries = self.client.get_signatures_for_address(
                self.watch_address, limit=self.signature_limit
            )
        except RpcError as e:
            logger.error("poll error (phase=signatures, address={}): {}", self.watch_address, e)
            return CycleReport(state=state)

        signatures = extract_signatures(entries)
        fresh = new_since(signatures, state.watermark)
        report = CycleReport(state=state, fetched=len(signatures), new=len(fresh))
        if not fresh:
            return report

        if state.watermark is None and self.bootstrap == "adopt":
            logger.info(
                "No watermark yet; starting after {} ({} older signature(s) not scanned)",
                fresh[-1],
                len(fresh) - 1,
            )
            report.state = WatcherState(watermark=fresh[-1])
            return report

        for sig in fresh:
            report.attempted += 1
            try:
                event = self._scan(sig)
            except _ScanFailed:
                report.failures += 1
                continue
            if event is not None:
                report.burns.append(event)
                report.failures += self.sinks.emit(event)

        report.state = WatcherState(watermark=fresh[-1])
        return report

    def _scan(self, signature: str) -> BurnEvent | None:
        try:
            tx = self.client.get_transaction(signature)
        except Exception as e:
            logger.error("error processing {} (phase=fetch): {}", signature, e)
            raise _ScanFailed from e
        if tx is None:
            logger.debug("Transaction {} not available yet; skipping", signature)
            return None
        try:
            return detect(tx, signature, token_program=self.token_program)
        except Exception as e:
            logger.exception("error processing {} (phase=detect): {}", signature, e)
            raise _ScanFailed from e

    def run_forever(self, state: WatcherState | None = None) -> WatcherState:
        state = state or WatcherState()
        logger.info(
            "Starting burn watcher: address={} every {}s (bootstrap={})",
            self.watch_address,
            self.poll_interval_sec,
            self.bootstrap,
        )
        cycle = 0
        while True:
            cycle += 1
            try:
                report = self.run_cycle(state)
                state = report.state
                if report.new:
                    logger.info(
                        "cycle {}: fetched={} new={} attempted={} burns={} failures={} watermark={}",
                        cycle,
                        report.fetched,
                        report.new,
                        report.attempted,
                        len(report.burns),
                        report.failures,
                        state.watermark,
                    )
                else:
                    logger.debug("cycle {}: nothing new (watermark={})", cycle, state.watermark)
            except KeyboardInterrupt:
                logger.info("Burn watcher interrupted; shutting down.")
                break
            except Exception as e:
                logger.exception("Burn watcher error: {}", e)
            try:
                self.sleep(self.poll_interval_sec)
            except KeyboardInterrupt:
                logger.info("Burn watcher interrupted; shutting down.")
                break
        return state
