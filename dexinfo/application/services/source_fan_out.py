from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any

from dexinfo.domain.exceptions import SourceUnavailableError
from dexinfo.domain.services.aggregation_status import SourceState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceOutcome:
    name: str
    settled: bool
    error: bool
    value: Any = None

    @classmethod
    def pending(cls, name: str) -> "SourceOutcome":
        return cls(name=name, settled=False, error=False)

    @property
    def state(self) -> SourceState:
        return SourceState(name=self.name, loading=not self.settled, error=self.error)


class SourceFanOut:
    """Runs independent source calls concurrently and waits for all of them.

    Results are only handed back once every call has settled or the wait
    times out; calls still running at that point are reported as unsettled.
    ``SourceUnavailableError`` marks the source as failed, anything else
    propagates.
    """

    def __init__(self, *, max_workers: int = 6, timeout_seconds: float | None = 30.0):
        self._max_workers = max(1, max_workers)
        self._timeout_seconds = timeout_seconds

    def run(self, tasks: Mapping[str, Callable[[], Any]]) -> dict[str, SourceOutcome]:
        if not tasks:
            return {}

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(tasks)),
            thread_name_prefix="source-fan-out",
        )
        try:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            done, _ = wait(list(futures.values()), timeout=self._timeout_seconds)

            outcomes: dict[str, SourceOutcome] = {}
            for name, future in futures.items():
                if future not in done:
                    logger.warning(
                        "source_fan_out: unsettled source=%s timeout_seconds=%s",
                        name,
                        self._timeout_seconds,
                    )
                    outcomes[name] = SourceOutcome.pending(name)
                    continue
                try:
                    value = future.result()
                except SourceUnavailableError as exc:
                    logger.warning("source_fan_out: source_error source=%s error=%s", name, exc)
                    outcomes[name] = SourceOutcome(name=name, settled=True, error=True)
                    continue
                outcomes[name] = SourceOutcome(name=name, settled=True, error=False, value=value)
            return outcomes
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
