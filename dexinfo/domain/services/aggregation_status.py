from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class SourceState:
    name: str
    loading: bool
    error: bool


@dataclass(frozen=True)
class AggregationStatus:
    ready: bool
    errored: bool
    pending_sources: tuple[str, ...] = ()
    failed_sources: tuple[str, ...] = ()

    @property
    def loading(self) -> bool:
        return not self.ready


def resolve_aggregation_status(
    states: Iterable[SourceState],
    *,
    reference_price: SourceState | None = None,
) -> AggregationStatus:
    """Combine per-source flags into one readiness/error pair.

    A reference price that has not arrived yet (loading without error) holds
    the whole aggregation in the loading state and masks errors from the other
    sources, since the price refreshes on its own cycle. Otherwise a single
    failing source marks the aggregation as errored and any unsettled source
    keeps it loading.
    """
    collected = list(states)
    if reference_price is not None:
        if reference_price.loading and not reference_price.error:
            return AggregationStatus(
                ready=False,
                errored=False,
                pending_sources=(reference_price.name,),
            )
        collected.append(reference_price)

    pending = tuple(state.name for state in collected if state.loading)
    failed = tuple(state.name for state in collected if state.error)
    return AggregationStatus(
        ready=not pending,
        errored=bool(failed),
        pending_sources=pending,
        failed_sources=failed,
    )
