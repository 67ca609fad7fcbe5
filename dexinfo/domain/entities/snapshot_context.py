from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ResolvedBlock:
    number: int
    timestamp: int | None = None


@dataclass(frozen=True)
class DeltaTimestamps:
    one_day: int
    two_day: int
    week: int

    def as_list(self) -> list[int]:
        return [self.one_day, self.two_day, self.week]


@dataclass(frozen=True)
class DeltaBlocks:
    one_day: ResolvedBlock | None
    two_day: ResolvedBlock | None
    week: ResolvedBlock | None

    @property
    def resolved(self) -> bool:
        return self.one_day is not None and self.two_day is not None and self.week is not None


@dataclass(frozen=True)
class EthPrices:
    current: Decimal | None
    one_day: Decimal | None
    week: Decimal | None


@dataclass(frozen=True)
class ReferencePrices:
    current: Decimal | None
    one_day: Decimal | None
    two_day: Decimal | None
    week: Decimal | None


@dataclass(frozen=True)
class SnapshotContext:
    """Resolved blocks and ETH/USD reference prices shared by one aggregation."""

    blocks: DeltaBlocks
    prices: ReferencePrices
