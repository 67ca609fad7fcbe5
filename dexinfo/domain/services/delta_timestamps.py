from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dexinfo.domain.entities.snapshot_context import DeltaTimestamps


def delta_timestamps(now: datetime | None = None) -> DeltaTimestamps:
    """Unix timestamps 24h, 48h and 7d before ``now``, floored to the minute."""
    current = now if now is not None else datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)

    def _at(delta: timedelta) -> int:
        moment = (current - delta).replace(second=0, microsecond=0)
        return int(moment.timestamp())

    return DeltaTimestamps(
        one_day=_at(timedelta(days=1)),
        two_day=_at(timedelta(days=2)),
        week=_at(timedelta(weeks=1)),
    )
