from __future__ import annotations

from typing import Protocol

from dexinfo.domain.entities.token_snapshot import TokenSnapshotBatch


class TokenSnapshotPort(Protocol):
    def fetch_token_snapshots(
        self,
        *,
        chain_id: int,
        token_ids: list[str],
        block_number: int | None,
    ) -> TokenSnapshotBatch:
        ...

    def list_top_token_ids(self, *, chain_id: int, first: int) -> list[str]:
        ...
