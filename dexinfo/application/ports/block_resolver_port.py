from __future__ import annotations

from typing import Protocol

from dexinfo.domain.entities.snapshot_context import ResolvedBlock


class BlockResolverPort(Protocol):
    def resolve_blocks(
        self,
        *,
        chain_id: int,
        timestamps: list[int],
    ) -> list[ResolvedBlock | None]:
        ...
