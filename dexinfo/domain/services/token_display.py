from __future__ import annotations

from dataclasses import dataclass, field

from dexinfo.domain.services.chains import chain_key
from dexinfo.domain.services.identity import normalize_address


def _lookup(data: dict, *, chain_id: int, address: str) -> str | None:
    address_key = normalize_address(address)
    for key in (chain_key(chain_id), "default"):
        if key is None:
            continue
        bucket = data.get(key) if isinstance(data, dict) else None
        if not isinstance(bucket, dict):
            continue
        value = bucket.get(address) or bucket.get(address_key)
        if value:
            return str(value)
    return None


@dataclass(frozen=True)
class TokenDisplayOverrides:
    symbols: dict = field(default_factory=dict)
    names: dict = field(default_factory=dict)

    def symbol(self, *, chain_id: int, address: str, fallback: str) -> str:
        override = _lookup(self.symbols, chain_id=chain_id, address=address)
        return override if override is not None else fallback

    def name(self, *, chain_id: int, address: str, fallback: str) -> str:
        override = _lookup(self.names, chain_id=chain_id, address=address)
        return override if override is not None else fallback
