from __future__ import annotations

from typing import Protocol

from dexinfo.domain.entities.transaction import UserEvents


class UserEventsPort(Protocol):
    def fetch_user_events(self, *, chain_id: int, address: str) -> UserEvents:
        ...
