from __future__ import annotations

import logging

from dexinfo.application.dto.transactions import ListUserTransactionsInput, ListUserTransactionsOutput
from dexinfo.application.ports.user_events_port import UserEventsPort
from dexinfo.application.services.source_fan_out import SourceFanOut
from dexinfo.domain.entities.transaction import UserEvents
from dexinfo.domain.exceptions import TransactionsInputError
from dexinfo.domain.services.identity import is_hex_address, normalize_address
from dexinfo.domain.services.token_display import TokenDisplayOverrides
from dexinfo.domain.services.transactions import normalize_user_events


logger = logging.getLogger(__name__)


class ListUserTransactionsUseCase:
    def __init__(
        self,
        *,
        user_events_port: UserEventsPort,
        fan_out: SourceFanOut,
        display_overrides: TokenDisplayOverrides | None = None,
    ):
        self._user_events_port = user_events_port
        self._fan_out = fan_out
        self._display = display_overrides or TokenDisplayOverrides()

    def execute(self, command: ListUserTransactionsInput) -> ListUserTransactionsOutput:
        if command.chain_id <= 0:
            raise TransactionsInputError("chain_id must be a positive integer.")
        address = normalize_address(command.address)
        if not is_hex_address(address):
            raise TransactionsInputError("address must start with 0x.")

        outcome = self._fan_out.run(
            {
                "events": lambda: self._user_events_port.fetch_user_events(
                    chain_id=command.chain_id,
                    address=address,
                )
            }
        )["events"]
        if outcome.error or not outcome.settled:
            logger.warning(
                "list_user_transactions: events_unavailable address=%s chain_id=%s loading=%s error=%s",
                address,
                command.chain_id,
                not outcome.settled,
                outcome.error,
            )
            return ListUserTransactionsOutput(loading=not outcome.settled, error=outcome.error)

        events: UserEvents = outcome.value or UserEvents()
        data = normalize_user_events(events, chain_id=command.chain_id, display=self._display)
        logger.info(
            "list_user_transactions: done address=%s chain_id=%s mints=%s burns=%s swaps=%s",
            address,
            command.chain_id,
            len(events.mints),
            len(events.burns),
            len(events.swaps),
        )
        return ListUserTransactionsOutput(loading=False, error=False, data=data)
