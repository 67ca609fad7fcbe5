from __future__ import annotations

import logging
from decimal import Decimal

from dexinfo.application.dto.positions import ValuateOwnerPositionsInput, ValuatePositionsOutput
from dexinfo.application.ports.eth_price_port import EthPricePort
from dexinfo.application.ports.position_port import PositionPort
from dexinfo.application.services.source_fan_out import SourceFanOut
from dexinfo.domain.exceptions import PositionsInputError
from dexinfo.domain.services.aggregation_status import SourceState, resolve_aggregation_status
from dexinfo.domain.services.identity import is_hex_address, normalize_address
from dexinfo.domain.services.position_valuation import valuate_positions


logger = logging.getLogger(__name__)


class ValuateOwnerPositionsUseCase:
    def __init__(
        self,
        *,
        position_port: PositionPort,
        eth_price_port: EthPricePort,
        fan_out: SourceFanOut,
    ):
        self._position_port = position_port
        self._eth_price_port = eth_price_port
        self._fan_out = fan_out

    def execute(self, command: ValuateOwnerPositionsInput) -> ValuatePositionsOutput:
        if command.chain_id <= 0:
            raise PositionsInputError("chain_id must be a positive integer.")
        owner = normalize_address(command.owner)
        if not is_hex_address(owner):
            raise PositionsInputError("owner must start with 0x.")

        outcomes = self._fan_out.run(
            {
                "positions": lambda: self._position_port.fetch_positions_by_owner(
                    chain_id=command.chain_id,
                    owner=owner,
                ),
                "eth_price": lambda: self._eth_price_port.get_current_eth_price(
                    chain_id=command.chain_id,
                ),
            }
        )
        eth_price: Decimal | None = outcomes["eth_price"].value
        status = resolve_aggregation_status(
            [outcomes["positions"].state],
            reference_price=SourceState(
                name="eth_price",
                loading=eth_price is None and not outcomes["eth_price"].error,
                error=outcomes["eth_price"].error,
            ),
        )
        if status.errored or not status.ready:
            logger.warning(
                "valuate_owner_positions: not_ready owner=%s chain_id=%s loading=%s error=%s",
                owner,
                command.chain_id,
                status.loading,
                status.errored,
            )
            return ValuatePositionsOutput(loading=status.loading, error=status.errored, positions=None)

        positions = valuate_positions(outcomes["positions"].value or [], eth_price_usd=eth_price)
        logger.info(
            "valuate_owner_positions: done owner=%s chain_id=%s positions=%s",
            owner,
            command.chain_id,
            len(positions),
        )
        return ValuatePositionsOutput(loading=False, error=False, positions=positions)
