from __future__ import annotations

import logging
from decimal import Decimal

from dexinfo.application.dto.positions import ValuatePositionsInput, ValuatePositionsOutput
from dexinfo.application.ports.eth_price_port import EthPricePort
from dexinfo.application.ports.position_port import PositionPort
from dexinfo.application.services.source_fan_out import SourceFanOut
from dexinfo.domain.exceptions import PositionsInputError
from dexinfo.domain.services.aggregation_status import SourceState, resolve_aggregation_status
from dexinfo.domain.services.identity import is_hex_address, normalize_addresses
from dexinfo.domain.services.position_valuation import valuate_positions


logger = logging.getLogger(__name__)


class ValuatePositionsUseCase:
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

    def execute(self, command: ValuatePositionsInput) -> ValuatePositionsOutput:
        if command.chain_id <= 0:
            raise PositionsInputError("chain_id must be a positive integer.")
        pool_ids = normalize_addresses(command.pool_ids)
        if not pool_ids:
            raise PositionsInputError("At least one pool id is required.")
        if not all(is_hex_address(pool_id) for pool_id in pool_ids):
            raise PositionsInputError("Pool ids must start with 0x.")

        logger.info(
            "valuate_positions: start chain_id=%s pools=%s",
            command.chain_id,
            len(pool_ids),
        )
        outcomes = self._fan_out.run(
            {
                "positions": lambda: self._position_port.fetch_positions_by_pools(
                    chain_id=command.chain_id,
                    pool_ids=pool_ids,
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
                "valuate_positions: not_ready chain_id=%s loading=%s error=%s pending=%s failed=%s",
                command.chain_id,
                status.loading,
                status.errored,
                ",".join(status.pending_sources),
                ",".join(status.failed_sources),
            )
            return ValuatePositionsOutput(loading=status.loading, error=status.errored, positions=None)

        positions = valuate_positions(
            outcomes["positions"].value or [],
            eth_price_usd=eth_price,
            pool_ids=pool_ids,
        )
        logger.info(
            "valuate_positions: done chain_id=%s positions=%s",
            command.chain_id,
            len(positions),
        )
        return ValuatePositionsOutput(loading=False, error=False, positions=positions)
