from __future__ import annotations

from decimal import Decimal

import pytest

from dexinfo.application.dto.positions import ValuateOwnerPositionsInput, ValuatePositionsInput
from dexinfo.application.services.source_fan_out import SourceFanOut
from dexinfo.application.use_cases.valuate_owner_positions import ValuateOwnerPositionsUseCase
from dexinfo.application.use_cases.valuate_positions import ValuatePositionsUseCase
from dexinfo.domain.entities.position import PositionPool, PositionRecord, PositionToken
from dexinfo.domain.exceptions import PositionsInputError, SourceUnavailableError


def _record(position_id: str, pool_address: str) -> PositionRecord:
    token = PositionToken(address="0xt0", symbol="WETH", decimals=18, derived_eth=Decimal("1"))
    return PositionRecord(
        position_id=position_id,
        owner="0xowner",
        liquidity=10**18,
        pool=PositionPool(
            address=pool_address,
            fee_tier=500,
            tick=0,
            liquidity=10**20,
            reinvest_l=None,
            sqrt_price=2**96,
        ),
        tick_lower=-600,
        tick_upper=600,
        token0=token,
        token1=PositionToken(address="0xt1", symbol="USDC", decimals=18, derived_eth=Decimal("0.0005")),
    )


class FakePositionPort:
    def __init__(self, records: list[PositionRecord], *, fail: bool = False):
        self.records = records
        self.fail = fail

    def fetch_positions_by_pools(self, *, chain_id, pool_ids):
        if self.fail:
            raise SourceUnavailableError("positions unavailable")
        return self.records

    def fetch_positions_by_owner(self, *, chain_id, owner):
        if self.fail:
            raise SourceUnavailableError("positions unavailable")
        return self.records


class FakeEthPricePort:
    def __init__(self, price: Decimal | None, *, fail: bool = False):
        self.price = price
        self.fail = fail

    def get_eth_prices(self, *, chain_id, one_day_block, week_block):
        return None

    def get_current_eth_price(self, *, chain_id):
        if self.fail:
            raise SourceUnavailableError("bundle unavailable")
        return self.price


def _fan_out() -> SourceFanOut:
    return SourceFanOut(max_workers=2, timeout_seconds=5)


def test_pool_scoped_and_owner_variants_differ_only_by_filter():
    records = [_record("1", "0xpoola"), _record("2", "0xpoolb")]
    scoped = ValuatePositionsUseCase(
        position_port=FakePositionPort(records),
        eth_price_port=FakeEthPricePort(Decimal("2000")),
        fan_out=_fan_out(),
    ).execute(ValuatePositionsInput(chain_id=1, pool_ids=("0xPoolA",)))
    by_owner = ValuateOwnerPositionsUseCase(
        position_port=FakePositionPort(records),
        eth_price_port=FakeEthPricePort(Decimal("2000")),
        fan_out=_fan_out(),
    ).execute(ValuateOwnerPositionsInput(chain_id=1, owner="0xOwner"))

    assert [p.position_id for p in scoped.positions] == ["1"]
    assert [p.position_id for p in by_owner.positions] == ["1", "2"]
    assert scoped.positions[0].value_usd > 0


def test_missing_eth_price_is_loading():
    output = ValuatePositionsUseCase(
        position_port=FakePositionPort([_record("1", "0xpoola")]),
        eth_price_port=FakeEthPricePort(None),
        fan_out=_fan_out(),
    ).execute(ValuatePositionsInput(chain_id=1, pool_ids=("0xpoola",)))

    assert output.loading is True
    assert output.error is False
    assert output.positions is None


def test_failed_eth_price_is_error_not_loading():
    output = ValuateOwnerPositionsUseCase(
        position_port=FakePositionPort([_record("1", "0xpoola")]),
        eth_price_port=FakeEthPricePort(None, fail=True),
        fan_out=_fan_out(),
    ).execute(ValuateOwnerPositionsInput(chain_id=1, owner="0xowner"))

    assert output.error is True
    assert output.loading is False
    assert output.positions is None


def test_failed_position_fetch_is_an_error():
    output = ValuateOwnerPositionsUseCase(
        position_port=FakePositionPort([], fail=True),
        eth_price_port=FakeEthPricePort(Decimal("2000")),
        fan_out=_fan_out(),
    ).execute(ValuateOwnerPositionsInput(chain_id=1, owner="0xowner"))

    assert output.error is True
    assert output.positions is None


def test_rejects_empty_pool_ids():
    use_case = ValuatePositionsUseCase(
        position_port=FakePositionPort([]),
        eth_price_port=FakeEthPricePort(Decimal("2000")),
        fan_out=_fan_out(),
    )

    with pytest.raises(PositionsInputError):
        use_case.execute(ValuatePositionsInput(chain_id=1, pool_ids=()))


def test_rejects_invalid_owner():
    use_case = ValuateOwnerPositionsUseCase(
        position_port=FakePositionPort([]),
        eth_price_port=FakeEthPricePort(Decimal("2000")),
        fan_out=_fan_out(),
    )

    with pytest.raises(PositionsInputError):
        use_case.execute(ValuateOwnerPositionsInput(chain_id=1, owner="vitalik.eth"))
