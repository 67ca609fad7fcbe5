from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from dexinfo.domain.entities.position import PositionPool, PositionRecord, PositionToken
from dexinfo.domain.services.position_valuation import token_price_usd, valuate_position, valuate_positions


def _record(position_id: str, pool_address: str, *, derived_eth0: str | None = "1") -> PositionRecord:
    return PositionRecord(
        position_id=position_id,
        owner="0xowner",
        liquidity=1000,
        pool=PositionPool(
            address=pool_address,
            fee_tier=3000,
            tick=0,
            liquidity=5000,
            reinvest_l=None,
            sqrt_price=2**96,
        ),
        tick_lower=-60,
        tick_upper=60,
        token0=PositionToken(
            address="0xt0",
            symbol="WETH",
            decimals=18,
            derived_eth=Decimal(derived_eth0) if derived_eth0 is not None else None,
        ),
        token1=PositionToken(address="0xt1", symbol="USDC", decimals=6, derived_eth=Decimal("0.0005")),
    )


def _fixed_amounts(**_kwargs):
    return Decimal("2"), Decimal("100")


def test_value_sums_both_legs():
    position = valuate_position(
        _record("1", "0xpool"),
        eth_price_usd=Decimal("2000"),
        amounts_calculator=_fixed_amounts,
    )

    # 2 * 2000 + 100 * (0.0005 * 2000)
    assert position.value_usd == Decimal("4100")
    assert position.token0_amount == Decimal("2")
    assert position.token1_amount == Decimal("100")


def test_unpriced_token_values_whole_position_at_zero():
    position = valuate_position(
        _record("1", "0xpool", derived_eth0=None),
        eth_price_usd=Decimal("2000"),
        amounts_calculator=_fixed_amounts,
    )

    assert position.value_usd == Decimal("0")
    assert position.token0_amount == Decimal("2")
    assert position.token1_amount == Decimal("100")


def test_missing_eth_price_values_position_at_zero():
    position = valuate_position(
        _record("1", "0xpool"),
        eth_price_usd=None,
        amounts_calculator=_fixed_amounts,
    )

    assert position.value_usd == Decimal("0")


def test_record_without_tick_range_degrades_to_zero():
    records = [replace(_record("bad", "0xpool"), tick_lower=None), _record("good", "0xpool")]

    positions = valuate_positions(records, eth_price_usd=Decimal("2000"))

    assert positions[0].value_usd == Decimal("0")
    assert positions[0].token0_amount == Decimal("0")
    assert positions[1].value_usd > 0


def test_zero_eth_price_yields_zero_value():
    position = valuate_position(
        _record("1", "0xpool"),
        eth_price_usd=Decimal("0"),
        amounts_calculator=_fixed_amounts,
    )

    assert position.value_usd == Decimal("0")


def test_broken_record_degrades_to_zero_without_failing_batch():
    def _amounts(**kwargs):
        if kwargs["liquidity"] == 1:
            raise ValueError("bad record")
        return Decimal("1"), Decimal("0")

    bad = replace(_record("bad", "0xpool"), liquidity=1)
    positions = valuate_positions(
        [bad, _record("good", "0xpool")],
        eth_price_usd=Decimal("2000"),
        amounts_calculator=_amounts,
    )

    assert [p.position_id for p in positions] == ["bad", "good"]
    assert positions[0].value_usd == Decimal("0")
    assert positions[1].value_usd == Decimal("2000")


def test_pool_filter_excludes_foreign_pools_only_when_given():
    records = [_record("1", "0xPoolA"), _record("2", "0xpoolb")]

    scoped = valuate_positions(
        records,
        eth_price_usd=Decimal("2000"),
        pool_ids=["0xpoola"],
        amounts_calculator=_fixed_amounts,
    )
    by_owner = valuate_positions(records, eth_price_usd=Decimal("2000"), amounts_calculator=_fixed_amounts)

    assert [p.position_id for p in scoped] == ["1"]
    assert [p.position_id for p in by_owner] == ["1", "2"]


def test_token_price_usd():
    token = PositionToken(address="0xt", symbol="T", decimals=18, derived_eth=Decimal("0.5"))

    assert token_price_usd(token, Decimal("3000")) == Decimal("1500")
    assert token_price_usd(token, None) == Decimal("0")


def test_default_calculator_values_in_range_position():
    position = valuate_position(_record("1", "0xpool"), eth_price_usd=Decimal("2000"))

    assert position.token0_amount > 0
    assert position.token1_amount > 0
    assert position.value_usd > 0
