"""
Tests for the price simulator.
"""

import asyncio
import pytest
import numpy as np
from decimal import Decimal

from virtual_trader.market.prices import PriceTable
from virtual_trader.market.simulator import PriceSimulator


class TestNextPrice:
    def test_draw_at_bias_leaves_price_unchanged(self, sample_price_table):
        """A draw of exactly 0.48 gives delta 0"""
        simulator = PriceSimulator(sample_price_table)
        assert simulator.next_price(Decimal('100.00'), 0.48) == Decimal('100.00')

    @pytest.mark.parametrize('draw,expected', [
        (0.98, Decimal('102.50')),  # +2.5%
        (0.0, Decimal('97.60')),    # -2.4%
        (0.58, Decimal('100.50')),
    ])
    def test_step_size(self, sample_price_table, draw, expected):
        simulator = PriceSimulator(sample_price_table)
        assert simulator.next_price(Decimal('100.00'), draw) == expected

    def test_rounds_half_up(self, sample_price_table):
        """1.00 * 1.005 lands exactly on a half cent"""
        simulator = PriceSimulator(sample_price_table)
        assert simulator.next_price(Decimal('1.00'), 0.58) == Decimal('1.01')

    def test_price_floor(self, sample_price_table):
        simulator = PriceSimulator(sample_price_table, volatility=2.0, price_floor=Decimal('0.10'))
        assert simulator.next_price(Decimal('1.00'), 0.0) == Decimal('0.10')

    def test_invalid_interval(self, sample_price_table):
        with pytest.raises(ValueError):
            PriceSimulator(sample_price_table, interval=0)


class TestTick:
    @pytest.mark.asyncio
    async def test_tick_with_fixed_draw(self, sample_price_table):
        """Scenario: instrument at 100.00 with draw 0.48 is unchanged"""
        simulator = PriceSimulator(sample_price_table, draw=lambda: 0.48)

        snapshot = await simulator.tick()

        assert snapshot['ACME'] == Decimal('100.00')
        assert snapshot.version == 1
        assert simulator.stats['ticks_completed'] == 1

    @pytest.mark.asyncio
    async def test_tick_moves_every_instrument(self, sample_price_table):
        simulator = PriceSimulator(sample_price_table, draw=lambda: 0.98)

        snapshot = await simulator.tick()

        assert snapshot['ACME'] == Decimal('102.50')
        assert snapshot['GLOBX'] == Decimal('51.25')
        assert snapshot['INIT'] == Decimal('205.00')

    @pytest.mark.asyncio
    async def test_seeded_generator_is_reproducible(self, sample_instruments):
        first = PriceSimulator(PriceTable(sample_instruments), rng=np.random.default_rng(123))
        second = PriceSimulator(PriceTable(sample_instruments), rng=np.random.default_rng(123))

        for _ in range(5):
            a = await first.tick()
            b = await second.tick()

        assert dict(a) == dict(b)

    @pytest.mark.asyncio
    async def test_prices_stay_within_step_bounds(self, sample_price_table):
        simulator = PriceSimulator(sample_price_table, rng=np.random.default_rng(7))
        previous = sample_price_table.snapshot()

        for _ in range(50):
            current = await simulator.tick()
            for symbol, price in current.items():
                ratio = price / previous[symbol]
                assert Decimal('0.97') < ratio < Decimal('1.03')
                assert price > 0
            previous = current

    @pytest.mark.asyncio
    async def test_failed_tick_publishes_nothing(self, sample_price_table):
        def broken_draw():
            raise RuntimeError("rng exploded")

        simulator = PriceSimulator(sample_price_table, draw=broken_draw)

        with pytest.raises(RuntimeError):
            await simulator.tick()

        assert sample_price_table.version == 0


class TestBackgroundLoop:
    @pytest.mark.asyncio
    async def test_start_and_stop(self, sample_price_table):
        simulator = PriceSimulator(sample_price_table, interval=0.01, draw=lambda: 0.6)

        simulator.start()
        await asyncio.sleep(0.1)
        await simulator.stop()

        assert not simulator.is_running
        assert simulator.stats['ticks_completed'] >= 1
        assert sample_price_table.snapshot()['ACME'] > Decimal('100.00')

    @pytest.mark.asyncio
    async def test_failing_tick_does_not_stop_loop(self, sample_price_table):
        """One bad tick is logged and skipped; later ticks still run"""
        calls = {'n': 0}

        def flaky_draw():
            calls['n'] += 1
            if calls['n'] == 1:
                raise RuntimeError("transient")
            return 0.48

        simulator = PriceSimulator(sample_price_table, interval=0.01, draw=flaky_draw)

        simulator.start()
        await asyncio.sleep(0.1)
        await simulator.stop()

        assert simulator.stats['ticks_failed'] == 1
        assert simulator.stats['ticks_completed'] >= 1

    @pytest.mark.asyncio
    async def test_stop_when_not_running(self, sample_price_table):
        simulator = PriceSimulator(sample_price_table)
        await simulator.stop()
        assert not simulator.is_running

    @pytest.mark.asyncio
    async def test_get_status(self, sample_price_table):
        simulator = PriceSimulator(sample_price_table, draw=lambda: 0.48)
        await simulator.tick()

        status = simulator.get_status()

        assert status['version'] == 1
        assert status['statistics']['ticks_completed'] == 1
