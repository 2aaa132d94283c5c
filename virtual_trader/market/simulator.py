"""
Periodic price simulation.

Each tick moves every instrument by a biased random walk step:
``delta = (r - drift_bias) * volatility`` with ``r`` uniform in [0, 1).
With the default bias of 0.48 the mean of ``r - 0.48`` is +0.02, so
prices drift slightly on average. Changing the constants changes
product behaviour.
"""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Optional

import numpy as np

from .prices import PriceTable, PriceSnapshot
from ..core.money import round_price, to_decimal

DEFAULT_DRIFT_BIAS = 0.48
DEFAULT_VOLATILITY = 0.05
DEFAULT_PRICE_FLOOR = Decimal("0.01")


class PriceSimulator:
    """Moves prices on a fixed cadence, independent of trade requests"""

    def __init__(self, price_table: PriceTable, interval: float = 5.0,
                 drift_bias: float = DEFAULT_DRIFT_BIAS,
                 volatility: float = DEFAULT_VOLATILITY,
                 price_floor: Decimal = DEFAULT_PRICE_FLOOR,
                 rng: Optional[np.random.Generator] = None,
                 draw: Optional[Callable[[], float]] = None):
        """
        Initialize the simulator

        Args:
            price_table: Table the new snapshots are published to
            interval: Seconds between ticks when running in the background
            drift_bias: Subtracted from each uniform draw
            volatility: Scale of a single step (0.05 = +/-2.5% around the bias)
            price_floor: Lowest price a tick may produce
            rng: numpy generator for the draws; a fresh default_rng() if omitted
            draw: Overrides the generator entirely, returns one value in [0, 1)
        """
        if interval <= 0:
            raise ValueError("Interval must be positive")

        self.price_table = price_table
        self.interval = interval
        self.drift_bias = to_decimal(drift_bias, "drift_bias")
        self.volatility = to_decimal(volatility, "volatility")
        self.price_floor = to_decimal(price_floor, "price_floor")
        self.rng = rng if rng is not None else np.random.default_rng()
        self._draw = draw

        self.is_running = False
        self._task: Optional[asyncio.Task] = None
        self.stats = {
            'ticks_completed': 0,
            'ticks_failed': 0,
            'last_tick_time': None,
        }
        self.logger = logging.getLogger(__name__)

    def draw(self) -> float:
        """One uniform variate in [0, 1)"""
        if self._draw is not None:
            return self._draw()
        return float(self.rng.random())

    def next_price(self, price: Decimal, r: float) -> Decimal:
        """Price after one step with draw ``r``, rounded and floored"""
        delta = (to_decimal(r, "draw") - self.drift_bias) * self.volatility
        moved = round_price(price * (1 + delta))
        return max(moved, self.price_floor)

    async def tick(self) -> PriceSnapshot:
        """Move every instrument once and publish the result as one snapshot"""
        async with self.price_table.write_lock:
            current = self.price_table.snapshot()
            new_prices: Dict[str, Decimal] = {
                symbol: self.next_price(price, self.draw())
                for symbol, price in current.items()
            }
            snapshot = self.price_table.publish(new_prices)

        self.stats['ticks_completed'] += 1
        self.stats['last_tick_time'] = datetime.now()
        self.logger.debug(f"Tick published v{snapshot.version} for {len(snapshot)} instruments")
        return snapshot

    async def run(self) -> None:
        """Tick every ``interval`` seconds until stopped.

        A failing tick is logged and skipped; the next one runs regardless.
        """
        while self.is_running:
            await asyncio.sleep(self.interval)
            if not self.is_running:
                break
            try:
                await self.tick()
            except Exception:
                self.stats['ticks_failed'] += 1
                self.logger.exception("Error updating stock prices, skipping tick")

    def start(self) -> asyncio.Task:
        """Start ticking in the background on the running loop"""
        if self.is_running:
            self.logger.warning("Price simulator is already running")
            return self._task

        self.logger.info(f"Starting price simulator (every {self.interval}s)")
        self.is_running = True
        self._task = asyncio.ensure_future(self.run())
        return self._task

    async def stop(self) -> None:
        """Stop the background task and wait for it to finish"""
        if not self.is_running:
            self.logger.warning("Price simulator is not running")
            return

        self.logger.info("Stopping price simulator")
        self.is_running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    def get_status(self) -> Dict:
        return {
            'is_running': self.is_running,
            'interval': self.interval,
            'version': self.price_table.version,
            'statistics': self.stats.copy(),
        }
