"""
Versioned instrument price table.

Readers take the current PriceSnapshot and keep using it; a snapshot never
changes. Writers build the next snapshot and publish it in one assignment,
so a reader sees either the whole previous tick or the whole new one.
"""

import asyncio
import logging
from datetime import datetime, timezone
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from ..core.models import Instrument
from ..core.money import to_positive_decimal
from ..core.exceptions import UnknownInstrumentError


# Seed set, created once at bootstrap
DEFAULT_INSTRUMENTS = [
    Instrument("TCS", "Tata Consultancy Services", "IT", Decimal("3850.25")),
    Instrument("INFY", "Infosys", "IT", Decimal("1620.10")),
    Instrument("RELIANCE", "Reliance Industries", "Energy", Decimal("2910.40")),
    Instrument("HDFCBANK", "HDFC Bank", "Finance", Decimal("1530.75")),
    Instrument("ICICIBANK", "ICICI Bank", "Finance", Decimal("1105.00")),
    Instrument("TATAMOTORS", "Tata Motors", "Auto", Decimal("975.80")),
    Instrument("SUNPHARMA", "Sun Pharmaceutical", "Pharma", Decimal("1480.60")),
    Instrument("LT", "Larsen & Toubro", "Infra", Decimal("3600.30")),
]


class PriceSnapshot(Mapping[str, Decimal]):
    """Immutable symbol -> price view of one version of the table"""

    def __init__(self, instruments: Mapping[str, Instrument], version: int,
                 published_at: Optional[datetime] = None):
        self._instruments = MappingProxyType(dict(instruments))
        self.version = version
        self.published_at = published_at or datetime.now(timezone.utc)

    def __getitem__(self, symbol: str) -> Decimal:
        return self._instruments[symbol].price

    def __iter__(self) -> Iterator[str]:
        return iter(self._instruments)

    def __len__(self) -> int:
        return len(self._instruments)

    def instrument(self, symbol: str) -> Instrument:
        """Instrument record for a symbol"""
        try:
            return self._instruments[symbol]
        except KeyError:
            raise UnknownInstrumentError(symbol)

    def price(self, symbol: str) -> Decimal:
        return self.instrument(symbol).price

    @property
    def instruments(self) -> List[Instrument]:
        return list(self._instruments.values())

    @property
    def names(self) -> Dict[str, str]:
        return {symbol: inst.name for symbol, inst in self._instruments.items()}

    def __repr__(self) -> str:
        return f"PriceSnapshot(v{self.version}, {len(self)} instruments)"


class PriceTable:
    """Owner of the current price snapshot and the bootstrap baseline"""

    def __init__(self, instruments: Iterable[Instrument] = None):
        if instruments is None:
            instruments = DEFAULT_INSTRUMENTS

        seeded: Dict[str, Instrument] = {}
        for inst in instruments:
            if inst.symbol in seeded:
                raise ValueError(f"Duplicate instrument symbol: {inst.symbol}")
            to_positive_decimal(inst.price, f"{inst.symbol} price")
            seeded[inst.symbol] = inst

        self.baseline = PriceSnapshot(seeded, version=0)
        self._current = self.baseline
        self._write_lock: Optional[asyncio.Lock] = None
        self.logger = logging.getLogger(__name__)

    def snapshot(self) -> PriceSnapshot:
        """The latest published snapshot"""
        return self._current

    @property
    def version(self) -> int:
        return self._current.version

    def __len__(self) -> int:
        return len(self._current)

    @property
    def write_lock(self) -> asyncio.Lock:
        # created lazily so the table can be built outside a running loop
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        return self._write_lock

    def publish(self, prices: Mapping[str, Decimal]) -> PriceSnapshot:
        """Publish a new version with updated prices for existing symbols.

        Callers that may race with other writers should hold ``write_lock``.
        """
        current = self._current
        updated = dict(current._instruments)
        for symbol, price in prices.items():
            if symbol not in updated:
                raise UnknownInstrumentError(symbol)
            updated[symbol] = updated[symbol].with_price(to_positive_decimal(price, f"{symbol} price"))

        snapshot = PriceSnapshot(updated, version=current.version + 1)
        self._current = snapshot
        self.logger.debug(f"Published price snapshot v{snapshot.version}")
        return snapshot
