"""
Risk labelling from price deviation against the bootstrap price.
"""

from decimal import Decimal
from typing import Mapping

from ..core.exceptions import UnknownInstrumentError
from ..core.money import Number, to_decimal
from ..core.types import RiskLevel


class RiskClassifier:
    """Labels a price Low/Moderate/High by how far it moved from its reference"""

    def __init__(self, reference_prices: Mapping[str, Decimal],
                 moderate_threshold: Number = Decimal("0.10"),
                 high_threshold: Number = Decimal("0.25")):
        self.moderate_threshold = to_decimal(moderate_threshold, "moderate_threshold")
        self.high_threshold = to_decimal(high_threshold, "high_threshold")
        if not 0 <= self.moderate_threshold <= self.high_threshold:
            raise ValueError("Risk thresholds must satisfy 0 <= moderate <= high")

        # frozen at construction
        self.reference_prices = dict(reference_prices)

    def deviation(self, symbol: str, current_price: Number) -> Decimal:
        """Relative distance of ``current_price`` from the reference price"""
        reference = self.reference_prices.get(symbol)
        if reference is None:
            raise UnknownInstrumentError(symbol)
        if reference == 0:
            return Decimal("0")
        return abs(to_decimal(current_price, "price") - reference) / reference

    def classify(self, symbol: str, current_price: Number) -> RiskLevel:
        deviation = self.deviation(symbol, current_price)
        if deviation > self.high_threshold:
            return RiskLevel.HIGH
        if deviation > self.moderate_threshold:
            return RiskLevel.MODERATE
        return RiskLevel.LOW
