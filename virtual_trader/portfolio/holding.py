"""
Holding management for individual stock positions.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict


@dataclass
class Holding:
    """Represents a position in a single stock, tracked at average cost"""
    symbol: str
    quantity: int = 0
    avg_price: Decimal = Decimal("0")

    @property
    def cost_basis(self) -> Decimal:
        """Amount paid for the shares still held"""
        return self.quantity * self.avg_price

    def current_market_value(self, current_price: Decimal) -> Decimal:
        """Market value at current price"""
        return self.quantity * current_price

    def unrealized_pnl(self, current_price: Decimal) -> Decimal:
        """Unrealized profit/loss at current price"""
        return (current_price - self.avg_price) * self.quantity

    def add_shares(self, quantity: int, price: Decimal) -> None:
        """Add shares to holding, updating average price"""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")

        if self.quantity == 0:
            self.quantity = quantity
            self.avg_price = price
        else:
            total_cost = (self.avg_price * self.quantity) + (price * quantity)
            self.quantity += quantity
            self.avg_price = total_cost / self.quantity

    def remove_shares(self, quantity: int) -> bool:
        """Remove shares from holding. Returns True if successful"""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")

        if quantity > self.quantity:
            return False

        self.quantity -= quantity
        return True

    def can_sell(self, quantity: int) -> bool:
        """Check if we can sell the requested quantity"""
        return self.quantity >= quantity and quantity > 0

    @property
    def is_empty(self) -> bool:
        return self.quantity == 0

    def copy(self) -> 'Holding':
        return Holding(self.symbol, self.quantity, self.avg_price)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'quantity': self.quantity,
            'avgPrice': str(self.avg_price),
        }

    def __str__(self) -> str:
        return f"Holding({self.symbol}: {self.quantity} @ ${self.avg_price:.2f})"

    def __repr__(self) -> str:
        return self.__str__()
