"""
Core data models for the virtual trader.
Contains the immutable records shared by every component.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
import uuid

from .types import TradeSide, RiskLevel, Role


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Instrument:
    """A tradable synthetic stock"""
    symbol: str
    name: str
    sector: str
    price: Decimal

    def with_price(self, price: Decimal) -> 'Instrument':
        """Copy of this instrument at a new price"""
        return replace(self, price=price)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'name': self.name,
            'sector': self.sector,
            'price': str(self.price),
        }


@dataclass(frozen=True)
class Transaction:
    """Represents an executed trade. Never mutated once written."""
    account_id: str
    side: TradeSide
    symbol: str
    quantity: int
    price: Decimal
    risk: RiskLevel
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=_utcnow)
    sequence: int = 0

    @property
    def value(self) -> Decimal:
        """Cash moved by this trade"""
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'id': self.id,
            'account_id': self.account_id,
            'type': self.side.value,
            'symbol': self.symbol,
            'quantity': self.quantity,
            'price': str(self.price),
            'risk': self.risk.value,
            'date': self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Identity:
    """Verified caller, as supplied by the authentication collaborator"""
    account_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
