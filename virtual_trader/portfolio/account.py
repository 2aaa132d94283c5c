"""
Trader account: cash balance plus holdings keyed by symbol.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
import uuid

from .holding import Holding


@dataclass
class Account:
    """Cash balance and holdings of one trader"""
    name: str
    balance: Decimal
    holdings: Dict[str, Holding] = field(default_factory=dict)
    is_admin: bool = False
    email: Optional[str] = None
    phone: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get_holding(self, symbol: str) -> Optional[Holding]:
        """Holding for a symbol, or None when nothing is held"""
        return self.holdings.get(symbol)

    @property
    def cost_basis(self) -> Decimal:
        """Total amount paid for all shares currently held"""
        return sum((h.cost_basis for h in self.holdings.values()), Decimal("0"))

    def copy(self) -> 'Account':
        """Working copy whose holdings can be mutated without touching this one"""
        return Account(
            name=self.name,
            balance=self.balance,
            holdings={symbol: h.copy() for symbol, h in self.holdings.items()},
            is_admin=self.is_admin,
            email=self.email,
            phone=self.phone,
            id=self.id,
            created_at=self.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'balance': str(self.balance),
            'portfolio': [h.to_dict() for h in self.holdings.values()],
            'isAdmin': self.is_admin,
        }

    def __str__(self) -> str:
        return f"Account({self.name}: Cash ${self.balance:.2f}, Holdings: {len(self.holdings)})"

    def __repr__(self) -> str:
        return self.__str__()
