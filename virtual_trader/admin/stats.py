"""
Fleet-wide statistics for the administrator view.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

from ..portfolio.account import Account
from ..portfolio.valuation import ValuationEngine


@dataclass(frozen=True)
class AdminStats:
    user_count: int
    total_invested: Decimal
    instrument_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalUserCount': self.user_count,
            'totalInvested': str(self.total_invested),
            'totalStocks': self.instrument_count,
        }


class AdminAggregator:
    """Folds over all accounts to produce AdminStats"""

    def __init__(self, valuation_engine: Optional[ValuationEngine] = None):
        self.valuation_engine = valuation_engine or ValuationEngine()

    def stats(self, accounts: Iterable[Account], prices: Mapping[str, Decimal]) -> AdminStats:
        """Admin accounts are skipped; accounts without holdings add nothing"""
        user_count = 0
        total_invested = Decimal("0")

        for account in accounts:
            if account.is_admin:
                continue
            user_count += 1
            total_invested += self.valuation_engine.value_portfolio(account, prices).market_value

        return AdminStats(
            user_count=user_count,
            total_invested=total_invested,
            instrument_count=len(prices),
        )
