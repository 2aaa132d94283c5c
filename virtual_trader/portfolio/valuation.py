"""
Portfolio valuation against a price table.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from .account import Account

ZERO = Decimal("0")
HUNDRED = Decimal("100")

VALUATION_COLUMNS = [
    'symbol', 'name', 'quantity', 'avg_price', 'current_price',
    'market_value', 'cost_basis', 'pnl', 'pnl_percent',
]


def pnl_percent(pnl: Decimal, cost_basis: Decimal) -> Decimal:
    """P/L as a percentage of cost basis, 0 when nothing was paid"""
    if cost_basis == 0:
        return ZERO
    return pnl / cost_basis * HUNDRED


@dataclass(frozen=True)
class HoldingValuation:
    symbol: str
    name: str
    quantity: int
    avg_price: Decimal
    current_price: Decimal
    market_value: Decimal
    cost_basis: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    priced: bool = True  # False when valued at avg price for lack of a quote

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'name': self.name,
            'quantity': self.quantity,
            'avgPrice': str(self.avg_price),
            'currentPrice': str(self.current_price),
            'marketValue': str(self.market_value),
            'costBasis': str(self.cost_basis),
            'pnl': str(self.pnl),
            'pnlPercent': str(self.pnl_percent),
        }


@dataclass(frozen=True)
class PortfolioValuation:
    """Per-holding and aggregate valuation of one account"""
    account_id: str
    cash: Decimal
    holdings: List[HoldingValuation] = field(default_factory=list)
    market_value: Decimal = ZERO
    cost_basis: Decimal = ZERO
    pnl: Decimal = ZERO
    pnl_percent: Decimal = ZERO

    @property
    def net_worth(self) -> Decimal:
        """Cash plus market value of all holdings"""
        return self.cash + self.market_value

    def get(self, symbol: str) -> Optional[HoldingValuation]:
        for holding in self.holdings:
            if holding.symbol == symbol:
                return holding
        return None

    def to_dataframe(self) -> pd.DataFrame:
        """One row per holding"""
        rows = [
            {
                'symbol': h.symbol,
                'name': h.name,
                'quantity': h.quantity,
                'avg_price': h.avg_price,
                'current_price': h.current_price,
                'market_value': h.market_value,
                'cost_basis': h.cost_basis,
                'pnl': h.pnl,
                'pnl_percent': h.pnl_percent,
            }
            for h in self.holdings
        ]
        return pd.DataFrame(rows, columns=VALUATION_COLUMNS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accountId': self.account_id,
            'cash': str(self.cash),
            'holdings': [h.to_dict() for h in self.holdings],
            'marketValue': str(self.market_value),
            'costBasis': str(self.cost_basis),
            'pnl': str(self.pnl),
            'pnlPercent': str(self.pnl_percent),
            'netWorth': str(self.net_worth),
        }


class ValuationEngine:
    """Values holdings at current prices, falling back to average cost"""

    def value_portfolio(self, account: Account, prices: Mapping[str, Decimal],
                        names: Optional[Mapping[str, str]] = None) -> PortfolioValuation:
        """Value every holding of an account.

        A symbol missing from ``prices`` (delisted) is valued at its average
        price, so it shows zero P/L instead of raising.
        """
        names = names or {}
        rows: List[HoldingValuation] = []
        total_market = ZERO
        total_cost = ZERO

        for symbol, holding in account.holdings.items():
            quote = prices.get(symbol)
            current_price = quote if quote is not None else holding.avg_price
            market_value = holding.current_market_value(current_price)
            cost_basis = holding.cost_basis
            pnl = holding.unrealized_pnl(current_price)

            rows.append(HoldingValuation(
                symbol=symbol,
                name=names.get(symbol, symbol),
                quantity=holding.quantity,
                avg_price=holding.avg_price,
                current_price=current_price,
                market_value=market_value,
                cost_basis=cost_basis,
                pnl=pnl,
                pnl_percent=pnl_percent(pnl, cost_basis),
                priced=quote is not None,
            ))
            total_market += market_value
            total_cost += cost_basis

        total_pnl = total_market - total_cost
        return PortfolioValuation(
            account_id=account.id,
            cash=account.balance,
            holdings=rows,
            market_value=total_market,
            cost_basis=total_cost,
            pnl=total_pnl,
            pnl_percent=pnl_percent(total_pnl, total_cost),
        )
