"""Portfolio management components."""

from .holding import Holding
from .account import Account
from .transactions import TransactionLog, TransactionHistory
from .ledger import PortfolioLedger
from .valuation import ValuationEngine, PortfolioValuation, HoldingValuation

__all__ = [
    'Holding', 'Account', 'TransactionLog', 'TransactionHistory',
    'PortfolioLedger', 'ValuationEngine', 'PortfolioValuation', 'HoldingValuation'
]
