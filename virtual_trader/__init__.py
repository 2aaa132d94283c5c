"""
Virtual Trader - simulated stock trading against a virtual cash balance.

This package provides:
- Average-cost portfolio accounting with per-account serialized trades
- An append-only transaction log
- A background biased random-walk price simulator
- Risk labelling, portfolio valuation and admin statistics
"""

__version__ = "1.0.0"
__author__ = "Virtual Trader Team"

from .core.types import TradeSide, RiskLevel, Role
from .core.models import Instrument, Transaction, Identity
from .portfolio.account import Account
from .portfolio.holding import Holding
from .portfolio.ledger import PortfolioLedger
from .portfolio.transactions import TransactionLog, TransactionHistory
from .portfolio.valuation import ValuationEngine, PortfolioValuation
from .market.prices import PriceTable, PriceSnapshot
from .market.simulator import PriceSimulator
from .market.risk import RiskClassifier
from .admin.stats import AdminAggregator, AdminStats
from .config.settings import TraderConfig
from .trading.engine import TradingEngine


# Convenience factory functions
def create_engine(starting_balance: float = 100000.0, random_seed: int = None,
                  tick_interval: float = 5.0) -> TradingEngine:
    """Create a trading engine with default instruments and in-memory storage"""
    config = TraderConfig(
        starting_balance=starting_balance,
        random_seed=random_seed,
        tick_interval=tick_interval,
    )
    return TradingEngine(config)


__all__ = [
    # Core types
    'TradeSide', 'RiskLevel', 'Role',
    # Core models
    'Instrument', 'Transaction', 'Identity', 'Account', 'Holding',
    # Main components
    'PortfolioLedger', 'TransactionLog', 'TransactionHistory',
    'ValuationEngine', 'PortfolioValuation',
    'PriceTable', 'PriceSnapshot', 'PriceSimulator', 'RiskClassifier',
    'AdminAggregator', 'AdminStats', 'TraderConfig', 'TradingEngine',
    # Convenience functions
    'create_engine'
]
