"""
Pytest configuration and shared fixtures.
"""

import pytest
from decimal import Decimal

from virtual_trader.config.settings import TraderConfig
from virtual_trader.core.models import Instrument
from virtual_trader.market.prices import PriceTable
from virtual_trader.market.simulator import PriceSimulator
from virtual_trader.portfolio.ledger import PortfolioLedger
from virtual_trader.portfolio.transactions import TransactionLog
from virtual_trader.storage.accounts import InMemoryAccountStore
from virtual_trader.trading.engine import TradingEngine


@pytest.fixture
def sample_instruments():
    """Small instrument set with round prices"""
    return [
        Instrument('ACME', 'Acme Corp', 'Industrial', Decimal('100.00')),
        Instrument('GLOBX', 'Globex', 'IT', Decimal('50.00')),
        Instrument('INIT', 'Initech', 'IT', Decimal('200.00')),
    ]


@pytest.fixture
def sample_price_table(sample_instruments):
    return PriceTable(sample_instruments)


@pytest.fixture
def account_store():
    return InMemoryAccountStore()


@pytest.fixture
def transaction_log():
    return TransactionLog()


@pytest.fixture
def sample_ledger(account_store, transaction_log):
    """Ledger over an empty in-memory store"""
    return PortfolioLedger(account_store, transaction_log, lock_timeout=1.0)


@pytest.fixture
def sample_engine(sample_instruments):
    """Trading engine whose price draws are always 0.48 (no movement)"""
    config = TraderConfig(
        instruments=[inst.to_dict() for inst in sample_instruments],
        lock_timeout=1.0,
    )
    price_table = PriceTable(config.build_instruments())
    simulator = PriceSimulator(price_table, draw=lambda: 0.48)
    return TradingEngine(config, price_table=price_table, simulator=simulator)
