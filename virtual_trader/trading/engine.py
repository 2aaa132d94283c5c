"""
Main trading engine that orchestrates all trading operations.

This is the surface the transport layer calls. Identity and role are decided
by the caller before they reach here; the engine only checks the role where
an operation is admin-only.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from ..admin.stats import AdminAggregator, AdminStats
from ..config.settings import TraderConfig
from ..core.exceptions import AuthorizationError, DuplicateAccountError, InvalidAmountError
from ..core.models import Identity, Instrument
from ..core.money import Number, to_decimal, to_positive_decimal
from ..core.types import RiskLevel, TradeSide
from ..market.prices import PriceTable
from ..market.risk import RiskClassifier
from ..market.simulator import PriceSimulator
from ..portfolio.account import Account
from ..portfolio.ledger import PortfolioLedger
from ..portfolio.transactions import TransactionHistory, TransactionLog
from ..portfolio.valuation import PortfolioValuation, ValuationEngine
from ..storage.accounts import AccountStore, InMemoryAccountStore

ADMIN_NAME = "Admin User"
ADMIN_EMAIL = "admin@trade.com"


class TradingEngine:
    """Wires prices, ledger, valuation and admin statistics together"""

    def __init__(self, config: Optional[TraderConfig] = None,
                 store: Optional[AccountStore] = None,
                 transaction_log: Optional[TransactionLog] = None,
                 price_table: Optional[PriceTable] = None,
                 simulator: Optional[PriceSimulator] = None):
        self.config = config or TraderConfig()
        self.store = store or InMemoryAccountStore()
        self.transaction_log = transaction_log or TransactionLog()
        self.price_table = price_table or PriceTable(self.config.build_instruments())

        self.simulator = simulator or PriceSimulator(
            self.price_table,
            interval=self.config.tick_interval,
            drift_bias=self.config.drift_bias,
            volatility=self.config.volatility,
            price_floor=Decimal(str(self.config.price_floor)),
            rng=np.random.default_rng(self.config.random_seed),
        )
        self.risk_classifier = RiskClassifier(
            self.price_table.baseline,
            moderate_threshold=Decimal(str(self.config.moderate_risk_threshold)),
            high_threshold=Decimal(str(self.config.high_risk_threshold)),
        )
        self.ledger = PortfolioLedger(self.store, self.transaction_log,
                                      lock_timeout=self.config.lock_timeout)
        self.valuation_engine = ValuationEngine()
        self.admin_aggregator = AdminAggregator(self.valuation_engine)

        self.logger = logging.getLogger(__name__)

    # Lifecycle

    async def bootstrap(self) -> Account:
        """Create the administrator account if there is none yet"""
        for account in await self.store.list_all():
            if account.is_admin:
                return account

        self.logger.info("Creating admin user...")
        admin = Account(name=ADMIN_NAME, balance=Decimal("0"), is_admin=True, email=ADMIN_EMAIL)
        return await self.store.add(admin)

    def start(self):
        """Start background price simulation"""
        return self.simulator.start()

    async def stop(self) -> None:
        await self.simulator.stop()

    # Accounts

    async def register_account(self, name: str, initial_balance: Optional[Number] = None,
                               email: Optional[str] = None,
                               phone: Optional[str] = None) -> Account:
        """Create a trader account with the configured starting balance"""
        if not name or not name.strip():
            raise ValueError("Name is required")

        balance = to_decimal(
            self.config.starting_balance if initial_balance is None else initial_balance,
            "initial_balance",
        )
        if balance < 0:
            raise InvalidAmountError(f"initial_balance cannot be negative, got {balance}")

        if email and await self.store.find_by_email(email) is not None:
            raise DuplicateAccountError(f"User already exists: {email}")

        account = await self.store.add(Account(name=name.strip(), balance=balance,
                                               email=email, phone=phone))
        self.logger.info(f"Registered account {account.id} ({account.name}) with ${balance:.2f}")
        return account

    async def get_account(self, identity: Identity) -> Account:
        return await self.store.get(identity.account_id)

    async def list_users(self, identity: Identity) -> List[Account]:
        """All non-admin accounts"""
        self._require_admin(identity)
        return [a for a in await self.store.list_all() if not a.is_admin]

    # Trading

    def list_instruments(self) -> List[Instrument]:
        return self.price_table.snapshot().instruments

    def current_prices(self) -> Dict[str, Decimal]:
        return dict(self.price_table.snapshot())

    async def execute_trade(self, identity: Identity, side: Union[TradeSide, str], symbol: str,
                            quantity: int, price: Optional[Number] = None,
                            risk: Optional[RiskLevel] = None) -> Account:
        """Buy or sell at the current price.

        Without ``price`` the fill price is read from the latest snapshot while
        the account lock is held, so a trade queued behind another one fills at
        the price current when it runs. ``risk`` defaults to the classifier's
        label for the fill price.
        """
        self.price_table.snapshot().instrument(symbol)
        if price is None:
            return await self.ledger.execute(identity.account_id, side, symbol, quantity,
                                             risk=risk, quote=self.quote)

        trade_price = to_positive_decimal(price, "price")
        if risk is None:
            risk = self.risk_classifier.classify(symbol, trade_price)
        return await self.ledger.execute(identity.account_id, side, symbol, quantity,
                                         trade_price, risk)

    def quote(self, symbol: str) -> Tuple[Decimal, RiskLevel]:
        """Current price of ``symbol`` and its risk label"""
        price = self.price_table.snapshot().price(symbol)
        return price, self.risk_classifier.classify(symbol, price)

    async def add_funds(self, identity: Identity, amount: Number) -> Account:
        return await self.ledger.add_funds(identity.account_id, amount)

    # Queries

    async def get_portfolio_valuation(self, identity: Identity) -> PortfolioValuation:
        account = await self.store.get(identity.account_id)
        snapshot = self.price_table.snapshot()
        return self.valuation_engine.value_portfolio(account, snapshot, names=snapshot.names)

    async def get_transaction_history(self, identity: Identity) -> TransactionHistory:
        await self.store.get(identity.account_id)
        return await self.transaction_log.list_for(identity.account_id)

    async def get_admin_stats(self, identity: Identity) -> AdminStats:
        self._require_admin(identity)
        accounts = await self.store.list_all()
        return self.admin_aggregator.stats(accounts, self.price_table.snapshot())

    async def tick_prices(self) -> None:
        """Run one price simulation step now"""
        await self.simulator.tick()

    def _require_admin(self, identity: Identity) -> None:
        if not identity.is_admin:
            raise AuthorizationError("Admin access denied")

    def __str__(self) -> str:
        return (f"TradingEngine(Instruments: {len(self.price_table)}, "
                f"Price version: {self.price_table.version}, "
                f"Trades: {self.transaction_log.count()})")

    def __repr__(self) -> str:
        return self.__str__()
