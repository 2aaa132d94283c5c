"""
Portfolio ledger: applies trades and deposits to accounts.

Every mutation follows the same shape: take the account's lock, load the
account, apply the change to a working copy, then commit the copy together
with its transaction record. A rejected trade never reaches the commit, so
the stored account is left exactly as it was.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, AsyncIterator, Callable, Dict, Optional, Tuple, Union

from .account import Account
from .holding import Holding
from .transactions import TransactionLog
from ..core.models import Transaction
from ..core.money import Number, to_positive_decimal
from ..core.types import TradeSide, RiskLevel
from ..core.exceptions import (
    VirtualTraderError, InsufficientFundsError, InsufficientSharesError,
    InvalidAmountError, InvalidTradeSideError, ConcurrentModificationError, StorageFailureError
)

if TYPE_CHECKING:
    from ..storage.accounts import AccountStore

# symbol -> (fill price, risk label)
Quote = Callable[[str], Tuple[Decimal, RiskLevel]]

RESTORE_ATTEMPTS = 3
RESTORE_BACKOFF = 0.05


class PortfolioLedger:
    """Owns cash balances and holdings of all accounts"""

    def __init__(self, store: "AccountStore", transaction_log: TransactionLog,
                 lock_timeout: float = 5.0):
        if lock_timeout <= 0:
            raise ValueError("Lock timeout must be positive")

        self.store = store
        self.transaction_log = transaction_log
        self.lock_timeout = lock_timeout
        self._locks: Dict[str, asyncio.Lock] = {}
        self.logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def account_lock(self, account_id: str) -> AsyncIterator[None]:
        """Exclusive access to one account; other accounts are unaffected"""
        lock = self._locks.setdefault(account_id, asyncio.Lock())
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.lock_timeout)
        except asyncio.TimeoutError:
            self.logger.warning(f"Lock timeout on account {account_id}")
            raise ConcurrentModificationError(account_id, self.lock_timeout)
        try:
            yield
        finally:
            lock.release()

    @staticmethod
    def can_buy(account: Account, quantity: int, price: Decimal) -> bool:
        """Check if the account has enough cash to buy"""
        if quantity <= 0 or price <= 0:
            return False
        return account.balance >= price * quantity

    @staticmethod
    def can_sell(account: Account, symbol: str, quantity: int) -> bool:
        """Check if the account holds enough shares to sell"""
        holding = account.get_holding(symbol)
        return holding is not None and holding.can_sell(quantity)

    async def execute(self, account_id: str, side: Union[TradeSide, str], symbol: str,
                      quantity: int, price: Optional[Number] = None,
                      risk: Optional[RiskLevel] = None,
                      quote: Optional[Quote] = None) -> Account:
        """Apply a buy or sell and record it. Returns the updated account.

        Without an explicit ``price``, ``quote(symbol)`` is called once the
        account lock is held and supplies the fill price with its risk label.
        An explicit ``risk`` wins over the quoted one.
        """
        side = self._parse_side(side)
        quantity = self._validate_quantity(quantity)
        if price is not None:
            price = to_positive_decimal(price, "price")
        elif quote is None:
            raise InvalidAmountError("price is required when no quote source is given")

        async with self.account_lock(account_id):
            current = await self.store.get(account_id)
            updated = current.copy()

            # no await between reading the quote and applying it
            if price is None:
                price, quoted_risk = quote(symbol)
                if risk is None:
                    risk = quoted_risk
            if risk is None:
                risk = RiskLevel.LOW

            try:
                if side is TradeSide.BUY:
                    self._apply_buy(updated, symbol, quantity, price)
                else:
                    self._apply_sell(updated, symbol, quantity, price)
            except (InsufficientFundsError, InsufficientSharesError) as e:
                self.logger.warning(f"Rejected {side.value} {quantity} {symbol} for {account_id}: {e}")
                raise

            transaction = Transaction(
                account_id=account_id,
                side=side,
                symbol=symbol,
                quantity=quantity,
                price=price,
                risk=risk,
            )
            account = await self._commit_in_background(current, updated, transaction)

        self.logger.info(
            f"{side.value} {quantity} {symbol} @ ${price:.2f} for {account_id} "
            f"(risk {risk.value}), cash now ${account.balance:.2f}"
        )
        return account

    async def add_funds(self, account_id: str, amount: Number) -> Account:
        """Deposit virtual cash. No transaction is recorded."""
        amount = to_positive_decimal(amount, "amount")

        async with self.account_lock(account_id):
            account = await self.store.get(account_id)
            account.balance += amount
            await self._save(account)

        self.logger.info(f"Added ${amount:.2f} to {account_id}, cash now ${account.balance:.2f}")
        return account

    def _apply_buy(self, account: Account, symbol: str, quantity: int, price: Decimal) -> None:
        cost = price * quantity
        if not self.can_buy(account, quantity, price):
            raise InsufficientFundsError(cost, account.balance)

        account.balance -= cost
        holding = account.holdings.setdefault(symbol, Holding(symbol=symbol))
        holding.add_shares(quantity, price)

    def _apply_sell(self, account: Account, symbol: str, quantity: int, price: Decimal) -> None:
        if not self.can_sell(account, symbol, quantity):
            holding = account.get_holding(symbol)
            raise InsufficientSharesError(symbol, quantity, holding.quantity if holding else 0)

        holding = account.holdings[symbol]
        holding.remove_shares(quantity)
        account.balance += price * quantity
        if holding.is_empty:
            del account.holdings[symbol]

    async def _commit_in_background(self, previous: Account, updated: Account,
                                    transaction: Transaction) -> Account:
        """Run the commit as its own task so cancelling the caller cannot split it.

        If the caller is cancelled mid-commit, the commit still finishes and the
        account lock is held until it has.
        """
        commit = asyncio.ensure_future(self._commit(previous, updated, transaction))
        try:
            return await asyncio.shield(commit)
        except asyncio.CancelledError:
            while not commit.done():
                try:
                    await asyncio.wait({commit})
                except asyncio.CancelledError:
                    continue
            if not commit.cancelled() and commit.exception() is not None:
                self.logger.error(f"Commit for {updated.id} failed after cancellation: {commit.exception()}")
            raise

    async def _commit(self, previous: Account, updated: Account,
                      transaction: Transaction) -> Account:
        await self._save(updated)
        try:
            await self.transaction_log.append(transaction)
        except Exception as e:
            self.logger.error(f"Transaction log append failed for {updated.id}, restoring account: {e}")
            await self._restore(previous, e)
            raise StorageFailureError(f"Failed to record trade for {updated.id}: {e}") from e
        return updated

    async def _restore(self, previous: Account, cause: Exception) -> None:
        """Put back the pre-trade account after its transaction could not be logged"""
        for attempt in range(1, RESTORE_ATTEMPTS + 1):
            try:
                await self._save(previous)
                return
            except VirtualTraderError as e:
                restore_error = e
                self.logger.warning(f"Restore attempt {attempt}/{RESTORE_ATTEMPTS} for {previous.id} failed: {e}")
                if attempt < RESTORE_ATTEMPTS:
                    await asyncio.sleep(RESTORE_BACKOFF * attempt)

        self.logger.critical(
            f"Account {previous.id} keeps an unlogged trade: log append failed ({cause}), "
            f"restore failed ({restore_error})"
        )

    async def _save(self, account: Account) -> None:
        try:
            await self.store.save(account)
        except VirtualTraderError:
            raise
        except Exception as e:
            raise StorageFailureError(f"Failed to save account {account.id}: {e}") from e

    @staticmethod
    def _validate_quantity(quantity: int) -> int:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidAmountError(f"Quantity must be a whole number of shares, got {quantity!r}")
        if quantity <= 0:
            raise InvalidAmountError(f"Quantity must be positive, got {quantity}")
        return quantity

    @staticmethod
    def _parse_side(side: Union[TradeSide, str]) -> TradeSide:
        if isinstance(side, TradeSide):
            return side
        try:
            return TradeSide(str(side).upper())
        except ValueError:
            raise InvalidTradeSideError(side)
