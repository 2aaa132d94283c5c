"""
Tests for the trading engine facade.
"""

import asyncio
import pytest
from decimal import Decimal

from virtual_trader import create_engine
from virtual_trader.core.exceptions import (
    AuthorizationError, DuplicateAccountError, InsufficientSharesError,
    InvalidAmountError, InvalidTradeSideError, UnknownAccountError, UnknownInstrumentError
)
from virtual_trader.core.models import Identity
from virtual_trader.core.types import RiskLevel, Role, TradeSide


async def register(engine, name='Alice', **kwargs):
    account = await engine.register_account(name, **kwargs)
    return Identity(account.id)


async def admin_identity(engine):
    admin = await engine.bootstrap()
    return Identity(admin.id, Role.ADMIN)


class TestAccounts:
    @pytest.mark.asyncio
    async def test_register_uses_starting_balance(self, sample_engine):
        identity = await register(sample_engine)
        account = await sample_engine.get_account(identity)

        assert account.balance == Decimal('100000')
        assert account.holdings == {}
        assert not account.is_admin

    @pytest.mark.asyncio
    async def test_register_with_balance(self, sample_engine):
        account = await sample_engine.register_account('Bob', initial_balance='2500.50')
        assert account.balance == Decimal('2500.50')

    @pytest.mark.asyncio
    async def test_register_negative_balance(self, sample_engine):
        with pytest.raises(InvalidAmountError):
            await sample_engine.register_account('Bob', initial_balance=-1)

    @pytest.mark.asyncio
    async def test_register_requires_name(self, sample_engine):
        with pytest.raises(ValueError):
            await sample_engine.register_account('  ')

    @pytest.mark.asyncio
    async def test_duplicate_email(self, sample_engine):
        await sample_engine.register_account('Alice', email='alice@example.com')
        with pytest.raises(DuplicateAccountError):
            await sample_engine.register_account('Alice Again', email='ALICE@example.com')

    @pytest.mark.asyncio
    async def test_bootstrap_creates_single_admin(self, sample_engine):
        first = await sample_engine.bootstrap()
        second = await sample_engine.bootstrap()

        assert first.id == second.id
        assert first.is_admin
        assert first.balance == Decimal('0')

    @pytest.mark.asyncio
    async def test_unknown_account(self, sample_engine):
        with pytest.raises(UnknownAccountError):
            await sample_engine.get_portfolio_valuation(Identity('missing'))


class TestTrading:
    @pytest.mark.asyncio
    async def test_trade_at_current_price(self, sample_engine):
        """Test that price and risk default to the snapshot values"""
        identity = await register(sample_engine)

        account = await sample_engine.execute_trade(identity, TradeSide.BUY, 'ACME', 10)

        assert account.balance == Decimal('99000.00')
        history = await sample_engine.get_transaction_history(identity)
        assert history[0].price == Decimal('100.00')
        assert history[0].risk == RiskLevel.LOW

    @pytest.mark.asyncio
    async def test_trade_uses_price_after_tick(self, sample_engine):
        identity = await register(sample_engine)
        sample_engine.price_table.publish({'ACME': Decimal('130.00')})

        await sample_engine.execute_trade(identity, 'BUY', 'ACME', 1)

        history = await sample_engine.get_transaction_history(identity)
        assert history[0].price == Decimal('130.00')
        assert history[0].risk == RiskLevel.HIGH

    @pytest.mark.asyncio
    async def test_queued_trade_fills_at_price_current_when_it_runs(self, sample_engine):
        """A tick published while the trade waits for the account lock sets its price"""
        identity = await register(sample_engine)

        async with sample_engine.ledger.account_lock(identity.account_id):
            pending = asyncio.ensure_future(
                sample_engine.execute_trade(identity, TradeSide.BUY, 'ACME', 1)
            )
            await asyncio.sleep(0.01)
            sample_engine.price_table.publish({'ACME': Decimal('130.00')})

        account = await pending

        assert account.balance == Decimal('99870.00')
        txn = (await sample_engine.get_transaction_history(identity))[0]
        assert txn.price == Decimal('130.00')
        assert txn.risk == RiskLevel.HIGH

    @pytest.mark.asyncio
    async def test_invalid_side(self, sample_engine):
        identity = await register(sample_engine)
        with pytest.raises(InvalidTradeSideError):
            await sample_engine.execute_trade(identity, 'HOLD', 'ACME', 1)

    @pytest.mark.asyncio
    async def test_explicit_price_and_risk(self, sample_engine):
        identity = await register(sample_engine)

        await sample_engine.execute_trade(identity, TradeSide.BUY, 'ACME', 2, price='99.50',
                                          risk=RiskLevel.MODERATE)

        txn = (await sample_engine.get_transaction_history(identity))[0]
        assert txn.price == Decimal('99.50')
        assert txn.risk == RiskLevel.MODERATE

    @pytest.mark.asyncio
    async def test_unknown_instrument(self, sample_engine):
        identity = await register(sample_engine)
        with pytest.raises(UnknownInstrumentError):
            await sample_engine.execute_trade(identity, TradeSide.BUY, 'NOPE', 1)

    @pytest.mark.asyncio
    async def test_rejected_sell_leaves_state(self, sample_engine):
        identity = await register(sample_engine)
        await sample_engine.execute_trade(identity, TradeSide.BUY, 'ACME', 5)
        before = (await sample_engine.get_account(identity)).to_dict()

        with pytest.raises(InsufficientSharesError):
            await sample_engine.execute_trade(identity, TradeSide.SELL, 'ACME', 6)

        assert (await sample_engine.get_account(identity)).to_dict() == before

    @pytest.mark.asyncio
    async def test_add_funds(self, sample_engine):
        identity = await register(sample_engine)
        account = await sample_engine.add_funds(identity, 500)
        assert account.balance == Decimal('100500')

    @pytest.mark.asyncio
    async def test_history_newest_first(self, sample_engine):
        identity = await register(sample_engine)
        await sample_engine.execute_trade(identity, TradeSide.BUY, 'ACME', 5)
        await sample_engine.execute_trade(identity, TradeSide.SELL, 'ACME', 2)

        history = await sample_engine.get_transaction_history(identity)

        assert [t.side for t in history] == [TradeSide.SELL, TradeSide.BUY]


class TestQueries:
    @pytest.mark.asyncio
    async def test_portfolio_valuation(self, sample_engine):
        identity = await register(sample_engine)
        await sample_engine.execute_trade(identity, TradeSide.BUY, 'ACME', 10)
        sample_engine.price_table.publish({'ACME': Decimal('110.00')})

        valuation = await sample_engine.get_portfolio_valuation(identity)

        row = valuation.get('ACME')
        assert row.name == 'Acme Corp'
        assert row.market_value == Decimal('1100.00')
        assert row.pnl == Decimal('100.00')
        assert valuation.pnl_percent == Decimal('10')

    @pytest.mark.asyncio
    async def test_admin_stats(self, sample_engine):
        admin = await admin_identity(sample_engine)
        alice = await register(sample_engine, 'Alice')
        await register(sample_engine, 'Bob')
        await sample_engine.execute_trade(alice, TradeSide.BUY, 'GLOBX', 4)

        stats = await sample_engine.get_admin_stats(admin)

        assert stats.user_count == 2
        assert stats.total_invested == Decimal('200.00')
        assert stats.instrument_count == 3

    @pytest.mark.asyncio
    async def test_admin_only_operations(self, sample_engine):
        identity = await register(sample_engine)

        with pytest.raises(AuthorizationError):
            await sample_engine.get_admin_stats(identity)
        with pytest.raises(AuthorizationError):
            await sample_engine.list_users(identity)

    @pytest.mark.asyncio
    async def test_list_users_excludes_admins(self, sample_engine):
        admin = await admin_identity(sample_engine)
        await register(sample_engine, 'Alice')

        users = await sample_engine.list_users(admin)

        assert [u.name for u in users] == ['Alice']

    @pytest.mark.asyncio
    async def test_tick_prices(self, sample_engine):
        await sample_engine.tick_prices()

        assert sample_engine.price_table.version == 1
        assert sample_engine.current_prices()['ACME'] == Decimal('100.00')

    def test_list_instruments(self, sample_engine):
        symbols = [i.symbol for i in sample_engine.list_instruments()]
        assert symbols == ['ACME', 'GLOBX', 'INIT']


class TestFactory:
    @pytest.mark.asyncio
    async def test_create_engine_defaults(self):
        engine = create_engine(random_seed=1)
        identity = await register(engine)

        await engine.execute_trade(identity, TradeSide.BUY, 'TCS', 1)
        await engine.tick_prices()

        account = await engine.get_account(identity)
        assert account.balance == Decimal('96149.75')
        assert len(engine.list_instruments()) == 8
