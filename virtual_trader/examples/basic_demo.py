"""
Basic demonstration of the virtual trader.
"""

import asyncio
import sys

from virtual_trader.config.logging_config import setup_logging
from virtual_trader.config.settings import TraderConfig
from virtual_trader.core.exceptions import InsufficientSharesError
from virtual_trader.core.models import Identity
from virtual_trader.core.types import Role, TradeSide
from virtual_trader.trading.engine import TradingEngine


async def create_demo_engine(random_seed: int = 42):
    """Factory function to create a demo trading engine with one trader"""
    engine = TradingEngine(TraderConfig(random_seed=random_seed))
    admin = await engine.bootstrap()
    trader = await engine.register_account("Demo Trader", email="demo@trade.com")
    return engine, Identity(trader.id), Identity(admin.id, Role.ADMIN)


async def demo_basic_trading():
    """Demonstrate buying, selling and a rejected trade"""
    print("=== Basic Trading Demo ===")

    engine, trader, _ = await create_demo_engine()

    for instrument in engine.list_instruments():
        print(f"  {instrument.symbol:<11} {instrument.name:<28} ${instrument.price:>9,.2f}")

    await engine.execute_trade(trader, TradeSide.BUY, "TCS", 5)
    await engine.execute_trade(trader, TradeSide.BUY, "INFY", 20)
    await engine.tick_prices()
    await engine.execute_trade(trader, TradeSide.BUY, "TCS", 5)
    account = await engine.execute_trade(trader, TradeSide.SELL, "INFY", 10)
    print(f"\nCash after trades: ${account.balance:,.2f}")

    try:
        await engine.execute_trade(trader, TradeSide.SELL, "INFY", 100)
    except InsufficientSharesError as e:
        print(f"Rejected as expected: {e}")

    return engine, trader


async def demo_valuation(engine: TradingEngine, trader: Identity):
    """Demonstrate portfolio valuation after a few price ticks"""
    print("\n=== Valuation Demo ===")

    for _ in range(5):
        await engine.tick_prices()

    valuation = await engine.get_portfolio_valuation(trader)
    for h in valuation.holdings:
        print(f"  {h.symbol}: {h.quantity} shares @ ${h.avg_price:.2f}")
        print(f"    Current Price: ${h.current_price:.2f}")
        print(f"    Market Value: ${h.market_value:,.2f}")
        print(f"    Unrealized P&L: ${h.pnl:,.2f} ({h.pnl_percent:.2f}%)")

    print(f"\nNet worth: ${valuation.net_worth:,.2f} (P&L {valuation.pnl_percent:.2f}%)")

    print("\nTransaction history:")
    history = await engine.get_transaction_history(trader)
    print(history.to_dataframe().to_string(index=False))
    return valuation


async def demo_admin(engine: TradingEngine):
    """Demonstrate admin statistics"""
    print("\n=== Admin Demo ===")

    admin = Identity((await engine.bootstrap()).id, Role.ADMIN)
    stats = await engine.get_admin_stats(admin)
    print(f"Users: {stats.user_count}")
    print(f"Total invested: ${stats.total_invested:,.2f}")
    print(f"Instruments: {stats.instrument_count}")
    return stats


async def demo_background_simulation(seconds: float = 1.0):
    """Demonstrate the background price simulator"""
    print("\n=== Background Simulation Demo ===")

    engine = TradingEngine(TraderConfig(tick_interval=0.2, random_seed=7))
    before = engine.current_prices()
    engine.start()
    await asyncio.sleep(seconds)
    await engine.stop()

    after = engine.current_prices()
    print(f"Ticks completed: {engine.simulator.stats['ticks_completed']}")
    for symbol in before:
        print(f"  {symbol:<11} ${before[symbol]:>9,.2f} -> ${after[symbol]:>9,.2f}")
    return engine


async def run_all():
    engine, trader = await demo_basic_trading()
    valuation = await demo_valuation(engine, trader)
    stats = await demo_admin(engine)
    sim_engine = await demo_background_simulation()
    return {
        'engine': engine,
        'valuation': valuation,
        'admin_stats': stats,
        'simulation_engine': sim_engine,
    }


def comprehensive_demo():
    """Run a comprehensive demonstration"""
    setup_logging("WARNING")
    print("Virtual Trader Comprehensive Demo")
    print("=" * 50)

    results = asyncio.run(run_all())

    print("\n" + "=" * 50)
    print("All demos completed successfully!")
    return results


if __name__ == "__main__":
    # Check if specific demo is requested
    if len(sys.argv) > 1:
        demo_name = sys.argv[1].lower()

        if demo_name == 'basic':
            asyncio.run(demo_basic_trading())
        elif demo_name == 'simulation':
            asyncio.run(demo_background_simulation())
        else:
            print(f"Unknown demo: {demo_name}")
            print("Available demos: basic, simulation")
    else:
        # Run comprehensive demo
        comprehensive_demo()
