"""Trading engine: the operations exposed to the transport layer."""

from .engine import TradingEngine

__all__ = ['TradingEngine']
