"""
Core type definitions for the virtual trader.
Contains all enums and basic type definitions.
"""

from enum import Enum


class TradeSide(Enum):
    """Side of a trade - buy or sell"""
    BUY = "BUY"
    SELL = "SELL"


class RiskLevel(Enum):
    """Qualitative risk label attached to a trade"""
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class Role(Enum):
    """Capability of the caller, decided once at the boundary"""
    USER = "user"
    ADMIN = "admin"
