"""Core components of the virtual trader."""

from .types import TradeSide, RiskLevel, Role
from .models import Instrument, Transaction, Identity
from .exceptions import (
    VirtualTraderError, InsufficientFundsError, InsufficientSharesError,
    InvalidAmountError, InvalidTradeSideError, UnknownInstrumentError, UnknownAccountError,
    DuplicateAccountError, AuthorizationError, ConcurrentModificationError,
    StorageFailureError
)

__all__ = [
    'TradeSide', 'RiskLevel', 'Role',
    'Instrument', 'Transaction', 'Identity',
    'VirtualTraderError', 'InsufficientFundsError', 'InsufficientSharesError',
    'InvalidAmountError', 'InvalidTradeSideError', 'UnknownInstrumentError', 'UnknownAccountError',
    'DuplicateAccountError', 'AuthorizationError', 'ConcurrentModificationError',
    'StorageFailureError'
]
