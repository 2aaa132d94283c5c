"""
Custom exceptions for the virtual trader.
"""

from decimal import Decimal


class VirtualTraderError(Exception):
    """Base exception for virtual trader"""
    retryable = False


class InsufficientFundsError(VirtualTraderError):
    """Raised when attempting to buy with insufficient funds"""
    def __init__(self, required: Decimal, available: Decimal):
        self.required = required
        self.available = available
        super().__init__(f"Insufficient funds: need ${required:.2f}, have ${available:.2f}")


class InsufficientSharesError(VirtualTraderError):
    """Raised when attempting to sell more shares than available"""
    def __init__(self, symbol: str, requested: int, available: int):
        self.symbol = symbol
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient shares of {symbol}: need {requested}, have {available}")


class InvalidAmountError(VirtualTraderError):
    """Raised for non-positive, non-finite or non-numeric amounts"""
    pass


class InvalidTradeSideError(VirtualTraderError):
    """Raised when a trade side is neither BUY nor SELL"""
    def __init__(self, side):
        self.side = side
        super().__init__(f"Invalid trade side: {side!r}, expected BUY or SELL")


class UnknownInstrumentError(VirtualTraderError):
    """Raised when a symbol is not in the price table"""
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Unknown instrument: {symbol}")


class UnknownAccountError(VirtualTraderError):
    """Raised when an account id does not exist"""
    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Unknown account: {account_id}")


class DuplicateAccountError(VirtualTraderError):
    """Raised when registering an email that is already taken"""
    pass


class AuthorizationError(VirtualTraderError):
    """Raised when the caller's role does not allow the operation"""
    pass


class ConcurrentModificationError(VirtualTraderError):
    """Raised when the per-account lock could not be acquired in time"""
    retryable = True

    def __init__(self, account_id: str, timeout: float):
        self.account_id = account_id
        self.timeout = timeout
        super().__init__(f"Account {account_id} is busy: lock not acquired within {timeout}s")


class StorageFailureError(VirtualTraderError):
    """Raised when the storage collaborator fails; nothing was applied"""
    retryable = True
