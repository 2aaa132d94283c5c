"""
Account storage collaborator.

The ledger only talks to the AccountStore interface. InMemoryAccountStore is
the reference implementation: it hands out copies, so nothing a caller does
to a returned Account is visible until it is saved again.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..core.exceptions import DuplicateAccountError, UnknownAccountError
from ..portfolio.account import Account


class AccountStore(ABC):
    """Asynchronous account persistence with read-your-writes per account"""

    @abstractmethod
    async def get(self, account_id: str) -> Account:
        """Return the account or raise UnknownAccountError"""

    @abstractmethod
    async def add(self, account: Account) -> Account:
        """Insert a new account"""

    @abstractmethod
    async def save(self, account: Account) -> None:
        """Replace the stored state of an existing account"""

    @abstractmethod
    async def list_all(self) -> List[Account]:
        """Every stored account"""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        pass


class InMemoryAccountStore(AccountStore):
    """Dictionary-backed store"""

    def __init__(self):
        self._accounts: Dict[str, Account] = {}

    async def get(self, account_id: str) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise UnknownAccountError(account_id)
        return account.copy()

    async def add(self, account: Account) -> Account:
        if account.id in self._accounts:
            raise DuplicateAccountError(f"Account {account.id} already exists")
        if account.email and await self.find_by_email(account.email) is not None:
            raise DuplicateAccountError(f"User already exists: {account.email}")
        self._accounts[account.id] = account.copy()
        return account.copy()

    async def save(self, account: Account) -> None:
        if account.id not in self._accounts:
            raise UnknownAccountError(account.id)
        self._accounts[account.id] = account.copy()

    async def list_all(self) -> List[Account]:
        return [account.copy() for account in self._accounts.values()]

    async def find_by_email(self, email: str) -> Optional[Account]:
        wanted = email.strip().lower()
        for account in self._accounts.values():
            if account.email and account.email.strip().lower() == wanted:
                return account.copy()
        return None

    def __len__(self) -> int:
        return len(self._accounts)
