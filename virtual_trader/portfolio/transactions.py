"""
Append-only record of executed trades.
"""

import itertools
from dataclasses import replace
from typing import Dict, Iterator, List, Sequence, Tuple, Union

import pandas as pd

from ..core.models import Transaction

HISTORY_COLUMNS = ['date', 'type', 'symbol', 'quantity', 'price', 'risk', 'value']


class TransactionHistory(Sequence[Transaction]):
    """Point-in-time view of one account's trades, newest first.

    Iterating twice yields the same trades; appends made after the history was
    taken are not included.
    """

    def __init__(self, account_id: str, transactions: Tuple[Transaction, ...]):
        self.account_id = account_id
        self._transactions = transactions

    def __getitem__(self, index: Union[int, slice]):
        return self._transactions[index]

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def to_dataframe(self) -> pd.DataFrame:
        """Tabular view for reporting; money columns stay Decimal"""
        rows = [
            {
                'date': t.timestamp,
                'type': t.side.value,
                'symbol': t.symbol,
                'quantity': t.quantity,
                'price': t.price,
                'risk': t.risk.value,
                'value': t.value,
            }
            for t in self._transactions
        ]
        return pd.DataFrame(rows, columns=HISTORY_COLUMNS)

    def __repr__(self) -> str:
        return f"TransactionHistory({self.account_id}: {len(self)} trades)"


class TransactionLog:
    """In-memory transaction log, partitioned by account"""

    def __init__(self):
        self._by_account: Dict[str, List[Transaction]] = {}
        self._sequence = itertools.count(1)

    async def append(self, transaction: Transaction) -> Transaction:
        """Record a trade and return it with its log sequence number"""
        stored = replace(transaction, sequence=next(self._sequence))
        self._by_account.setdefault(stored.account_id, []).append(stored)
        return stored

    async def list_for(self, account_id: str) -> TransactionHistory:
        """Trades of one account ordered by timestamp, newest first"""
        entries = self._by_account.get(account_id, [])
        ordered = sorted(entries, key=lambda t: (t.timestamp, t.sequence), reverse=True)
        return TransactionHistory(account_id, tuple(ordered))

    def count(self) -> int:
        return sum(len(entries) for entries in self._by_account.values())
