from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Protocol

from shopbot.db.database import get_connection
from shopbot.db.repositories import (
    add_action_history,
    ensure_user,
    get_user,
    update_user_bank,
)


class BalanceProvider(Protocol):
    def read(self, user_id: str) -> int: ...

    def debit(self, user_id: str, amount: int, memo: str) -> None: ...


class DbEconomy:
    """Currency balances kept in the sqlite ``users`` table.

    Users the economy has never seen read as ``start_balance`` and get a row on
    their first balance change. Every change is written to ``action_history``
    together with its memo.
    """

    def __init__(
        self,
        *,
        start_balance: int = 0,
        connection_factory: Callable = get_connection,
    ) -> None:
        self.start_balance = max(0, int(start_balance))
        self._connection_factory = connection_factory

    def read(self, user_id: str) -> int:
        row = get_user(user_id, connection_factory=self._connection_factory)
        if row is None:
            return self.start_balance
        return int(row["bank"])

    def debit(self, user_id: str, amount: int, memo: str) -> None:
        self._apply(user_id, -abs(int(amount)), "debit", memo)

    def credit(self, user_id: str, amount: int, memo: str) -> None:
        self._apply(user_id, abs(int(amount)), "credit", memo)

    def _apply(self, user_id: str, delta: int, action_type: str, memo: str) -> int:
        now = datetime.now(timezone.utc).isoformat()
        ensure_user(
            user_id,
            self.start_balance,
            now,
            connection_factory=self._connection_factory,
        )
        balance = self.read(user_id) + delta
        update_user_bank(user_id, balance, connection_factory=self._connection_factory)
        add_action_history(
            user_id,
            action_type,
            abs(delta),
            balance,
            memo,
            now,
            connection_factory=self._connection_factory,
        )
        print(f"[economy] {action_type} user={user_id} amount={abs(delta)} balance={balance} memo={memo!r}")
        return balance
