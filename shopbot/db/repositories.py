from __future__ import annotations

from typing import Callable

from shopbot.db.database import get_connection


def get_user(user_id: str, *, connection_factory: Callable = get_connection) -> dict | None:
    with connection_factory() as conn:
        row = conn.execute(
            """
            SELECT user_id, bank, joined_at
            FROM users
            WHERE user_id = ?
            """,
            (user_id,),
        ).fetchone()
        return None if row is None else dict(row)


def ensure_user(
    user_id: str,
    bank: int,
    joined_at: str,
    *,
    connection_factory: Callable = get_connection,
) -> bool:
    with connection_factory() as conn:
        cur = conn.execute(
            """
            INSERT INTO users (user_id, bank, joined_at)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO NOTHING
            """,
            (user_id, int(bank), joined_at),
        )
        return cur.rowcount > 0


def update_user_bank(
    user_id: str,
    new_bank: int,
    *,
    connection_factory: Callable = get_connection,
) -> None:
    with connection_factory() as conn:
        conn.execute(
            """
            UPDATE users
            SET bank = ?
            WHERE user_id = ?
            """,
            (int(new_bank), user_id),
        )


def add_action_history(
    user_id: str,
    action_type: str,
    amount: int,
    balance_after: int,
    details: str,
    created_at: str,
    *,
    connection_factory: Callable = get_connection,
) -> None:
    with connection_factory() as conn:
        conn.execute(
            """
            INSERT INTO action_history (
                user_id,
                action_type,
                amount,
                balance_after,
                details,
                created_at
            )
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (user_id, action_type, int(amount), int(balance_after), details, created_at),
        )


def get_action_history(
    user_id: str,
    limit: int = 50,
    *,
    connection_factory: Callable = get_connection,
) -> list[dict]:
    with connection_factory() as conn:
        rows = conn.execute(
            """
            SELECT id, user_id, action_type, amount, balance_after, details, created_at
            FROM action_history
            WHERE user_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (user_id, max(1, int(limit))),
        ).fetchall()
        return [dict(row) for row in rows]
