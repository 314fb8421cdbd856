from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from shopbot.config.settings import (
    CURRENCY_NAME,
    RECEIPTS_PAGE_SIZE,
    START_BALANCE,
)
from shopbot.db.database import get_connection


@dataclass(frozen=True)
class AppConfigSpec:
    default: Any
    cast: Callable[[str], Any]
    description: str


APP_CONFIG_SPECS: dict[str, AppConfigSpec] = {
    "CURRENCY_NAME": AppConfigSpec(
        default=str(CURRENCY_NAME),
        cast=str,
        description="Display name of the in-game currency.",
    ),
    "START_BALANCE": AppConfigSpec(
        default=int(START_BALANCE),
        cast=int,
        description="Balance given to users the economy has not seen yet.",
    ),
    "RECEIPTS_PAGE_SIZE": AppConfigSpec(
        default=int(RECEIPTS_PAGE_SIZE),
        cast=int,
        description="Receipts shown per page in receipt listings.",
    ),
}


def _state_key(name: str) -> str:
    return f"config:{name}"


def _normalize(name: str, value: Any) -> Any:
    if name == "CURRENCY_NAME":
        text = str(value).strip()
        return (text or str(CURRENCY_NAME))[:32]
    if name == "START_BALANCE":
        return max(0, int(value))
    if name == "RECEIPTS_PAGE_SIZE":
        return max(1, min(25, int(value)))
    return value


def ensure_app_config_defaults(*, connection_factory: Callable = get_connection) -> None:
    with connection_factory() as conn:
        for name, spec in APP_CONFIG_SPECS.items():
            conn.execute(
                """
                INSERT INTO app_state (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO NOTHING
                """,
                (_state_key(name), str(_normalize(name, spec.default))),
            )


def get_app_config(name: str, *, connection_factory: Callable = get_connection) -> Any:
    spec = APP_CONFIG_SPECS.get(name)
    if spec is None:
        raise KeyError(f"Unknown app config: {name}")
    with connection_factory() as conn:
        row = conn.execute(
            "SELECT value FROM app_state WHERE key = ?",
            (_state_key(name),),
        ).fetchone()
    if row is None:
        return _normalize(name, spec.default)
    raw = str(row["value"])
    try:
        parsed = spec.cast(raw)
    except (TypeError, ValueError):
        parsed = spec.default
    return _normalize(name, parsed)


def set_app_config(name: str, value: Any, *, connection_factory: Callable = get_connection) -> Any:
    spec = APP_CONFIG_SPECS.get(name)
    if spec is None:
        raise KeyError(f"Unknown app config: {name}")
    normalized = _normalize(name, value)
    with connection_factory() as conn:
        conn.execute(
            """
            INSERT INTO app_state (key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (_state_key(name), str(normalized)),
        )
    return normalized
