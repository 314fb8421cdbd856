from __future__ import annotations

import json
import secrets
import string
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from shopbot.config.settings import RECEIPT_ID_LENGTH
from shopbot.services.economy import BalanceProvider

_ID_ALPHABET = string.ascii_lowercase + string.digits

STATUS_PURCHASED = "purchased"
STATUS_REMOVED = "removed"
STATUS_NOT_FOUND = "not_found"
STATUS_INSUFFICIENT_FUNDS = "insufficient_funds"


def generate_receipt_id(length: int = RECEIPT_ID_LENGTH) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(max(1, int(length))))


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ShopItem:
    name: str
    price: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "price": self.price, "description": self.description}

    @classmethod
    def from_dict(cls, raw: dict) -> "ShopItem":
        return cls(
            name=str(raw["name"]),
            price=int(raw["price"]),
            description=str(raw.get("description", "")),
        )


@dataclass(frozen=True)
class Receipt:
    receipt_id: str
    user_id: str
    timestamp: int
    item_name: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "receiptId": self.receipt_id,
            "userId": self.user_id,
            "timestamp": self.timestamp,
            "itemName": self.item_name,
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Receipt":
        return cls(
            receipt_id=str(raw["receiptId"]),
            user_id=str(raw["userId"]),
            timestamp=int(raw["timestamp"]),
            item_name=str(raw["itemName"]),
            amount=int(raw["amount"]),
        )


@dataclass(frozen=True)
class LedgerOutcome:
    status: str
    message: str
    receipt: Receipt | None = None

    @property
    def ok(self) -> bool:
        return self.status in {STATUS_PURCHASED, STATUS_REMOVED}


def _load_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        print(f"[shop] failed to load {path}, starting empty: {exc}")
        return default
    if not isinstance(data, type(default)):
        print(f"[shop] unexpected document type in {path}, starting empty")
        return default
    return data


def _atomic_write(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
    tmp.replace(path)


class ShopLedger:
    """Shop items and per-user purchase receipts, mirrored to two JSON files.

    Both stores live in memory after ``load()``. Every mutation rewrites the
    affected file in full; write failures are logged and the in-memory change
    stands. ``buy_item`` debits the economy before the receipt is persisted, so
    a crash in between leaves a charge without a receipt.
    """

    def __init__(
        self,
        shop_path: Path,
        receipts_path: Path,
        economy: BalanceProvider,
        *,
        currency_name: str = "coins",
        id_factory: Callable[[], str] = generate_receipt_id,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._shop_path = Path(shop_path)
        self._receipts_path = Path(receipts_path)
        self._economy = economy
        self.currency_name = currency_name
        self._id_factory = id_factory
        self._clock = clock
        self._lock = threading.RLock()
        self._items: list[ShopItem] = []
        self._receipts: dict[str, list[Receipt]] = {}

    def load(self) -> None:
        shop_doc = _load_json(self._shop_path, {})
        receipts_doc = _load_json(self._receipts_path, {})

        raw_items = shop_doc.get("items", [])
        if not isinstance(raw_items, list):
            print(f"[shop] \"items\" in {self._shop_path} is not a list, starting empty")
            raw_items = []

        items: list[ShopItem] = []
        for raw in raw_items:
            try:
                items.append(ShopItem.from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError):
                print(f"[shop] skipping malformed item entry: {raw!r}")

        receipts: dict[str, list[Receipt]] = {}
        for user_id, rows in receipts_doc.items():
            parsed: list[Receipt] = []
            if not isinstance(rows, list):
                print(f"[shop] receipts for user={user_id} are not a list, skipping")
                continue
            for raw in rows:
                try:
                    parsed.append(Receipt.from_dict(raw))
                except (KeyError, TypeError, ValueError, AttributeError):
                    print(f"[shop] skipping malformed receipt for user={user_id}: {raw!r}")
            receipts[str(user_id)] = parsed

        with self._lock:
            self._items = items
            self._receipts = receipts
        print(f"[shop] loaded items={len(items)} receipt_users={len(receipts)}")

    def items_document(self) -> dict[str, Any]:
        with self._lock:
            return {"items": [item.to_dict() for item in self._items]}

    def receipts_document(self) -> dict[str, Any]:
        with self._lock:
            return {
                user_id: [receipt.to_dict() for receipt in rows]
                for user_id, rows in self._receipts.items()
            }

    def save_items(self) -> None:
        self._save(self._shop_path, self.items_document())

    def save_receipts(self) -> None:
        self._save(self._receipts_path, self.receipts_document())

    def _save(self, path: Path, data: Any) -> None:
        try:
            _atomic_write(path, data)
        except (OSError, TypeError, ValueError) as exc:
            print(f"[shop] error saving data to {path}: {exc}")

    def list_items(self) -> list[ShopItem]:
        with self._lock:
            return sorted(self._items, key=lambda item: (item.name.casefold(), item.name))

    def item_names(self) -> list[str]:
        names: list[str] = []
        for item in self.list_items():
            if item.name not in names:
                names.append(item.name)
        return names

    def get_item(self, name: str) -> ShopItem | None:
        with self._lock:
            return next((item for item in self._items if item.name == name), None)

    def add_item(self, name: str, price: int, description: str) -> ShopItem:
        item = ShopItem(name=name, price=int(price), description=description)
        with self._lock:
            self._items.append(item)
            self.save_items()
        print(f"[shop] added item name={name!r} price={item.price}")
        return item

    def delete_item(self, name: str) -> LedgerOutcome:
        with self._lock:
            kept = [item for item in self._items if item.name != name]
            if len(kept) == len(self._items):
                return LedgerOutcome(STATUS_NOT_FOUND, f'Item "{name}" not found in the shop.')
            removed = len(self._items) - len(kept)
            self._items = kept
            self.save_items()
        print(f"[shop] removed item name={name!r} count={removed}")
        return LedgerOutcome(STATUS_REMOVED, f'Item "{name}" has been removed from the shop.')

    def buy_item(self, user_id: str, item_name: str) -> LedgerOutcome:
        with self._lock:
            item = self.get_item(item_name)
            if item is None:
                return LedgerOutcome(STATUS_NOT_FOUND, f'Item "{item_name}" not found in the shop.')

            balance = self._economy.read(user_id)
            if balance < item.price:
                return LedgerOutcome(
                    STATUS_INSUFFICIENT_FUNDS,
                    f'You do not have enough {self.currency_name} to buy "{item_name}".',
                )

            self._economy.debit(user_id, item.price, f'Purchase of "{item_name}"')

            receipt = Receipt(
                receipt_id=self._id_factory(),
                user_id=user_id,
                timestamp=self._clock(),
                item_name=item.name,
                amount=item.price,
            )
            self._receipts.setdefault(user_id, []).insert(0, receipt)
            self.save_receipts()

        print(f"[shop] purchase user={user_id} item={item.name!r} amount={item.price} receipt={receipt.receipt_id}")
        return LedgerOutcome(
            STATUS_PURCHASED,
            (
                f'You successfully purchased "{item_name}" for {item.price} {self.currency_name}. '
                f"Your receipt ID is: {receipt.receipt_id}"
            ),
            receipt=receipt,
        )

    def get_user_receipts(self, user_id: str) -> list[Receipt]:
        with self._lock:
            return list(self._receipts.get(user_id, []))

    def get_all_receipts(self, user_id: str | None = None) -> list[Receipt]:
        with self._lock:
            rows = [
                receipt
                for owner, receipts in self._receipts.items()
                if not user_id or owner == user_id
                for receipt in receipts
            ]
        return sorted(rows, key=lambda receipt: receipt.timestamp, reverse=True)
