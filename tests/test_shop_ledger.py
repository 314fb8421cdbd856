import itertools
import tempfile
import unittest
from pathlib import Path

from shopbot.config.settings import RECEIPT_ID_LENGTH
from shopbot.services.shop_ledger import (
    STATUS_INSUFFICIENT_FUNDS,
    STATUS_NOT_FOUND,
    STATUS_PURCHASED,
    STATUS_REMOVED,
    ShopLedger,
    generate_receipt_id,
)


class FakeEconomy:
    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self.balances = dict(balances or {})
        self.debits: list[tuple[str, int, str]] = []

    def read(self, user_id: str) -> int:
        return self.balances.get(user_id, 0)

    def debit(self, user_id: str, amount: int, memo: str) -> None:
        self.balances[user_id] = self.read(user_id) - amount
        self.debits.append((user_id, amount, memo))


class ShopLedgerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.economy = FakeEconomy({"alice": 150, "bob": 20})
        self._ticks = itertools.count(1_700_000_000_000, 1000)
        self.ledger = ShopLedger(
            self.root / "shop.json",
            self.root / "receipts.json",
            self.economy,
            clock=lambda: next(self._ticks),
        )
        self.ledger.load()

    def test_list_items_sorted_by_name_for_any_insertion_order(self) -> None:
        names = ["Potion", "Badge", "Elixir", "Amulet"]
        for index, order in enumerate(itertools.permutations(names)):
            ledger = ShopLedger(self.root / f"shop_{index}.json", self.root / "r.json", self.economy)
            for name in order:
                ledger.add_item(name, 10, "x")
            self.assertEqual(
                [item.name for item in ledger.list_items()],
                ["Amulet", "Badge", "Elixir", "Potion"],
            )

    def test_list_items_ignores_case_when_ordering(self) -> None:
        self.ledger.add_item("banana", 1, "x")
        self.ledger.add_item("Apple", 1, "x")
        self.ledger.add_item("cherry", 1, "x")
        self.assertEqual([i.name for i in self.ledger.list_items()], ["Apple", "banana", "cherry"])

    def test_add_item_allows_duplicate_names(self) -> None:
        self.ledger.add_item("Potion", 10, "Heals")
        self.ledger.add_item("Potion", 12, "Heals more")
        names = [item.name for item in self.ledger.list_items()]
        self.assertEqual(names.count("Potion"), 2)

    def test_add_item_persists_items_document(self) -> None:
        self.ledger.add_item("Badge", 100, "Shiny")
        self.assertTrue((self.root / "shop.json").exists())
        self.assertEqual(
            self.ledger.items_document(),
            {"items": [{"name": "Badge", "price": 100, "description": "Shiny"}]},
        )

    def test_delete_missing_item_is_not_found_and_leaves_items(self) -> None:
        self.ledger.add_item("Badge", 100, "Shiny")
        outcome = self.ledger.delete_item("badge")
        self.assertEqual(outcome.status, STATUS_NOT_FOUND)
        self.assertFalse(outcome.ok)
        self.assertIn("not found", outcome.message)
        self.assertEqual(len(self.ledger.list_items()), 1)

    def test_delete_removes_every_item_with_exact_name(self) -> None:
        self.ledger.add_item("Potion", 10, "a")
        self.ledger.add_item("Potion", 15, "b")
        self.ledger.add_item("Badge", 100, "c")
        outcome = self.ledger.delete_item("Potion")
        self.assertEqual(outcome.status, STATUS_REMOVED)
        self.assertIn("has been removed", outcome.message)
        self.assertEqual([i.name for i in self.ledger.list_items()], ["Badge"])

    def test_buy_unknown_item_changes_nothing(self) -> None:
        outcome = self.ledger.buy_item("alice", "Ghost")
        self.assertEqual(outcome.status, STATUS_NOT_FOUND)
        self.assertEqual(self.economy.balances["alice"], 150)
        self.assertEqual(self.economy.debits, [])
        self.assertEqual(self.ledger.get_user_receipts("alice"), [])

    def test_buy_with_insufficient_funds_changes_nothing(self) -> None:
        self.ledger.add_item("Badge", 100, "Shiny")
        outcome = self.ledger.buy_item("bob", "Badge")
        self.assertEqual(outcome.status, STATUS_INSUFFICIENT_FUNDS)
        self.assertIn("do not have enough coins", outcome.message)
        self.assertEqual(self.economy.balances["bob"], 20)
        self.assertEqual(self.ledger.get_user_receipts("bob"), [])
        self.assertFalse((self.root / "receipts.json").exists())

    def test_buy_debits_price_and_prepends_receipt(self) -> None:
        self.ledger.add_item("Badge", 100, "Shiny")
        outcome = self.ledger.buy_item("alice", "Badge")

        self.assertEqual(outcome.status, STATUS_PURCHASED)
        self.assertTrue(outcome.ok)
        self.assertEqual(self.economy.balances["alice"], 50)
        self.assertEqual(self.economy.debits, [("alice", 100, 'Purchase of "Badge"')])

        receipts = self.ledger.get_user_receipts("alice")
        self.assertEqual(len(receipts), 1)
        self.assertEqual(receipts[0].item_name, "Badge")
        self.assertEqual(receipts[0].amount, 100)
        self.assertEqual(receipts[0].user_id, "alice")
        self.assertEqual(len(outcome.receipt.receipt_id), 10)
        self.assertIn(outcome.receipt.receipt_id, outcome.message)
        self.assertTrue((self.root / "receipts.json").exists())

    def test_generated_receipt_ids_use_configured_length(self) -> None:
        self.assertEqual(len(generate_receipt_id()), RECEIPT_ID_LENGTH)
        self.assertEqual(len(generate_receipt_id(4)), 4)
        self.assertTrue(generate_receipt_id().isalnum())

    def test_buy_prepends_newest_receipt(self) -> None:
        self.ledger.add_item("Pin", 10, "Small")
        first = self.ledger.buy_item("alice", "Pin").receipt
        second = self.ledger.buy_item("alice", "Pin").receipt
        self.assertEqual(self.ledger.get_user_receipts("alice"), [second, first])

    def test_buy_uses_first_exact_match(self) -> None:
        self.ledger.add_item("Potion", 30, "first")
        self.ledger.add_item("Potion", 60, "second")
        outcome = self.ledger.buy_item("alice", "Potion")
        self.assertEqual(outcome.receipt.amount, 30)
        self.assertEqual(self.economy.balances["alice"], 120)

    def test_receipt_keeps_purchase_time_values_after_item_changes(self) -> None:
        self.ledger.add_item("Badge", 100, "Shiny")
        self.ledger.buy_item("alice", "Badge")
        self.ledger.delete_item("Badge")
        self.ledger.add_item("Badge", 5, "Cheap now")
        receipt = self.ledger.get_user_receipts("alice")[0]
        self.assertEqual((receipt.item_name, receipt.amount), ("Badge", 100))

    def test_user_without_receipts_gets_empty_list(self) -> None:
        self.assertEqual(self.ledger.get_user_receipts("nobody"), [])

    def test_all_receipts_sorted_newest_first_and_filterable(self) -> None:
        self.economy.balances["bob"] = 100
        self.ledger.add_item("Pin", 10, "Small")
        self.ledger.buy_item("alice", "Pin")
        self.ledger.buy_item("bob", "Pin")
        self.ledger.buy_item("alice", "Pin")

        all_rows = self.ledger.get_all_receipts()
        self.assertEqual(len(all_rows), 3)
        timestamps = [r.timestamp for r in all_rows]
        self.assertEqual(timestamps, sorted(timestamps, reverse=True))
        self.assertEqual([r.user_id for r in all_rows], ["alice", "bob", "alice"])

        self.assertEqual(self.ledger.get_all_receipts("alice"), self.ledger.get_user_receipts("alice"))
        self.assertEqual(self.ledger.get_all_receipts("carol"), [])

    def test_all_receipts_ties_keep_existing_order(self) -> None:
        ledger = ShopLedger(
            self.root / "tie_shop.json",
            self.root / "tie_receipts.json",
            FakeEconomy({"alice": 100}),
            clock=lambda: 42,
        )
        ledger.add_item("Pin", 1, "x")
        first = ledger.buy_item("alice", "Pin").receipt
        second = ledger.buy_item("alice", "Pin").receipt
        self.assertEqual(ledger.get_all_receipts(), [second, first])


if __name__ == "__main__":
    unittest.main()
