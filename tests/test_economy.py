import sqlite3
import unittest
from pathlib import Path

from shopbot.config.runtime import ensure_app_config_defaults, get_app_config, set_app_config
from shopbot.db.database import init_db
from shopbot.commands.shopconfig import ConfigValueError, apply_app_config
from shopbot.db.repositories import get_action_history
from shopbot.services.economy import DbEconomy
from shopbot.services.shop_ledger import ShopLedger


class EconomyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.conn.row_factory = sqlite3.Row
        self.addCleanup(self.conn.close)
        init_db(connection_factory=self.factory)

    def factory(self) -> sqlite3.Connection:
        return self.conn

    def test_unknown_user_reads_start_balance(self) -> None:
        economy = DbEconomy(start_balance=25, connection_factory=self.factory)
        self.assertEqual(economy.read("alice"), 25)

    def test_debit_and_credit_update_balance_and_history(self) -> None:
        economy = DbEconomy(connection_factory=self.factory)
        economy.credit("alice", 150, "Granted by admin 1")
        economy.debit("alice", 100, 'Purchase of "Badge"')
        self.assertEqual(economy.read("alice"), 50)

        history = get_action_history("alice", connection_factory=self.factory)
        self.assertEqual([row["action_type"] for row in history], ["debit", "credit"])
        self.assertEqual(history[0]["details"], 'Purchase of "Badge"')
        self.assertEqual(history[0]["amount"], 100)
        self.assertEqual(history[0]["balance_after"], 50)

    def test_first_debit_starts_from_start_balance(self) -> None:
        economy = DbEconomy(start_balance=30, connection_factory=self.factory)
        economy.debit("bob", 10, "memo")
        self.assertEqual(economy.read("bob"), 20)


class RuntimeConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.conn.row_factory = sqlite3.Row
        self.addCleanup(self.conn.close)
        init_db(connection_factory=self.factory)

    def factory(self) -> sqlite3.Connection:
        return self.conn

    def test_defaults_and_overrides(self) -> None:
        self.assertEqual(get_app_config("CURRENCY_NAME", connection_factory=self.factory), "coins")
        ensure_app_config_defaults(connection_factory=self.factory)
        set_app_config("CURRENCY_NAME", "  gems ", connection_factory=self.factory)
        self.assertEqual(get_app_config("CURRENCY_NAME", connection_factory=self.factory), "gems")

    def test_values_are_clamped(self) -> None:
        self.assertEqual(set_app_config("RECEIPTS_PAGE_SIZE", 0, connection_factory=self.factory), 1)
        self.assertEqual(set_app_config("START_BALANCE", -5, connection_factory=self.factory), 0)

    def test_unknown_key_raises(self) -> None:
        with self.assertRaises(KeyError):
            get_app_config("NOPE", connection_factory=self.factory)

    def test_currency_name_is_capped(self) -> None:
        stored = set_app_config("CURRENCY_NAME", "g" * 50, connection_factory=self.factory)
        self.assertEqual(stored, "g" * 32)


class ShopConfigCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.conn.row_factory = sqlite3.Row
        self.addCleanup(self.conn.close)
        init_db(connection_factory=self.factory)
        self.economy = DbEconomy(connection_factory=self.factory)
        self.ledger = ShopLedger(Path("shop.json"), Path("receipts.json"), self.economy)

    def factory(self) -> sqlite3.Connection:
        return self.conn

    def apply(self, name: str, value: str):
        return apply_app_config(name, value, self.ledger, self.economy, connection_factory=self.factory)

    def test_currency_name_updates_running_ledger(self) -> None:
        self.assertEqual(self.apply("CURRENCY_NAME", " gems "), "gems")
        self.assertEqual(self.ledger.currency_name, "gems")
        self.assertEqual(get_app_config("CURRENCY_NAME", connection_factory=self.factory), "gems")

    def test_start_balance_applies_to_unseen_users(self) -> None:
        self.assertEqual(self.apply("START_BALANCE", "40"), 40)
        self.assertEqual(self.economy.read("newcomer"), 40)

    def test_page_size_is_stored_clamped(self) -> None:
        self.assertEqual(self.apply("RECEIPTS_PAGE_SIZE", "99"), 25)
        self.assertEqual(get_app_config("RECEIPTS_PAGE_SIZE", connection_factory=self.factory), 25)

    def test_bad_values_are_rejected_without_change(self) -> None:
        with self.assertRaises(ConfigValueError):
            self.apply("START_BALANCE", "lots")
        with self.assertRaises(ConfigValueError):
            self.apply("NOPE", "1")
        self.assertEqual(self.economy.start_balance, 0)


if __name__ == "__main__":
    unittest.main()
