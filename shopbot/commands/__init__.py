from discord import app_commands

from shopbot.commands.balance import setup_balance, setup_givemoney
from shopbot.commands.files import setup_getfile, setup_writefile
from shopbot.commands.receipts import setup_receipts
from shopbot.commands.shop import setup_buyitem, setup_shop
from shopbot.commands.shopadmin import setup_additem, setup_deleteitem, setup_receiptlogs
from shopbot.commands.shopconfig import setup_shopconfig
from shopbot.commands.shophelp import setup_shophelp
from shopbot.services.economy import DbEconomy
from shopbot.services.shop_ledger import ShopLedger


def setup_commands(tree: app_commands.CommandTree, ledger: ShopLedger, economy: DbEconomy) -> None:
    setup_shop(tree, ledger)
    setup_buyitem(tree, ledger)
    setup_additem(tree, ledger)
    setup_deleteitem(tree, ledger)
    setup_receipts(tree, ledger)
    setup_receiptlogs(tree, ledger)
    setup_shophelp(tree)
    setup_balance(tree, economy, ledger)
    setup_givemoney(tree, economy, ledger)
    setup_shopconfig(tree, ledger, economy)
    setup_getfile(tree)
    setup_writefile(tree)
