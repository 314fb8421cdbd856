from discord import Interaction, User, app_commands

from shopbot.commands.receipts import send_receipt_pages
from shopbot.commands.shop import item_choices
from shopbot.services.shop_ledger import ShopLedger

ADDITEM_USAGE = "Usage: /additem [item name], [price], [description]"
INVALID_PRICE_MESSAGE = "Please specify a valid positive price."

# Names double as autocomplete choices, which Discord caps at 100 characters.
MAX_ITEM_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000
TOO_LONG_MESSAGE = (
    f"Item names must be at most {MAX_ITEM_NAME_LENGTH} characters "
    f"and descriptions at most {MAX_DESCRIPTION_LENGTH}."
)


class ItemDetailsError(ValueError):
    pass


def parse_item_details(details: str) -> tuple[str, int, str]:
    """Split ``"name, price, description..."``; commas inside the description are kept."""
    parts = [part.strip() for part in details.split(",")]
    name = parts[0]
    price_raw = parts[1] if len(parts) > 1 else ""
    desc_parts = parts[2:]
    if not name or not price_raw or not any(desc_parts):
        raise ItemDetailsError(ADDITEM_USAGE)
    if not price_raw.isdecimal() or int(price_raw) <= 0:
        raise ItemDetailsError(INVALID_PRICE_MESSAGE)
    description = ", ".join(desc_parts)
    if len(name) > MAX_ITEM_NAME_LENGTH or len(description) > MAX_DESCRIPTION_LENGTH:
        raise ItemDetailsError(TOO_LONG_MESSAGE)
    return name, int(price_raw), description


def setup_additem(tree: app_commands.CommandTree, ledger: ShopLedger) -> None:
    @tree.command(name="additem", description="Admin: add an item to the shop.")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.checks.has_permissions(manage_guild=True)
    @app_commands.describe(details="[item name], [price], [description]")
    async def additem(interaction: Interaction, details: str) -> None:
        try:
            name, price, description = parse_item_details(details)
        except ItemDetailsError as exc:
            await interaction.response.send_message(str(exc), ephemeral=True)
            return

        ledger.add_item(name, price, description)
        await interaction.response.send_message(
            f'Item "{name}" added to the shop for {price} {ledger.currency_name}.',
            ephemeral=True,
        )


def setup_deleteitem(tree: app_commands.CommandTree, ledger: ShopLedger) -> None:
    @tree.command(name="deleteitem", description="Admin: remove an item from the shop.")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.checks.has_permissions(manage_guild=True)
    @app_commands.describe(item="Exact name of the item to remove.")
    async def deleteitem(interaction: Interaction, item: str) -> None:
        if not item.strip():
            await interaction.response.send_message("Usage: /deleteitem [item name]", ephemeral=True)
            return
        outcome = ledger.delete_item(item.strip())
        await interaction.response.send_message(outcome.message, ephemeral=True)

    @deleteitem.autocomplete("item")
    async def deleteitem_item_autocomplete(
        interaction: Interaction,
        current: str,
    ) -> list[app_commands.Choice[str]]:
        return item_choices(ledger, current)


def setup_receiptlogs(tree: app_commands.CommandTree, ledger: ShopLedger) -> None:
    @tree.command(name="receiptlogs", description="Admin: view purchase logs.")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.checks.has_permissions(manage_guild=True)
    @app_commands.describe(
        user="Optional: only show receipts for this user.",
        broadcast="Show the logs to everyone in the channel.",
    )
    async def receiptlogs(
        interaction: Interaction,
        user: User | None = None,
        broadcast: bool = False,
    ) -> None:
        filter_user_id = str(user.id) if user is not None else None
        rows = ledger.get_all_receipts(filter_user_id)
        title = f"Purchase Logs for {user.display_name}" if user is not None else "Purchase Logs"
        await send_receipt_pages(
            interaction,
            rows,
            title=title,
            currency_name=ledger.currency_name,
            include_user=True,
            broadcast=broadcast,
        )
