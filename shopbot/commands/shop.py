from discord import ButtonStyle, Embed, Interaction, app_commands
from discord.ui import Button, View, button

from shopbot.services.shop_ledger import ShopItem, ShopLedger

_BUY_COLOR = 0x4CAF50
_EMPTY_MESSAGE = "**The shop is currently empty.**"

# Discord embed limits.
EMBED_TITLE_LIMIT = 256
EMBED_DESCRIPTION_LIMIT = 4096
EMBED_FIELD_LIMIT = 1024


def truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    if width <= 1:
        return text[:width]
    return text[: width - 1] + "…"


def item_choices(ledger: ShopLedger, current: str) -> list[app_commands.Choice[str]]:
    query = current.strip().lower()
    names = ledger.item_names()
    if query:
        names = [name for name in names if query in name.lower()]
    return [app_commands.Choice(name=name[:100], value=name[:100]) for name in names[:25]]


class ShopPager(View):
    def __init__(self, ledger: ShopLedger, rows: list[ShopItem]) -> None:
        super().__init__(timeout=300)
        self._ledger = ledger
        self._rows = rows
        self._index = 0
        self._sync_buttons()

    def _sync_buttons(self) -> None:
        self.prev.disabled = self._index <= 0
        self.next.disabled = self._index >= len(self._rows) - 1

    def current_row(self) -> ShopItem:
        return self._rows[self._index]

    def build_embed(self) -> Embed:
        item = self.current_row()
        embed = Embed(
            title=truncate(f"Shop: {item.name}", EMBED_TITLE_LIMIT),
            description=truncate(item.description or "No description.", EMBED_DESCRIPTION_LIMIT),
            color=_BUY_COLOR,
        )
        embed.add_field(
            name="Price",
            value=truncate(f"{item.price} {self._ledger.currency_name}", EMBED_FIELD_LIMIT),
            inline=True,
        )
        embed.set_footer(text=f"Item {self._index + 1}/{len(self._rows)}")
        return embed

    @button(label="Prev", style=ButtonStyle.secondary)
    async def prev(self, interaction: Interaction, _button: Button) -> None:
        self._index = max(0, self._index - 1)
        self._sync_buttons()
        await interaction.response.edit_message(embed=self.build_embed(), view=self)

    @button(label="Next", style=ButtonStyle.secondary)
    async def next(self, interaction: Interaction, _button: Button) -> None:
        self._index = min(len(self._rows) - 1, self._index + 1)
        self._sync_buttons()
        await interaction.response.edit_message(embed=self.build_embed(), view=self)

    @button(label="Buy", style=ButtonStyle.green)
    async def buy(self, interaction: Interaction, _button: Button) -> None:
        item = self.current_row()
        outcome = self._ledger.buy_item(str(interaction.user.id), item.name)
        await interaction.response.send_message(outcome.message, ephemeral=True)


def setup_shop(tree: app_commands.CommandTree, ledger: ShopLedger) -> None:
    @tree.command(name="shop", description="View the items available in the shop.")
    @app_commands.describe(broadcast="Show the shop to everyone in the channel.")
    async def shop(interaction: Interaction, broadcast: bool = False) -> None:
        rows = ledger.list_items()
        if not rows:
            await interaction.response.send_message(_EMPTY_MESSAGE, ephemeral=not broadcast)
            return

        view = ShopPager(ledger, rows)
        await interaction.response.send_message(
            embed=view.build_embed(),
            view=view,
            ephemeral=not broadcast,
        )


def setup_buyitem(tree: app_commands.CommandTree, ledger: ShopLedger) -> None:
    @tree.command(name="buyitem", description="Purchase an item from the shop.")
    @app_commands.describe(item="Exact name of the item to buy.")
    async def buyitem(interaction: Interaction, item: str) -> None:
        if not item.strip():
            await interaction.response.send_message("Usage: /buyitem [item name]", ephemeral=True)
            return
        outcome = ledger.buy_item(str(interaction.user.id), item.strip())
        await interaction.response.send_message(outcome.message, ephemeral=True)

    @buyitem.autocomplete("item")
    async def buyitem_item_autocomplete(
        interaction: Interaction,
        current: str,
    ) -> list[app_commands.Choice[str]]:
        return item_choices(ledger, current)
