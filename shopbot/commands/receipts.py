from datetime import datetime, timezone

from discord import ButtonStyle, Embed, Interaction, app_commands
from discord.ui import View, button

from shopbot.commands.shop import EMBED_DESCRIPTION_LIMIT, EMBED_TITLE_LIMIT, truncate
from shopbot.config.runtime import get_app_config
from shopbot.services.shop_ledger import Receipt, ShopLedger


_ITEM_NAME_WIDTH = 100
_LINE_SEPARATOR = "\n\n"


def _fmt_ts(timestamp_ms: int) -> str:
    dt = datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)
    return dt.strftime("%B %d, %Y %H:%M:%S UTC")


def format_receipt_line(receipt: Receipt, currency_name: str, *, include_user: bool = False) -> str:
    user_text = ""
    if include_user:
        # Discord snowflakes render as mentions; anything else is shown raw.
        user_id = truncate(receipt.user_id, 40)
        user_text = f" · <@{user_id}>" if user_id.isdigit() else f" · {user_id}"
    return (
        f"`{truncate(receipt.receipt_id, 20)}`{user_text} · **{truncate(receipt.item_name, _ITEM_NAME_WIDTH)}** · "
        f"{receipt.amount} {truncate(currency_name, 32)}\n{_fmt_ts(receipt.timestamp)}"
    )


def _chunk_lines(lines: list[str], page_size: int) -> list[list[str]]:
    chunks: list[list[str]] = []
    current: list[str] = []
    length = 0
    for line in lines:
        extra = len(line) + (len(_LINE_SEPARATOR) if current else 0)
        if current and (len(current) >= page_size or length + extra > EMBED_DESCRIPTION_LIMIT):
            chunks.append(current)
            current, length, extra = [], 0, len(line)
        current.append(line)
        length += extra
    if current:
        chunks.append(current)
    return chunks


def build_receipt_pages(
    rows: list[Receipt],
    *,
    title: str,
    currency_name: str,
    page_size: int,
    include_user: bool = False,
) -> list[Embed]:
    """Page receipts by ``page_size``, starting a new page early if the embed would get too long."""
    title = truncate(title, EMBED_TITLE_LIMIT)
    if not rows:
        return [Embed(title=title, description="No receipts found.")]

    lines = [format_receipt_line(r, currency_name, include_user=include_user) for r in rows]
    chunks = _chunk_lines(lines, max(1, int(page_size)))
    pages: list[Embed] = []
    for chunk in chunks:
        embed = Embed(title=title, description=_LINE_SEPARATOR.join(chunk))
        embed.set_footer(text=f"Page {len(pages) + 1}/{len(chunks)} • Total {len(rows)}")
        pages.append(embed)
    return pages


class ReceiptsPager(View):
    def __init__(self, owner_id: int, pages: list[Embed]) -> None:
        super().__init__(timeout=180)
        self._owner_id = owner_id
        self._pages = pages
        self._index = 0
        self._sync_buttons()

    def _sync_buttons(self) -> None:
        self.prev.disabled = self._index <= 0
        self.next.disabled = self._index >= len(self._pages) - 1

    async def interaction_check(self, interaction: Interaction) -> bool:
        if interaction.user.id != self._owner_id:
            await interaction.response.send_message(
                "Only the command user can change pages.",
                ephemeral=True,
            )
            return False
        return True

    @button(label="Prev", style=ButtonStyle.secondary)
    async def prev(self, interaction: Interaction, _button) -> None:
        self._index = max(0, self._index - 1)
        self._sync_buttons()
        await interaction.response.edit_message(embed=self._pages[self._index], view=self)

    @button(label="Next", style=ButtonStyle.secondary)
    async def next(self, interaction: Interaction, _button) -> None:
        self._index = min(len(self._pages) - 1, self._index + 1)
        self._sync_buttons()
        await interaction.response.edit_message(embed=self._pages[self._index], view=self)


async def send_receipt_pages(
    interaction: Interaction,
    rows: list[Receipt],
    *,
    title: str,
    currency_name: str,
    include_user: bool,
    broadcast: bool,
) -> None:
    pages = build_receipt_pages(
        rows,
        title=title,
        currency_name=currency_name,
        page_size=int(get_app_config("RECEIPTS_PAGE_SIZE")),
        include_user=include_user,
    )
    if len(pages) == 1:
        await interaction.response.send_message(embed=pages[0], ephemeral=not broadcast)
        return
    await interaction.response.send_message(
        embed=pages[0],
        view=ReceiptsPager(interaction.user.id, pages),
        ephemeral=not broadcast,
    )


def setup_receipts(tree: app_commands.CommandTree, ledger: ShopLedger) -> None:
    @tree.command(name="receipts", description="View your purchase receipts.")
    @app_commands.describe(broadcast="Show your receipts to everyone in the channel.")
    async def receipts(interaction: Interaction, broadcast: bool = False) -> None:
        rows = ledger.get_user_receipts(str(interaction.user.id))
        await send_receipt_pages(
            interaction,
            rows,
            title="Your Purchase Receipts",
            currency_name=ledger.currency_name,
            include_user=False,
            broadcast=broadcast,
        )
