from discord import Embed, Interaction, app_commands

HELP_SECTIONS: dict[str, str] = {
    "User Commands": (
        "- `/shop` - View available items in the shop.\n"
        "- `/buyitem item:...` - Purchase an item from the shop.\n"
        "- `/receipts` - View your purchase receipts.\n"
        "- `/balance` - Check your balance.\n"
        "- `/shophelp` - Shows this help message."
    ),
    "Admin Commands (Manage Server)": (
        "- `/additem details:[item name], [price], [description]` - Add an item to the shop.\n"
        "- `/deleteitem item:...` - Remove an item from the shop.\n"
        "- `/receiptlogs [user:...]` - View purchase logs, optionally filtered by user.\n"
        "- `/givemoney member:... amount:...` - Credit a user's balance (Administrator).\n"
        "- `/shopconfig setting:... value:...` - Change the currency name, start balance or receipts page size (Administrator)."
    ),
}


def build_help_embed() -> Embed:
    embed = Embed(title="Shop Commands")
    for name, value in HELP_SECTIONS.items():
        embed.add_field(name=name, value=value, inline=False)
    return embed


def setup_shophelp(tree: app_commands.CommandTree) -> None:
    @tree.command(name="shophelp", description="Show help for the shop commands.")
    @app_commands.describe(broadcast="Show the help to everyone in the channel.")
    async def shophelp(interaction: Interaction, broadcast: bool = False) -> None:
        await interaction.response.send_message(embed=build_help_embed(), ephemeral=not broadcast)
