from discord import Interaction, Member, app_commands

from shopbot.services.economy import DbEconomy
from shopbot.services.shop_ledger import ShopLedger


def setup_balance(tree: app_commands.CommandTree, economy: DbEconomy, ledger: ShopLedger) -> None:
    @tree.command(name="balance", description="Check your balance or another user's.")
    @app_commands.describe(member="Optional: user whose balance to show.")
    async def balance(interaction: Interaction, member: Member | None = None) -> None:
        target = member or interaction.user
        amount = economy.read(str(target.id))
        await interaction.response.send_message(
            f"{target.mention} has **{amount} {ledger.currency_name}**.",
            ephemeral=True,
        )


def setup_givemoney(tree: app_commands.CommandTree, economy: DbEconomy, ledger: ShopLedger) -> None:
    @tree.command(name="givemoney", description="Admin: credit currency to a user.")
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    @app_commands.describe(
        member="User who receives the currency.",
        amount="Amount to credit.",
    )
    async def givemoney(
        interaction: Interaction,
        member: Member,
        amount: app_commands.Range[int, 1, 1_000_000_000],
    ) -> None:
        economy.credit(str(member.id), int(amount), f"Granted by admin {interaction.user.id}")
        await interaction.response.send_message(
            f"Gave **{amount} {ledger.currency_name}** to {member.mention}. "
            f"New balance: {economy.read(str(member.id))} {ledger.currency_name}.",
            ephemeral=True,
        )
