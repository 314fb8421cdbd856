import discord
from discord import app_commands

from shopbot.commands import setup_commands
from shopbot.config.runtime import ensure_app_config_defaults, get_app_config
from shopbot.config.settings import RECEIPTS_PATH, SHOP_PATH, TOKEN
from shopbot.db import init_db
from shopbot.services.economy import DbEconomy
from shopbot.services.shop_ledger import ShopLedger


class ShopBot(discord.Client):
    def __init__(self, ledger: ShopLedger, economy: DbEconomy) -> None:
        intents = discord.Intents.default()
        super().__init__(intents=intents)
        self.tree = discord.app_commands.CommandTree(self)
        self.ledger = ledger
        self.economy = economy
        self._synced = False

    async def setup_hook(self) -> None:
        setup_commands(self.tree, self.ledger, self.economy)
        self.tree.error(self._on_app_command_error)

    async def _on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        if isinstance(error, app_commands.CheckFailure):
            message = "You do not have permission to use this command."
        else:
            command_name = interaction.command.name if interaction.command else "?"
            print(f"[command] /{command_name} failed user={interaction.user.id}: {error!r}")
            message = "Something went wrong while running this command."
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)

    async def on_ready(self) -> None:
        if self._synced:
            return

        # Guild sync makes new commands show up immediately.
        for guild in self.guilds:
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)

        self._synced = True
        print(f"[app] ready as {self.user} guilds={len(self.guilds)}")


def build_ledger(economy: DbEconomy) -> ShopLedger:
    ledger = ShopLedger(
        SHOP_PATH,
        RECEIPTS_PATH,
        economy,
        currency_name=str(get_app_config("CURRENCY_NAME")),
    )
    ledger.load()
    return ledger


def run() -> None:
    if not TOKEN:
        raise SystemExit("Missing bot token. Set DISCORD_BOT_TOKEN or provide a TOKEN file.")
    init_db()
    ensure_app_config_defaults()
    economy = DbEconomy(start_balance=int(get_app_config("START_BALANCE")))
    ledger = build_ledger(economy)
    bot = ShopBot(ledger, economy)
    bot.run(TOKEN)


if __name__ == "__main__":
    run()
