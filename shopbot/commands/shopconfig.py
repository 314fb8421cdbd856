from typing import Any, Callable

from discord import Interaction, app_commands

from shopbot.config.runtime import APP_CONFIG_SPECS, set_app_config
from shopbot.db.database import get_connection
from shopbot.services.economy import DbEconomy
from shopbot.services.shop_ledger import ShopLedger


class ConfigValueError(ValueError):
    pass


def apply_app_config(
    name: str,
    raw_value: str,
    ledger: ShopLedger,
    economy: DbEconomy,
    *,
    connection_factory: Callable = get_connection,
) -> Any:
    """Store a runtime config value and push it into the running ledger and economy."""
    spec = APP_CONFIG_SPECS.get(name)
    if spec is None:
        raise ConfigValueError(f"Unknown setting: {name}")
    try:
        value = spec.cast(raw_value.strip())
    except (TypeError, ValueError) as exc:
        raise ConfigValueError(f"Invalid value for {name}: {raw_value!r}") from exc

    stored = set_app_config(name, value, connection_factory=connection_factory)
    if name == "CURRENCY_NAME":
        ledger.currency_name = str(stored)
    elif name == "START_BALANCE":
        economy.start_balance = int(stored)
    print(f"[config] {name}={stored!r}")
    return stored


def setup_shopconfig(tree: app_commands.CommandTree, ledger: ShopLedger, economy: DbEconomy) -> None:
    @tree.command(name="shopconfig", description="Admin: change a shop setting.")
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    @app_commands.describe(setting="Setting to change.", value="New value.")
    @app_commands.choices(
        setting=[app_commands.Choice(name=name, value=name) for name in APP_CONFIG_SPECS]
    )
    async def shopconfig(
        interaction: Interaction,
        setting: app_commands.Choice[str],
        value: str,
    ) -> None:
        try:
            stored = apply_app_config(setting.value, value, ledger, economy)
        except ConfigValueError as exc:
            await interaction.response.send_message(str(exc), ephemeral=True)
            return
        await interaction.response.send_message(
            f"{setting.value} set to **{stored}**. {APP_CONFIG_SPECS[setting.value].description}",
            ephemeral=True,
        )
