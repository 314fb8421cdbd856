import asyncio
from pathlib import Path

from discord import Interaction, app_commands

from shopbot.config.settings import (
    DEVELOPMENT_CHANNEL,
    FILE_WHITELIST,
    FILES_ROOT,
    GITHUB_TOKEN_ENV,
    github_token,
)
from shopbot.services.gist_bridge import GistError, download_file, upload_file

WRITEFILE_USAGE = "/writefile [github gist raw link to write from], [file to write too]"


def has_file_access(
    channel_name: str | None,
    is_admin: bool,
    user_id: int,
    *,
    channel: str = DEVELOPMENT_CHANNEL,
    whitelist: set[int] = FILE_WHITELIST,
) -> bool:
    return channel_name == channel and bool(is_admin) and int(user_id) in whitelist


def unrecognized_message(command_name: str) -> str:
    return f"The command '/{command_name}' was unrecognized."


def resolve_path(raw: str, root: Path = FILES_ROOT) -> Path:
    path = Path(raw.strip()).expanduser()
    return path if path.is_absolute() else Path(root) / path


def parse_write_details(details: str) -> tuple[str, str] | None:
    parts = [part.strip() for part in details.split(",")]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def _interaction_has_access(interaction: Interaction) -> bool:
    perms = getattr(interaction.user, "guild_permissions", None)
    return has_file_access(
        getattr(interaction.channel, "name", None),
        bool(perms is not None and perms.administrator),
        interaction.user.id,
    )


async def _write_from_gist(interaction: Interaction, details: str, *, force: bool) -> None:
    parsed = parse_write_details(details)
    if parsed is None:
        await interaction.response.send_message(WRITEFILE_USAGE, ephemeral=True)
        return
    raw_url, target = parsed

    await interaction.response.defer(ephemeral=True, thinking=True)
    try:
        await asyncio.to_thread(
            download_file,
            raw_url,
            resolve_path(target),
            overwrite_if_missing=force,
        )
    except GistError as exc:
        print(f"[gist] write failed user={interaction.user.id} target={target!r}: {exc}")
        await interaction.followup.send(
            f"An error occurred while fetching or writing the file: {exc}",
            ephemeral=True,
        )
        return
    await interaction.followup.send(f'"{target}" written successfully', ephemeral=True)


def setup_getfile(tree: app_commands.CommandTree) -> None:
    @tree.command(name="getfile", description="Upload a server file to a private GitHub Gist.")
    @app_commands.describe(path="Server file path, e.g. config/config.py")
    async def getfile(interaction: Interaction, path: str) -> None:
        if not _interaction_has_access(interaction):
            await interaction.response.send_message(unrecognized_message("getfile"), ephemeral=True)
            return
        if not path.strip():
            await interaction.response.send_message("/getfile [file name]", ephemeral=True)
            return
        token = github_token()
        if not token:
            await interaction.response.send_message(
                f"GitHub token not configured. Please set the {GITHUB_TOKEN_ENV} environment variable.",
                ephemeral=True,
            )
            return

        await interaction.response.defer(ephemeral=True, thinking=True)
        target = path.strip()
        try:
            gist_url = await asyncio.to_thread(
                upload_file,
                resolve_path(target),
                token=token,
                description=f"File: {target} uploaded by {interaction.user.id}",
            )
        except GistError as exc:
            print(f"[gist] upload failed user={interaction.user.id} path={target!r}: {exc}")
            await interaction.followup.send(f"Operation failed: {exc}", ephemeral=True)
            return
        await interaction.followup.send(f"File: {gist_url}", ephemeral=True)


def setup_writefile(tree: app_commands.CommandTree) -> None:
    @tree.command(name="writefile", description="Overwrite an existing server file from a Gist raw link.")
    @app_commands.describe(details="[gist raw link], [file to write to]")
    async def writefile(interaction: Interaction, details: str) -> None:
        if not _interaction_has_access(interaction):
            await interaction.response.send_message(unrecognized_message("writefile"), ephemeral=True)
            return
        await _write_from_gist(interaction, details, force=False)

    @tree.command(name="forcewritefile", description="Create or overwrite a server file from a Gist raw link.")
    @app_commands.describe(details="[gist raw link], [file to write to]")
    async def forcewritefile(interaction: Interaction, details: str) -> None:
        if not _interaction_has_access(interaction):
            await interaction.response.send_message(unrecognized_message("forcewritefile"), ephemeral=True)
            return
        await _write_from_gist(interaction, details, force=True)
