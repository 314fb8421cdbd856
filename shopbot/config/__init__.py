from shopbot.config.settings import (
    CURRENCY_NAME,
    DATA_DIR,
    DB_PATH,
    DEVELOPMENT_CHANNEL,
    FILE_WHITELIST,
    FILES_ROOT,
    RECEIPTS_PATH,
    SHOP_PATH,
    START_BALANCE,
    TOKEN,
    github_token,
)

__all__ = [
    "CURRENCY_NAME",
    "DATA_DIR",
    "DB_PATH",
    "DEVELOPMENT_CHANNEL",
    "FILE_WHITELIST",
    "FILES_ROOT",
    "RECEIPTS_PATH",
    "SHOP_PATH",
    "START_BALANCE",
    "TOKEN",
    "github_token",
]
