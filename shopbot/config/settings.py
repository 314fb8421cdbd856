import os
from pathlib import Path


_ROOT = Path(__file__).resolve().parents[2]
_TOKEN_PATH = _ROOT / "TOKEN"
TOKEN = (
    os.getenv("DISCORD_BOT_TOKEN", "").strip()
    or (_TOKEN_PATH.read_text(encoding="utf-8").strip() if _TOKEN_PATH.exists() else "")
)
DATA_DIR = _ROOT / "data"
DB_PATH = DATA_DIR / "shopbot.db"
SHOP_PATH = DATA_DIR / "shop.json"
RECEIPTS_PATH = DATA_DIR / "receipts.json"
FILES_ROOT = _ROOT                          # Base dir for relative /getfile and /writefile paths

# APP CONFIGS
CURRENCY_NAME = "coins"                     # Display name of the in-game currency
START_BALANCE = 0                           # Balance of a user the economy has never seen
RECEIPTS_PAGE_SIZE = 10                     # Receipts shown per page in /receipts and /receiptlogs
RECEIPT_ID_LENGTH = 10                      # Length of generated receipt IDs

# FILE BRIDGE
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"           # Env var holding a GitHub token with the "gist" scope
GITHUB_API_URL = "https://api.github.com/gists"
GIST_RAW_PREFIX = "https://gist.githubusercontent.com/"
GIST_USER_AGENT = "shopbot/file-bridge"
GIST_TIMEOUT_SECONDS = 20
DEVELOPMENT_CHANNEL = "development"         # File commands only work in a channel with this name
FILE_WHITELIST = {123456789012345678}       # Discord user ID(s) allowed to use the file commands


def github_token() -> str:
    return os.getenv(GITHUB_TOKEN_ENV, "").strip()
