from core.config import settings

TEAM_NAME_PATTERN = r"^[A-Za-z0-9\s]+$"
TEAM_NAME_MAX_LENGTH = settings.TEAM_NAME_MAX_LENGTH
SLUG_MAX_ATTEMPTS = settings.SLUG_MAX_ATTEMPTS

# base58 alphabet, no 0, O, I or l
WALLET_ADDRESS_PATTERN = r"^[1-9A-HJ-NP-Za-km-z]{32,44}$"
WALLET_ADDRESS_HEADER = "X-Wallet-Address"

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100

WALLET_GENERATE_PATH = "/api/wallet/generate"
