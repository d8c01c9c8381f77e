# Timeout constants (seconds)
DEFAULT_HTTP_TIMEOUT = 30.0  # HTTP client timeout

ADAPTER_EVERLEND = "EVERLEND"

# Solana token-list chain ids
TOKEN_LIST_CHAIN_ID_MAINNET = 101
TOKEN_LIST_CHAIN_ID_DEVNET = 103
