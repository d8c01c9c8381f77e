from realms_strategies.core.clients.EverlendClient import (
    EVERLEND_CLIENT,
    ApyRecord,
    EverlendClient,
)
from realms_strategies.core.clients.HttpClient import HttpClient
from realms_strategies.core.clients.protocols import (
    ApyClientProtocol,
    PoolClientProtocol,
    PoolTransactionBuilderProtocol,
    ProposalCreatorProtocol,
    TokenInfoProviderProtocol,
)
from realms_strategies.core.clients.TokenListClient import (
    TOKEN_LIST_CLIENT,
    TokenInfo,
    TokenListClient,
)

__all__ = [
    "HttpClient",
    "ApyRecord",
    "EVERLEND_CLIENT",
    "EverlendClient",
    "TOKEN_LIST_CLIENT",
    "TokenInfo",
    "TokenListClient",
    "ApyClientProtocol",
    "PoolClientProtocol",
    "PoolTransactionBuilderProtocol",
    "ProposalCreatorProtocol",
    "TokenInfoProviderProtocol",
]
