from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from solders.pubkey import Pubkey

from realms_strategies.core.config import normalize_cluster_name

EVERLEND = "Everlend"
EVERLEND_PROTOCOL_SYMBOL = "evd"
EVERLEND_LOGO_SRC = "/realms/Everlend/img/logo.png"

EVERLEND_GENERAL_POOL_PROGRAM_ID = Pubkey.from_string(
    "GenUMNGcWca1GiPLfg89698Gfys1dzk9BAGsyb9aEL2u"
)

# General pool account layout: account_type (u8) followed by pubkeys.
POOL_ACCOUNT_TYPE = 2
POOL_MARKET_OFFSET = 1


class Cluster(Enum):
    MAINNET = "mainnet"
    DEV = "dev"

    @classmethod
    def from_name(cls, name: str) -> Cluster:
        """Only mainnet is distinguished; devnet, localnet and friends share DEV."""
        return cls.MAINNET if normalize_cluster_name(name) == "mainnet" else cls.DEV


@dataclass(frozen=True)
class EverlendAddresses:
    market: Pubkey
    registry: Pubkey


EVERLEND_ADDRESSES: dict[Cluster, EverlendAddresses] = {
    Cluster.MAINNET: EverlendAddresses(
        market=Pubkey.from_string("DzGDoJHdzUANM7P7V25t5nxqbvzRcHDmdhY51V6WNiXC"),
        registry=Pubkey.from_string("UaqUGgMvVzUZLthLHC9uuuBzgw5Ldesich94Wu5pMJg"),
    ),
    Cluster.DEV: EverlendAddresses(
        market=Pubkey.from_string("4yC3cUWXQmoyyybfnENpxo33hiNxUNa1YAmmuxz93WAJ"),
        registry=Pubkey.from_string("6KCHtgSGR2WDE3aqrqSJppHRGVPgy9fHDX5XD8VZgb61"),
    ),
}


def get_everlend_addresses(cluster: Cluster) -> EverlendAddresses:
    return EVERLEND_ADDRESSES[cluster]
