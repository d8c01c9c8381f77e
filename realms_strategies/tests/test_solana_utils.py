from __future__ import annotations

import copy

import pytest
from solders.pubkey import Pubkey
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

import realms_strategies.core.config as config
from realms_strategies.core.constants.everlend import (
    EVERLEND_ADDRESSES,
    Cluster,
    get_everlend_addresses,
)
from realms_strategies.core.utils.solana import (
    ConnectionContext,
    close_token_account_instruction,
    find_associated_token_address,
    solana_connection,
)


@pytest.fixture
def restore_global_config() -> None:
    original = copy.deepcopy(config.CONFIG)
    yield
    config.set_config(original)


@pytest.mark.parametrize(
    ("name", "cluster"),
    [
        ("mainnet", Cluster.MAINNET),
        ("MAINNET", Cluster.MAINNET),
        ("devnet", Cluster.DEV),
        ("localnet", Cluster.DEV),
        ("testnet", Cluster.DEV),
    ],
)
def test_cluster_from_name(name: str, cluster: Cluster) -> None:
    assert Cluster.from_name(name) is cluster


def test_address_table_is_exhaustive_and_exact() -> None:
    assert set(EVERLEND_ADDRESSES) == set(Cluster)

    mainnet = get_everlend_addresses(Cluster.MAINNET)
    assert str(mainnet.market) == "DzGDoJHdzUANM7P7V25t5nxqbvzRcHDmdhY51V6WNiXC"
    assert str(mainnet.registry) == "UaqUGgMvVzUZLthLHC9uuuBzgw5Ldesich94Wu5pMJg"

    dev = get_everlend_addresses(Cluster.DEV)
    assert str(dev.market) == "4yC3cUWXQmoyyybfnENpxo33hiNxUNa1YAmmuxz93WAJ"
    assert str(dev.registry) == "6KCHtgSGR2WDE3aqrqSJppHRGVPgy9fHDX5XD8VZgb61"


def test_associated_token_address_derivation() -> None:
    owner = Pubkey.new_unique()
    mint = Pubkey.new_unique()

    expected, _ = Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )

    assert find_associated_token_address(owner, mint) == expected
    assert find_associated_token_address(owner, str(mint)) == expected


def test_associated_token_address_off_curve_owner() -> None:
    governance_pda, _ = Pubkey.find_program_address([b"governance"], Pubkey.new_unique())
    assert not governance_pda.is_on_curve()

    ata = find_associated_token_address(governance_pda, Pubkey.new_unique())
    assert isinstance(ata, Pubkey)


def test_close_token_account_instruction() -> None:
    account = Pubkey.new_unique()
    owner = Pubkey.new_unique()

    ix = close_token_account_instruction(account, destination=owner, owner=owner)

    assert ix.program_id == TOKEN_PROGRAM_ID
    assert bytes(ix.data) == bytes([9])
    assert ix.accounts[0].pubkey == account
    assert ix.accounts[0].is_writable
    assert ix.accounts[1].pubkey == owner
    assert ix.accounts[2].pubkey == owner
    assert ix.accounts[2].is_signer


@pytest.mark.asyncio
async def test_solana_connection_uses_config(restore_global_config: None) -> None:
    config.set_config(
        {"strategy": {"rpc_urls": {"devnet": "https://devnet.example.com"}}}
    )

    async with solana_connection("devnet") as connection:
        assert isinstance(connection, ConnectionContext)
        assert connection.cluster is Cluster.DEV
        assert connection.endpoint == "https://devnet.example.com"


@pytest.mark.parametrize(
    ("name", "cluster", "endpoint"),
    [
        ("Mainnet", Cluster.MAINNET, "https://mainnet.example.com"),
        (" mainnet ", Cluster.MAINNET, "https://mainnet.example.com"),
        ("MAINNET", Cluster.MAINNET, "https://mainnet.example.com"),
        ("devnet", Cluster.DEV, "https://devnet.example.com"),
        ("localnet", Cluster.DEV, "https://devnet.example.com"),
    ],
)
def test_connection_cluster_and_endpoint_agree(
    restore_global_config: None, name: str, cluster: Cluster, endpoint: str
) -> None:
    config.set_config(
        {
            "strategy": {
                "rpc_urls": {
                    "mainnet": "https://mainnet.example.com",
                    "devnet": "https://devnet.example.com",
                }
            }
        }
    )

    connection = ConnectionContext.from_config(name)

    assert connection.cluster is cluster
    assert connection.endpoint == endpoint
    assert config.get_rpc_url(name) == endpoint


def test_rpc_url_defaults_follow_cluster_name(restore_global_config: None) -> None:
    config.set_config({})

    assert config.get_rpc_url("Mainnet") == config.DEFAULT_RPC_URLS["mainnet"]
    assert config.get_rpc_url("DevNet") == config.DEFAULT_RPC_URLS["devnet"]
