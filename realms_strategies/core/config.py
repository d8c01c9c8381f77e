import json
import os
from pathlib import Path
from typing import Any

_CONFIG_ENV_KEYS = ("REALMS_STRATEGIES_CONFIG_PATH", "REALMS_STRATEGIES_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"

DEFAULT_EVERLEND_API_BASE_URL = "https://api.everlend.finance/api/v1"
DEFAULT_TOKEN_LIST_URL = (
    "https://cdn.jsdelivr.net/gh/solana-labs/token-list@main/src/tokens/"
    "solana.tokenlist.json"
)
DEFAULT_RPC_URLS = {
    "mainnet": "https://api.mainnet-beta.solana.com",
    "devnet": "https://api.devnet.solana.com",
}
DEFAULT_CLUSTER = "mainnet"


def _find_project_root(start: Path) -> Path | None:
    cur = start.resolve()
    for parent in [cur, *cur.parents]:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


def _project_root() -> Path | None:
    return _find_project_root(Path.cwd()) or _find_project_root(Path(__file__).parent)


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()

    env_path = next(
        (os.getenv(k, "").strip() for k in _CONFIG_ENV_KEYS if os.getenv(k)), ""
    )
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_absolute():
            return p
        root = _project_root()
        return (root / p) if root else p

    root = _project_root()
    return (root / _DEFAULT_CONFIG_FILENAME) if root else Path(_DEFAULT_CONFIG_FILENAME)


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    try:
        return json.loads(cfg_path.read_text())
    except Exception:
        return {}


CONFIG: dict[str, Any] = load_config_json()


def set_config(config: dict[str, Any]) -> None:
    """Replace the global CONFIG dict in-place.

    This allows code that imported CONFIG at module import time to see updates.
    """
    CONFIG.clear()
    CONFIG.update(config)


def load_config(
    path: str | Path | None = None, *, require_exists: bool = False
) -> None:
    """Load config from disk into the global CONFIG dict."""
    set_config(load_config_json(path, require_exists=require_exists))


def normalize_cluster_name(name: str) -> str:
    return str(name).strip().lower()


def get_rpc_urls() -> dict[str, Any]:
    return CONFIG.get("strategy", {}).get("rpc_urls", {})


def get_rpc_url(cluster_name: str) -> str:
    """RPC URL for a cluster name, falling back to the public Solana endpoints.

    Names are matched case-insensitively, the same way ``Cluster.from_name``
    reads them. Every non-mainnet name shares the devnet entry.
    """
    name = normalize_cluster_name(cluster_name)
    key = "mainnet" if name == "mainnet" else "devnet"
    rpc_urls = {str(k).strip().lower(): v for k, v in get_rpc_urls().items()}
    url = rpc_urls.get(name) or rpc_urls.get(key)
    if url:
        return str(url).strip()
    return DEFAULT_RPC_URLS[key]


def get_cluster_name() -> str:
    cluster = CONFIG.get("strategy", {}).get("cluster")
    if cluster:
        return str(cluster).strip()
    return DEFAULT_CLUSTER


def get_everlend_api_base_url() -> str:
    system = CONFIG.get("system", {})
    api_url = system.get("everlend_api_base_url")
    if api_url:
        return str(api_url).strip().rstrip("/")
    return DEFAULT_EVERLEND_API_BASE_URL


def get_token_list_url() -> str:
    system = CONFIG.get("system", {})
    url = system.get("token_list_url")
    if url:
        return str(url).strip()
    return DEFAULT_TOKEN_LIST_URL
