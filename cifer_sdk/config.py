# cifer_sdk/config.py
"""
CIFER SDK: Configuration

Environment-driven settings, Blackbox discovery and per-chain resolution.

Environment:
    CIFER_BLACKBOX_URL          Blackbox base URL
    CIFER_CHAIN_ID              Default chain id
    CIFER_RPC_URL               RPC endpoint for the default chain
    CIFER_CONTROLLER_ADDRESS    SecretsController address
    CIFER_HTTP_TIMEOUT_SECONDS  HTTP timeout (default 30)
    CIFER_POLL_INTERVAL_MS      Poll interval (default 2000)
    CIFER_POLL_MAX_ATTEMPTS     Poll budget (default 60)

Usage:
    config = CiferConfig.from_env()
    cache = DiscoveryCache()
    discovery = await discover(config.require_blackbox_url(), cache=cache)
    chain = resolve_chain(config.chain_id, discovery)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import logging
import math
import os
import time
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, List, Mapping

from .common import trim_url
from .errors import ConfigError, DiscoveryError, ChainNotSupportedError
from .transport import HTTPTransport, HttpxTransport, DEFAULT_TIMEOUT_SECONDS
from .types import Address, PollingStrategy


logger = logging.getLogger(__name__)


DEFAULT_DISCOVERY_TTL_MS = 5 * 60 * 1000
DEFAULT_BLOCK_TIME_MS = 6000


# =============================================================================
# Environment Config
# =============================================================================

def _env_number(env: Mapping[str, str], name: str, default: Any, cast: type) -> Any:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}", e) from e


@dataclass(frozen=True)
class CiferConfig:
    """SDK settings, usually loaded from the environment."""
    blackbox_url: Optional[str] = None
    chain_id: Optional[int] = None
    rpc_url: Optional[str] = None
    controller_address: Optional[Address] = None
    http_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    poll_interval_ms: int = 2000
    poll_max_attempts: int = 60

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'CiferConfig':
        """
        Load from environment variables.

        Raises:
            ConfigError: If a numeric variable is malformed
        """
        env = os.environ if env is None else env
        return cls(
            blackbox_url=env.get("CIFER_BLACKBOX_URL") or None,
            chain_id=_env_number(env, "CIFER_CHAIN_ID", None, int),
            rpc_url=env.get("CIFER_RPC_URL") or None,
            controller_address=env.get("CIFER_CONTROLLER_ADDRESS") or None,
            http_timeout_seconds=_env_number(env, "CIFER_HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, float),
            poll_interval_ms=_env_number(env, "CIFER_POLL_INTERVAL_MS", 2000, int),
            poll_max_attempts=_env_number(env, "CIFER_POLL_MAX_ATTEMPTS", 60, int),
        )

    def require_blackbox_url(self) -> str:
        if not self.blackbox_url:
            raise ConfigError("Blackbox URL is not configured (set CIFER_BLACKBOX_URL)")
        return trim_url(self.blackbox_url)

    def polling_strategy(self) -> PollingStrategy:
        return PollingStrategy(interval_ms=self.poll_interval_ms, max_attempts=self.poll_max_attempts)

    def transport(self) -> HTTPTransport:
        return HttpxTransport(timeout=self.http_timeout_seconds)


# =============================================================================
# Discovery
# =============================================================================

@dataclass
class ChainConfig:
    chain_id: int
    name: Optional[str] = None
    rpc_url: Optional[str] = None
    ws_rpc_url: Optional[str] = None
    secrets_controller_address: Optional[Address] = None
    block_time_ms: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChainConfig':
        return cls(
            chain_id=int(data["chainId"]),
            name=data.get("name"),
            rpc_url=data.get("rpcUrl"),
            ws_rpc_url=data.get("wsRpcUrl"),
            secrets_controller_address=data.get("secretsControllerAddress"),
            block_time_ms=data.get("blockTimeMs"),
        )


@dataclass
class DiscoveryResult:
    """Normalized /healthz response."""
    status: str
    enclave_wallet_address: Address
    supported_chains: List[int]
    chains: List[ChainConfig]
    ipfs_gateway_url: Optional[str] = None
    fetched_at: float = field(default_factory=time.time)

    def chain(self, chain_id: int) -> Optional[ChainConfig]:
        for chain in self.chains:
            if chain.chain_id == chain_id:
                return chain
        return None

    def is_chain_supported(self, chain_id: int) -> bool:
        return chain_id in self.supported_chains


class DiscoveryCache:
    """Caller-owned TTL cache of discovery results, keyed by Blackbox URL."""

    def __init__(self):
        self._entries: Dict[str, tuple] = {}

    def get(self, blackbox_url: str) -> Optional[DiscoveryResult]:
        entry = self._entries.get(trim_url(blackbox_url))
        if entry is None:
            return None
        result, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._entries[trim_url(blackbox_url)]
            return None
        return result

    def put(self, blackbox_url: str, result: DiscoveryResult, ttl_ms: int) -> None:
        self._entries[trim_url(blackbox_url)] = (result, time.monotonic() + ttl_ms / 1000)

    def clear(self, blackbox_url: Optional[str] = None) -> None:
        if blackbox_url is None:
            self._entries.clear()
        else:
            self._entries.pop(trim_url(blackbox_url), None)


async def discover(
    blackbox_url: str,
    *,
    cache: Optional[DiscoveryCache] = None,
    cache_ttl_ms: int = DEFAULT_DISCOVERY_TTL_MS,
    force_refresh: bool = False,
    transport: Optional[HTTPTransport] = None,
) -> DiscoveryResult:
    """
    Fetch Blackbox configuration from GET /healthz.

    Raises:
        DiscoveryError: On HTTP failure or malformed response
    """
    base_url = trim_url(blackbox_url)
    if cache is not None and not force_refresh:
        cached = cache.get(base_url)
        if cached is not None:
            return cached

    http = transport if transport is not None else HttpxTransport()
    response = await http.request("GET", f"{base_url}/healthz", headers={"Accept": "application/json"})
    if not response.ok:
        raise DiscoveryError(f"Discovery failed: {response.status_code} {response.text}", base_url)

    try:
        data = response.json()
        configurations = data.get("configurations", {})
        result = DiscoveryResult(
            status=data["status"],
            enclave_wallet_address=data.get("enclaveWalletAddress", ""),
            supported_chains=[int(c) for c in data.get("supportedChains", [])],
            chains=[ChainConfig.from_dict(c) for c in configurations.get("chains", [])],
            ipfs_gateway_url=configurations.get("ipfsGatewayUrl"),
        )
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise DiscoveryError(f"Failed to parse discovery response: {e}", base_url, e) from e

    logger.debug("Discovered %d chains from %s", len(result.chains), base_url)
    if cache is not None:
        cache.put(base_url, result, cache_ttl_ms)
    return result


# =============================================================================
# Chain Resolution
# =============================================================================

@dataclass
class ResolvedChainConfig:
    chain_id: int
    rpc_url: str
    secrets_controller_address: Address
    name: Optional[str] = None
    ws_rpc_url: Optional[str] = None
    block_time_ms: Optional[int] = None
    from_discovery: bool = False


def resolve_chain(
    chain_id: int,
    discovery: Optional[DiscoveryResult],
    overrides: Optional[Dict[str, Any]] = None,
) -> ResolvedChainConfig:
    """
    Merge discovered chain config with caller overrides.

    Args:
        chain_id: Chain to resolve
        discovery: Discovery result, or None when offline
        overrides: ChainConfig field names to override

    Raises:
        ChainNotSupportedError: Neither discovery nor overrides know the chain
        ConfigError: RPC URL or controller address missing after merge
    """
    discovered = discovery.chain(chain_id) if discovery is not None else None
    if discovered is None and not overrides:
        raise ChainNotSupportedError(chain_id)

    merged = replace(discovered) if discovered is not None else ChainConfig(chain_id=chain_id)
    if overrides:
        merged = replace(merged, **overrides)
    merged.chain_id = chain_id

    if not merged.rpc_url:
        raise ConfigError(
            f"No RPC URL configured for chain {chain_id}. "
            "Either provide via discovery or chain overrides."
        )
    if not merged.secrets_controller_address:
        raise ConfigError(
            f"No SecretsController address configured for chain {chain_id}. "
            "Either provide via discovery or chain overrides."
        )

    return ResolvedChainConfig(
        chain_id=chain_id,
        rpc_url=merged.rpc_url,
        secrets_controller_address=merged.secrets_controller_address,
        name=merged.name,
        ws_rpc_url=merged.ws_rpc_url,
        block_time_ms=merged.block_time_ms,
        from_discovery=discovered is not None,
    )


def estimate_block_freshness_window(block_time_ms: int = DEFAULT_BLOCK_TIME_MS) -> int:
    """Blocks produced in ten minutes."""
    return math.ceil(10 * 60 * 1000 / block_time_ms)
