from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: Optional[bool] = Field(default=None, description="Force JSON (true) or console (false) log rendering")
    slow_request_seconds: float = Field(default=5.0, description="HTTP requests slower than this are logged as warnings")

    # Quote cache
    quote_cache_ttl_seconds: float = Field(default=30.0, description="TTL for cached quotes in seconds")
    quote_cache_max_size: int = Field(default=1000, description="Maximum cached quotes")
    pair_cache_ttl_seconds: float = Field(default=30.0, description="TTL for pair-address lookups")

    # Orchestrator tiers
    race_size: int = Field(default=6, ge=0, description="Providers raced concurrently in the first tier")
    race_timeout_seconds: float = Field(default=4.0, description="Per-provider timeout in the race tier")
    sequential_timeout_seconds: float = Field(default=3.0, description="Per-provider timeout in the sequential tier")
    exhaustive_timeout_seconds: float = Field(default=10.0, description="Per-provider timeout in the exhaustive tier")

    # On-chain reads
    rpc_timeout_seconds: float = Field(default=4.0, description="JSON-RPC request timeout")
    decimals_timeout_seconds: float = Field(
        default=1.5, description="Budget for the token-decimals lookup that enriches a winning quote"
    )
    rpc_urls: Dict[int, List[str]] = Field(
        default_factory=dict,
        description="Per-chain JSON-RPC endpoint overrides (chain id -> ordered URLs)",
    )
    enable_onchain_pathfinder: bool = Field(default=True, description="Route through AMM pools directly")

    # Pricing heuristics
    default_slippage_percent: float = Field(default=0.5, ge=0, le=50, description="Slippage used when the caller gives none")
    low_liquidity_threshold: int = Field(default=1_000_000, description="Aggregate liquidity below which a route is low-liquidity")
    reserve_estimate_haircut_percent: int = Field(default=50, ge=0, lt=100, description="Haircut applied to last-resort reserve estimates")
    fee_on_transfer_tokens: List[str] = Field(
        default_factory=list,
        description="Token addresses known to deduct a fee on transfer",
    )

    # Provider credentials / endpoints
    integrator_name: str = Field(default="swapcore", description="Integrator / referrer tag sent to aggregators")
    lifi_api_key: str = Field(default="", description="LI.FI API key")
    oneinch_api_key: str = Field(default="", description="1inch API key")
    zerox_api_key: str = Field(default="", description="0x API key")
    bungee_api_key: str = Field(default="", description="Bungee (Socket) API key")
    bungee_base_url: str = Field(default="", description="Override the default Bungee API base URL")
    relay_base_url: str = Field(default="", description="Override the default Relay API base URL")

    @field_validator(
        "quote_cache_ttl_seconds",
        "pair_cache_ttl_seconds",
        "race_timeout_seconds",
        "sequential_timeout_seconds",
        "exhaustive_timeout_seconds",
        "rpc_timeout_seconds",
        "decimals_timeout_seconds",
        "slow_request_seconds",
    )
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("fee_on_transfer_tokens")
    @classmethod
    def _lower_addresses(cls, value: List[str]) -> List[str]:
        return [item.strip().lower() for item in value if item and item.strip()]

    def rpc_urls_for(self, chain_id: int, defaults: List[str]) -> List[str]:
        """Configured endpoints for a chain, falling back to the built-in list."""
        configured = self.rpc_urls.get(chain_id) or []
        return [url.rstrip("/") for url in configured] or list(defaults)


# Global settings instance
settings = Settings()
