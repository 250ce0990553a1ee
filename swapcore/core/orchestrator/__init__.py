from .orchestrator import QuoteOrchestrator, default_tiers, get_orchestrator
from .registry import ProviderRegistry, build_pathfinder, build_rpc_clients
from .tiers import ExhaustiveTier, RaceTier, SequentialTier, best_quote, call_provider, rank_key

__all__ = [
    "QuoteOrchestrator",
    "ProviderRegistry",
    "RaceTier",
    "SequentialTier",
    "ExhaustiveTier",
    "best_quote",
    "call_provider",
    "rank_key",
    "default_tiers",
    "get_orchestrator",
    "build_pathfinder",
    "build_rpc_clients",
]
