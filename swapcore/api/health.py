from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.chains import chain_name
from ..core.orchestrator import QuoteOrchestrator, get_orchestrator

router = APIRouter()


@router.get("/healthz")
async def health_check(orchestrator: QuoteOrchestrator = Depends(get_orchestrator)) -> Dict[str, Any]:
    """Liveness plus a summary of what this instance can route."""
    registry = orchestrator.registry
    onchain = registry.get("onchain")
    chains = sorted(onchain.supported_chains) if onchain is not None else []

    return {
        "status": "healthy",
        "providers": registry.names,
        "onchain_chains": {str(chain_id): chain_name(chain_id) for chain_id in chains},
        "quote_cache_size": orchestrator.cache.size(),
    }
