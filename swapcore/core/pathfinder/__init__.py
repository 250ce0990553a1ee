from .amm import AmmReader, RpcAmmReader
from .approvals import approval_required
from .router import Pathfinder, build_candidate_paths
from .rpc import RpcClient
from .slippage import dynamic_slippage, price_impact_percent

__all__ = [
    "AmmReader",
    "RpcAmmReader",
    "RpcClient",
    "Pathfinder",
    "build_candidate_paths",
    "approval_required",
    "dynamic_slippage",
    "price_impact_percent",
]
