from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..core.errors import NoRouteError, UnsupportedChainError
from ..core.models import TradeRequest
from ..core.orchestrator import QuoteOrchestrator, get_orchestrator


router = APIRouter(prefix="/v1")


class QuoteRequestBody(BaseModel):
    sourceChainId: int = Field(gt=0, description="Source chain ID")
    destChainId: Optional[int] = Field(default=None, gt=0, description="Destination chain ID (defaults to source)")
    sourceTokenAddress: str = Field(min_length=1, description="Input token address (zero or 0xeeee… for native)")
    destTokenAddress: str = Field(min_length=1, description="Output token address (zero or 0xeeee… for native)")
    sourceAmount: Union[str, int] = Field(description="Amount in the input token's smallest unit")
    requesterAddress: str = Field(default="", description="Wallet that will submit the swap")
    recipientAddress: Optional[str] = Field(default=None, description="Receiver (defaults to requester)")
    slippageTolerancePercent: Optional[float] = Field(default=None, ge=0, le=100, description="Max slippage in percent")


@router.post("/quote")
async def post_quote(
    body: QuoteRequestBody,
    orchestrator: QuoteOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    try:
        request = TradeRequest.from_dict(body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        quote = await orchestrator.get_quote(request)
    except UnsupportedChainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoRouteError as e:
        raise HTTPException(
            status_code=404,
            detail={"message": str(e), "attempted_providers": e.attempted_providers},
        )

    return {"success": True, "quote": quote.to_dict()}
