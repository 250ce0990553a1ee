"""ERC-20 allowance check for router swaps."""

import logging
from typing import Optional

from ..chains import is_evm_address, is_native
from ..errors import RpcError
from .amm import AmmReader

logger = logging.getLogger(__name__)


async def approval_required(
    reader: AmmReader,
    token: str,
    owner: Optional[str],
    amount: int,
    spender: Optional[str] = None,
) -> bool:
    """Whether ``owner`` must approve the router before swapping ``amount`` of ``token``.

    Native input never needs an approval. Anything we cannot verify (unknown
    owner, unreadable allowance) is reported as required.
    """
    if is_native(token):
        return False
    if not owner or not is_evm_address(owner):
        return True

    spender = spender or reader.config.router
    try:
        allowance = await reader.allowance(token, owner, spender)
    except (RpcError, ValueError) as exc:
        logger.debug("Allowance check for %s failed, assuming approval needed: %s", token, exc)
        return True
    return allowance < amount
