import pytest

from swapcore.core.chains import NATIVE_PLACEHOLDER_EEEE
from swapcore.core.errors import RpcError
from swapcore.core.pathfinder.approvals import approval_required

from fakes import OWNER, ROUTER, TOKEN_A, FakeAmm


class BrokenAllowanceAmm(FakeAmm):
    async def allowance(self, token, owner, spender):
        raise RpcError("eth_call failed")


@pytest.mark.asyncio
async def test_native_input_never_needs_approval():
    assert await approval_required(FakeAmm(), NATIVE_PLACEHOLDER_EEEE, OWNER, 10**18) is False


@pytest.mark.asyncio
async def test_sufficient_allowance():
    amm = FakeAmm()
    amm.allowances[(TOKEN_A, OWNER, ROUTER)] = 1000
    assert await approval_required(amm, TOKEN_A, OWNER, 1000) is False
    assert await approval_required(amm, TOKEN_A, OWNER, 1001) is True


@pytest.mark.asyncio
@pytest.mark.parametrize("owner", [None, "", "not-an-address"])
async def test_unknown_owner_requires_approval(owner):
    assert await approval_required(FakeAmm(), TOKEN_A, owner, 1) is True


@pytest.mark.asyncio
async def test_unreadable_allowance_requires_approval():
    assert await approval_required(BrokenAllowanceAmm(), TOKEN_A, OWNER, 1) is True
