from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.core.auth import AuthContext, require_owner
from src.core.billing import create_checkout_session
from src.schemas.billing import CheckoutRequest, CheckoutResponse

router = APIRouter(prefix="/billing", tags=["billing"])


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    body: CheckoutRequest,
    request: Request,
    context: AuthContext = Depends(require_owner),
) -> CheckoutResponse:
    url = await create_checkout_session(context, body.price_id, request.headers.get("origin"))
    return CheckoutResponse(url=url)
