"""Authentication endpoints backed by the managed identity provider."""

from typing import Optional

from fastapi import APIRouter, Header, Request

from ..deps import IdentityProviderDep
from ..errors import UnauthorizedError
from ..schemas.auth import RefreshSessionRequest, SignInRequest, SignUpRequest
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/auth", tags=["Auth"])


def _bearer_token(authorization: Optional[str]) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Bearer token required")
    return token.strip()


@router.post("/sign-in", response_model=ApiResponse[dict])
async def sign_in(http_request: Request, request: SignInRequest, identity: IdentityProviderDep):
    session = await identity.sign_in(request.email, request.password)
    return ok(http_request, data=session, message="Signed in")


@router.post("/sign-up", response_model=ApiResponse[dict])
async def sign_up(http_request: Request, request: SignUpRequest, identity: IdentityProviderDep):
    result = await identity.sign_up(request.email, request.password, request.profile)
    return ok(http_request, data=result, message="Signed up")


@router.post("/sign-out", response_model=ApiResponse[dict])
async def sign_out(
    http_request: Request,
    identity: IdentityProviderDep,
    authorization: Optional[str] = Header(None),
):
    await identity.sign_out(_bearer_token(authorization))
    return ok(http_request, data={}, message="Signed out")


@router.get("/user", response_model=ApiResponse[dict])
async def get_user(
    http_request: Request,
    identity: IdentityProviderDep,
    authorization: Optional[str] = Header(None),
):
    user = await identity.get_user(_bearer_token(authorization))
    return ok(http_request, data=user)


@router.post("/session", response_model=ApiResponse[dict])
async def refresh_session(
    http_request: Request, request: RefreshSessionRequest, identity: IdentityProviderDep
):
    session = await identity.get_session(request.refresh_token)
    return ok(http_request, data=session)
