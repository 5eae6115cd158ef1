"""Authentication routes for the REST API."""
from fastapi import APIRouter, Depends

from api.dependencies import get_identity_gate, get_session
from api.services.identity import IdentityGate, SessionContext, SessionState
from api.schemas.requests import SignInRequest
from api.schemas.responses import IdentityResponse, SessionResponse, SignInResponse


router = APIRouter(prefix="/auth", tags=["auth"])


def session_response(session: SessionContext) -> SessionResponse:
    identity = session.current_identity()
    return SessionResponse(
        state=session.state.value,
        identity=IdentityResponse(uid=identity.uid, address=identity.address) if identity else None,
        is_admin=session.is_admin()
    )


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    request: SignInRequest,
    gate: IdentityGate = Depends(get_identity_gate)
):
    """Exchange administrator credentials for a session token."""
    result = await gate.sign_in(request.email, request.password)
    session = await gate.open_session(result.token)
    return SignInResponse(
        **session_response(session).model_dump(),
        token=result.token,
        expires_in=result.expires_in
    )


@router.post("/sign-out", response_model=SessionResponse)
async def sign_out(
    session: SessionContext = Depends(get_session),
    gate: IdentityGate = Depends(get_identity_gate)
):
    """End the caller's session. Signing out anonymously is a no-op."""
    if session.state is SessionState.AUTHENTICATED:
        await gate.sign_out(session.token)
        await session.end()
    return session_response(session)


@router.get("/me", response_model=SessionResponse)
async def current_session(session: SessionContext = Depends(get_session)):
    """Who the caller is and whether they may administer the site."""
    return session_response(session)
