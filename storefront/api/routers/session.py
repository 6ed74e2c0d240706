# storefront/api/routers/session.py
from fastapi import APIRouter, Cookie, Response

from storefront.domain.schemas import SessionEnvelope
from storefront.services.session_service import SessionService
from storefront.utils.settings import SESSION_COOKIE_MAX_AGE, SESSION_COOKIE_NAME

router = APIRouter(prefix="/session", tags=["session"])


@router.post("", response_model=SessionEnvelope)
def get_or_create_session(
    response: Response,
    session_id: str | None = Cookie(None, alias=SESSION_COOKIE_NAME),
):
    """
    Zwraca id sesji koszyka. Nowe id trafia do trwalego ciasteczka klienta.
    """
    sid, created = SessionService().get_or_create_session_id(session_id)
    if created:
        response.set_cookie(
            key=SESSION_COOKIE_NAME,
            value=sid,
            max_age=SESSION_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )
    return SessionEnvelope(session_id=sid)
