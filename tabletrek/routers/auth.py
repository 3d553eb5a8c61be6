"""Auth routes: signup, login, me, logout.

Clients authenticate with the signed session cookie set on signup/login, or
with the returned JWT as ``Authorization: Bearer <token>``.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from tabletrek.core.config import Settings, get_app_settings
from tabletrek.core.errors import InvalidCredentials
from tabletrek.core.security import (
    create_access_token,
    create_session_token,
    user_id_from_access_token,
    verify_session_token,
)
from tabletrek.db.session import SessionFactory, SessionFactoryDep
from tabletrek.models.user import User
from tabletrek.schemas.achievement import UserAchievementOutSchema
from tabletrek.schemas.auth import CredentialsSchema, SessionOutSchema, SignupSchema
from tabletrek.schemas.profile import ProfileOutSchema, UserOutSchema
from tabletrek.services.accounts import authenticate, create_user, get_profile, get_user
from tabletrek.services.achievements import list_user_achievements

router = APIRouter(prefix="/api/auth", tags=["auth"])

SettingsDep = Annotated[Settings, Depends(get_app_settings)]


async def get_current_user_optional(
    request: Request,
    session_factory: SessionFactoryDep,
    settings: SettingsDep,
) -> User | None:
    """Return the user from a bearer token or the auth cookie; None if neither is valid."""
    user_id = None
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        user_id = user_id_from_access_token(settings, token.strip())
    if user_id is None:
        user_id = verify_session_token(settings, request.cookies.get(settings.auth_cookie_name))
    if user_id is None:
        return None
    return await get_user(session_factory, user_id)


async def get_current_user(
    current_user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    if current_user is None:
        raise InvalidCredentials("Authentication required")
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]


def _set_auth_cookie(response: Response, settings: Settings, user_id: int) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=create_session_token(settings, user_id),
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )


async def _session_payload(
    session_factory: SessionFactory, settings: Settings, user: User, with_token: bool
) -> SessionOutSchema:
    profile = await get_profile(session_factory, user.id)
    achievements = await list_user_achievements(session_factory, user.id)
    payload = SessionOutSchema(
        user=UserOutSchema.model_validate(user),
        profile=ProfileOutSchema.model_validate(profile),
        achievements=[UserAchievementOutSchema.model_validate(a) for a in achievements],
    )
    if with_token:
        payload.access_token = create_access_token(settings, user.id)
        payload.token_type = "bearer"
    return payload


@router.post("/signup", response_model=SessionOutSchema)
async def signup(
    body: SignupSchema,
    response: Response,
    session_factory: SessionFactoryDep,
    settings: SettingsDep,
):
    """Create the account and its profile, then log in."""
    user = await create_user(session_factory, body.username, body.password)
    _set_auth_cookie(response, settings, user.id)
    return await _session_payload(session_factory, settings, user, with_token=True)


@router.post("/login", response_model=SessionOutSchema)
async def login(
    body: CredentialsSchema,
    response: Response,
    session_factory: SessionFactoryDep,
    settings: SettingsDep,
):
    user = await authenticate(session_factory, body.username, body.password)
    _set_auth_cookie(response, settings, user.id)
    return await _session_payload(session_factory, settings, user, with_token=True)


@router.get("/me", response_model=SessionOutSchema)
async def me(current_user: CurrentUser, session_factory: SessionFactoryDep, settings: SettingsDep):
    """Re-validate a client's cached login against the server."""
    return await _session_payload(session_factory, settings, current_user, with_token=False)


@router.post("/logout")
async def logout(current_user: CurrentUser, response: Response, settings: SettingsDep):
    # path must match the one used in set_cookie()
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return {"success": True}
