"""FastAPI endpoints for authentication and user accounts."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.api.dependencies import current_actor, requires
from marketplace.api.schemas import Envelope
from marketplace.identity.access import Actor, Permission
from marketplace.identity.api.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateMeRequest,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserSummary,
)
from marketplace.identity.authentication import authenticate
from marketplace.identity.passwords import hash_password
from marketplace.identity.tokens import issue_token
from marketplace.identity.user.account import DeactivateUser
from marketplace.identity.user.lookup import load_user
from marketplace.identity.user.password_reset import RequestPasswordReset, ResetPassword
from marketplace.identity.user.profile import UpdateProfile
from marketplace.identity.user.registration import RegisterUser
from marketplace.identity.user.user import Role, User


def _summary(user) -> UserSummary:
    return UserSummary(id=str(user.id), name=user.name, email=user.email, role=user.role)


# ---------------------------------------------------------------------------
# Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", status_code=201, response_model=AuthResponse)
async def register(body: RegisterRequest) -> AuthResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        role=Role.self_registrable(body.role).value,
    )
    user_id = current_domain.process(command, asynchronous=False)
    user = load_user(user_id)
    return AuthResponse(
        message="User registered successfully",
        token=issue_token(user_id, user.role),
        user=_summary(user),
    )


@auth_router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest) -> AuthResponse:
    user = authenticate(body.email, body.password)
    return AuthResponse(
        message="Login successful",
        token=issue_token(str(user.id), user.role),
        user=_summary(user),
    )


@auth_router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(body: ForgotPasswordRequest) -> ForgotPasswordResponse:
    token = current_domain.process(RequestPasswordReset(email=body.email), asynchronous=False)
    # The token is returned directly instead of being emailed.
    return ForgotPasswordResponse(
        message="If the account exists, a reset token has been generated",
        reset_token=token,
    )


@auth_router.post("/reset-password", response_model=Envelope)
async def reset_password(body: ResetPasswordRequest) -> Envelope:
    command = ResetPassword(
        reset_token=body.reset_token,
        password_hash=hash_password(body.new_password),
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Password reset successfully")


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.get("/me", response_model=UserEnvelope)
async def get_me(actor: Actor = Depends(current_actor)) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.from_user(load_user(actor.user_id)))


@user_router.put("/me", response_model=UserEnvelope)
async def update_me(body: UpdateMeRequest, actor: Actor = Depends(current_actor)) -> UserEnvelope:
    profile = body.profile
    command = UpdateProfile(
        user_id=actor.user_id,
        name=body.name,
        address=profile.address if profile else None,
        phone=profile.phone if profile else None,
    )
    current_domain.process(command, asynchronous=False)
    return UserEnvelope(
        message="Profile updated successfully",
        user=UserResponse.from_user(load_user(actor.user_id)),
    )


@user_router.get("", response_model=UserListResponse)
async def list_users(actor: Actor = Depends(requires(Permission.MANAGE_USERS))) -> UserListResponse:
    users = [UserResponse.from_user(u) for u in current_domain.repository_for(User).newest_first()]
    return UserListResponse(count=len(users), users=users)


@user_router.delete("/{user_id}", response_model=Envelope)
async def deactivate_user(user_id: str, actor: Actor = Depends(requires(Permission.MANAGE_USERS))) -> Envelope:
    current_domain.process(DeactivateUser(user_id=user_id), asynchronous=False)
    return Envelope(message="User deactivated successfully")
