from fastapi import APIRouter, Depends, HTTPException, status

from ekraf_admin.auth.schemas import (
    ForgotPasswordRequest, LoginLevel, LoginRequest, RegistrationData, ResetPasswordRequest,
    VerifyEmailRequest,
)
from ekraf_admin.sandbox.dependencies import get_state
from ekraf_admin.sandbox.state import LOGIN_LEVELS, SandboxState, now

router = APIRouter()


@router.post("/login/{level}")
async def login(level: LoginLevel, credentials: LoginRequest, state: SandboxState = Depends(get_state)):
    """
    Exchange credentials for a bearer token on the given account level.
    """
    user = state.find_account(credentials.username_or_email, credentials.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if user.level_name != LOGIN_LEVELS[level.value]:
        raise HTTPException(status_code=403, detail=f"Account is not registered as {level.value}")

    return {"message": "Login successful", "token": state.issue_token(user), "user": state.dump_user(user)}


@router.post("/register/umkm", status_code=status.HTTP_201_CREATED)
async def register(data: RegistrationData, state: SandboxState = Depends(get_state)):
    taken = any(u.email == data.email or u.username == data.username for u in state.users.values())
    if taken:
        raise HTTPException(status_code=409, detail="Email or username is already registered")

    registration = state.add_registration(data.model_dump(mode="json"))
    user = {key: value for key, value in registration.items() if key != "password"}
    return {"message": "Registration received, check your email to verify the account", "user": user}


@router.post("/verify-email")
async def verify_email(request: VerifyEmailRequest, state: SandboxState = Depends(get_state)):
    registration = state.registrations.pop(request.token, None)
    if registration is None:
        raise HTTPException(status_code=400, detail="Verification token is invalid or expired")

    user = state.add_user(
        registration["name"],
        registration["email"],
        registration["password"],
        email_verified_at=now(),
        username=registration["username"],
        gender=registration["gender"],
        phone_number=registration["phone_number"],
        business_name=registration.get("business_name"),
        business_status=registration.get("business_status"),
        business_category_id=registration.get("business_category_id"),
    )
    return {"message": "Email verified", "user": state.dump_user(user)}


@router.post("/forgot-password")
async def forgot_password(request: ForgotPasswordRequest, state: SandboxState = Depends(get_state)):
    for user in state.users.values():
        if user.email == request.email:
            state.reset_tokens[f"reset-{user.id}"] = user.id
    # Same answer whether or not the account exists
    return {"message": "If the email is registered, a reset link has been sent"}


@router.post("/reset-password")
async def reset_password(request: ResetPasswordRequest, state: SandboxState = Depends(get_state)):
    user_id = state.reset_tokens.pop(request.token, None)
    if user_id is None:
        raise HTTPException(status_code=400, detail="Reset token is invalid or expired")
    state.passwords[user_id] = request.password
    return {"message": "Password has been reset"}
