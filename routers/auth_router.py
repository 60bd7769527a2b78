import uuid

from fastapi import APIRouter, Depends, HTTPException, Response
from core.auth import (
    AUTH_COOKIE,
    Principal,
    create_access_token,
    get_current_user,
    get_session_user,
    hash_password,
    verify_password,
)
from core.config import Settings, get_settings
from schemas.auth_schema import AuthResponse, LoginRequest, MessageResponse, RegisterRequest
from schemas.user_schema import UserCreate, UserResponse, UserSummary
from storage import Storage, get_storage

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(body: RegisterRequest, storage: Storage = Depends(get_storage)):
    if not (body.first_name and body.last_name and body.email and body.password):
        raise HTTPException(status_code=400, detail="All fields are required")
    if storage.get_user_by_email(body.email):
        raise HTTPException(status_code=400, detail="User already exists with this email")

    user = storage.create_user(UserCreate(
        id=f"user-{uuid.uuid4().hex}",
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        profile_image_url=f"https://ui-avatars.com/api/?name={body.first_name}+{body.last_name}",
    ))
    storage.set_password(user.id, hash_password(body.password))
    return AuthResponse(message="User created successfully", user=UserSummary.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """
    Check email and password, then issue a signed token in the httpOnly ``auth-token`` cookie.
    """
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = storage.get_user_by_email(body.email)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    hashed = storage.get_password(user.id)
    if not hashed or not verify_password(body.password, hashed):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(user.id, user.email, settings.JWT_SECRET, settings.JWT_EXPIRES_DAYS)
    response.set_cookie(
        AUTH_COOKIE,
        token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.JWT_EXPIRES_DAYS * 24 * 60 * 60,
    )
    return AuthResponse(message="Login successful", user=UserSummary.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(AUTH_COOKIE)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse)
def get_me(storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_session_user)):
    user = storage.get_user(current_user.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/user", response_model=UserResponse)
def get_user(storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    user = storage.get_user(current_user.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
