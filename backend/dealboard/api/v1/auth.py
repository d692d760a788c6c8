"""Authentication and profile endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_current_user, get_db
from dealboard.models.user import User
from dealboard.schemas import (
    ApiResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from dealboard.services.auth_service import AuthService, create_access_token

router = APIRouter()


def _signed_in(user: User) -> ApiResponse:
    """The user's profile together with a fresh bearer token."""
    return ApiResponse(
        status="success",
        data={
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
            "token": TokenResponse(access_token=create_access_token(user.id)).model_dump(),
        },
    )


@router.post("/register", response_model=ApiResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account and sign it in."""
    try:
        user = await AuthService(db).register(**body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _signed_in(user)


@router.post("/login", response_model=ApiResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await AuthService(db).authenticate(email=body.email, password=body.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    return _signed_in(user)


@router.get("/me", response_model=ApiResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return ApiResponse(status="success", data=UserResponse.model_validate(current_user))


@router.patch("/me", response_model=ApiResponse)
async def update_me(
    body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the signed-in user's display name or avatar."""
    user = await AuthService(db).update_profile(current_user, **body.model_dump(exclude_unset=True))
    return ApiResponse(status="success", data=UserResponse.model_validate(user))
