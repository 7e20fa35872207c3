"""
Authentication endpoints for registration and login.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from convochat.core.security import create_access_token
from convochat.schemas.auth import UserLogin, UserCreate, RegisterResponse, LoginResponse
from convochat.api.deps import get_user_service
from convochat.services.user_service import UserExistsError, UserService


router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    user_service: UserService = Depends(get_user_service)
):
    """
    Register a new user.

    Args:
        user_data: User registration data
        user_service: User account operations

    Returns:
        Id and username of the created user

    Raises:
        HTTPException: If username or email already exists
    """
    try:
        user = await user_service.register(user_data.username, user_data.email, user_data.password)
    except UserExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return RegisterResponse(userId=user.id, username=user.username)


@router.post("/login", response_model=LoginResponse)
async def login(
    user_data: UserLogin,
    user_service: UserService = Depends(get_user_service)
):
    """
    Login endpoint - authenticates user and returns JWT token.

    Args:
        user_data: Login credentials (username and password)
        user_service: User account operations

    Returns:
        User data with a bearer access token

    Raises:
        HTTPException: If credentials are invalid
    """
    user = await user_service.authenticate(user_data.username, user_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": str(user.id)})

    return LoginResponse(
        userId=user.id,
        username=user.username,
        email=user.email,
        access_token=access_token,
    )
