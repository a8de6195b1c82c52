"""Authentication routes (register, login, me).

Handlers are plain ``def`` so FastAPI runs them in its threadpool and the
bcrypt work never blocks the event loop. Domain errors (409 on a taken
username/email, 401 on bad credentials, 400 on blank fields) are mapped by
api.errors.
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_auth_service
from api.models import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from api.security import get_current_user, to_user_response
from services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Register a new user and return a token for it."""
    result = auth_service.register(
        username=request.username,
        email=request.email,
        password=request.password,
    )
    return AuthResponse(token=result.token, user=to_user_response(result.user))


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Login user and return a fresh token."""
    result = auth_service.login(username=request.username, password=request.password)
    return AuthResponse(token=result.token, user=to_user_response(result.user))


@router.get("/me", response_model=UserResponse)
def get_me(current_user: UserResponse = Depends(get_current_user)):
    """Get current authenticated user info."""
    return current_user
