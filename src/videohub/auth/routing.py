from fastapi import APIRouter, Depends, status

from videohub.backend import Backend
from .models import TokenResponse, UserCreate, UserLogin
from .utils import get_backend


router = APIRouter(tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(user: UserCreate, backend: Backend = Depends(get_backend)):
    backend.register_user(user.username, user.password)
    return {"message": "User registered successfully", "username": user.username}


@router.post("/login", response_model=TokenResponse)
def login(user: UserLogin, backend: Backend = Depends(get_backend)):
    token = backend.auth(user.username, user.password)
    return TokenResponse(access_token=token)
