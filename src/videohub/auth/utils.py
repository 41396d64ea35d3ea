from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from videohub.backend import Backend

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def get_current_token(token: str = Depends(oauth2_scheme)) -> str:
    """Bearer token as sent by the client; the backend decides if it is valid."""
    return token
