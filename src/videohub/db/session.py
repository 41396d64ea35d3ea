import logging
from typing import Dict, Optional

from videohub.config import settings
from videohub.db.models import User
from videohub.errors import NotAuthorized
from videohub.ids import RandomSequenceGenerator

logger = logging.getLogger("session")


class SessionRegistry:
    """Maps issued tokens to users.

    Tokens never expire and are never revoked; logging in again adds a new
    token next to the previous ones.
    """

    def __init__(self, generator: RandomSequenceGenerator, token_length: int = settings.TOKEN_LENGTH):
        self._generator = generator
        self._token_length = token_length
        self._tokens: Dict[str, User] = {}

    def issue_token(self, user: User) -> str:
        token = self._generator.next_unique(self._token_length, self._tokens.__contains__)
        self._tokens[token] = user
        logger.info(f"Issued session token for user {user.name}")
        return token

    def resolve(self, token: Optional[str]) -> User:
        user = self._tokens.get(token) if token else None
        if user is None:
            logger.warning("Rejected unknown session token")
            raise NotAuthorized()
        return user

    def __contains__(self, token: str) -> bool:
        return token in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)
