import random
import string
from typing import Callable, Optional

from videohub.errors import IdSpaceExhausted

ALPHABET = string.ascii_lowercase


class RandomSequenceGenerator:
    """Produces short lowercase identifiers for videos and session tokens."""

    def __init__(self, rng: Optional[random.Random] = None, max_attempts: int = 32):
        self._rng = rng or random.SystemRandom()
        self.max_attempts = max_attempts

    def next_random_string(self, length: int) -> str:
        return "".join(self._rng.choice(ALPHABET) for _ in range(length))

    def next_unique(self, length: int, in_use: Callable[[str], bool]) -> str:
        """Draw until ``in_use`` rejects nothing, up to ``max_attempts`` draws."""
        for _ in range(self.max_attempts):
            candidate = self.next_random_string(length)
            if not in_use(candidate):
                return candidate
        raise IdSpaceExhausted()
