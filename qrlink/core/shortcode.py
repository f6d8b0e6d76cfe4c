# qrlink/core/shortcode.py

import secrets
import string
from typing import Callable

from qrlink.core.errors import ShortCodeGenerationError


ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
SHORT_CODE_LENGTH = 6
MAX_ATTEMPTS = 10


def random_code(length: int = SHORT_CODE_LENGTH) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def generate_short_code(
    is_taken: Callable[[str], bool],
    length: int = SHORT_CODE_LENGTH,
    max_attempts: int = MAX_ATTEMPTS,
) -> str:
    """
    Returns a random alphanumeric code for which is_taken() is False.
    Gives up after max_attempts collisions.
    """
    for _ in range(max_attempts):
        code = random_code(length)
        if not is_taken(code):
            return code
    raise ShortCodeGenerationError(
        f"Could not generate a unique short code after {max_attempts} attempts"
    )
