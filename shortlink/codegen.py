import secrets
import string

ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
DEFAULT_CODE_LENGTH = 6


def generate_code(length: int | None = None) -> str:
    if not length or length <= 0:
        length = DEFAULT_CODE_LENGTH
    return "".join(secrets.choice(ALPHABET) for _ in range(length))
