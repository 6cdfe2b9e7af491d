from soundmap.errors import ValidationError
from soundmap.utils import is_email, is_username

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt ignores anything past 72 bytes


def normalize_email(email: str) -> str:
    """Validate email shape and return it trimmed and lower-cased.

    Raises:
        ValidationError: If the value is not an email address
    """
    email = email.strip().lower()
    if not is_email(email):
        raise ValidationError("Please enter a valid email address")
    return email


def validate_username(username: str) -> None:
    """Validate username meets requirements.

    Requirements:
    - 3 to 30 characters
    - Letters, digits and underscores only

    Raises:
        ValidationError: If username doesn't meet requirements
    """
    if not is_username(username):
        raise ValidationError("Username must be 3-30 characters of letters, digits or underscores")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Minimum length of 8 characters
    - At most 72 bytes when UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
