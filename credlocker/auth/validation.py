from credlocker.core.config import MIN_PASSWORD_LENGTH
from credlocker.core.errors import ValidationError


def validate_signup(
    full_name: str,
    email: str,
    username: str,
    password: str,
    confirm_password: str,
    min_password_length: int = MIN_PASSWORD_LENGTH,
) -> None:
    """Reject a signup form before the store is touched. Raises ValidationError."""
    if not all(value and value.strip() for value in (full_name, email, username, password)):
        raise ValidationError("All fields are required")

    if password != confirm_password:
        raise ValidationError("Passwords do not match")

    if len(password) < min_password_length:
        raise ValidationError(f"Password must be at least {min_password_length} characters long")
