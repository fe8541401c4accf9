"""Unified validators for signup, placement and shop input."""
import re

from app.config.business_constants import PLACEMENT_SIDES, REFERRAL_CODE_LENGTH


_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_REFERRAL_CODE_PATTERN = re.compile(r"^[A-Z0-9]+$")

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72  # bcrypt ignores bytes beyond 72


def validate_email(email: str) -> tuple[bool, str | None]:
    """
    Validate a login email.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
        - (True, None) if valid
        - (False, error_message) if invalid

    Examples:
        >>> validate_email("user@example.com")
        (True, None)
        >>> validate_email("invalid")
        (False, "Email must contain '@'")
    """
    if not email or not isinstance(email, str):
        return False, "Email is empty"

    email = email.strip()

    if not email:
        return False, "Email is empty"

    if len(email) > 255:
        return False, "Email is too long (maximum 255 characters)"

    if "@" not in email:
        return False, "Email must contain '@'"

    local, _, domain = email.partition("@")
    if "@" in domain:
        return False, "Email must contain exactly one '@'"

    if not local or len(local) > 64:
        return False, "Email local part must be 1-64 characters"

    if "." not in domain or any(not part for part in domain.split(".")):
        return False, "Email domain has invalid structure"

    if not _EMAIL_PATTERN.match(email):
        return False, "Invalid email format"

    return True, None


def validate_phone(phone: str) -> tuple[bool, str | None]:
    """
    Validate a mobile number.

    Examples:
        >>> validate_phone("+91 98765 43210")
        (True, None)
        >>> validate_phone("123")
        (False, "Phone must be 10-15 digits")
    """
    if not phone or not isinstance(phone, str):
        return False, "Phone is empty"

    phone = phone.strip()

    if not phone:
        return False, "Phone is empty"

    if len(phone) > 20:
        return False, "Phone is too long (maximum 20 characters)"

    digits = re.sub(r"\D", "", phone)
    if len(digits) < 10 or len(digits) > 15:
        return False, "Phone must be 10-15 digits"

    return True, None


def validate_password(password: str) -> tuple[bool, str | None]:
    """
    Validate a login password.

    Examples:
        >>> validate_password("short")
        (False, "Password must be at least 8 characters")
    """
    if not password or not isinstance(password, str):
        return False, "Password is empty"

    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    if len(password.encode()) > MAX_PASSWORD_LENGTH:
        return False, f"Password must be at most {MAX_PASSWORD_LENGTH} bytes"

    return True, None


def validate_name(name: str) -> tuple[bool, str | None]:
    """Validate a display name."""
    if not name or not isinstance(name, str) or not name.strip():
        return False, "Name is empty"

    if len(name.strip()) > 200:
        return False, "Name is too long (maximum 200 characters)"

    return True, None


def validate_referral_code(code: str) -> tuple[bool, str | None]:
    """
    Validate a sponsor referral code.

    Examples:
        >>> validate_referral_code("AB12CD34")
        (True, None)
        >>> validate_referral_code("ab-12")
        (False, "Referral code must contain only letters and digits")
    """
    if not code or not isinstance(code, str):
        return False, "Referral code is empty"

    code = code.strip().upper()

    if not _REFERRAL_CODE_PATTERN.match(code):
        return False, "Referral code must contain only letters and digits"

    if len(code) != REFERRAL_CODE_LENGTH:
        return False, f"Referral code must be {REFERRAL_CODE_LENGTH} characters"

    return True, None


def validate_side(side: str) -> tuple[bool, str | None]:
    """
    Validate a placement side.

    Examples:
        >>> validate_side("Left")
        (True, None)
        >>> validate_side("middle")
        (False, "Side must be 'left' or 'right'")
    """
    if not side or not isinstance(side, str):
        return False, "Side is empty"

    if side.strip().lower() not in PLACEMENT_SIDES:
        return False, "Side must be 'left' or 'right'"

    return True, None


def validate_quantity(quantity: int, maximum: int | None = None) -> tuple[bool, str | None]:
    """Validate an order quantity."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return False, "Quantity must be a whole number"

    if quantity < 1:
        return False, "Quantity must be at least 1"

    if maximum is not None and quantity > maximum:
        return False, f"Quantity must be <= {maximum}"

    return True, None


def normalize_email(email: str) -> str:
    """
    Normalize email to lowercase.

    Raises:
        ValueError: If email is invalid
    """
    is_valid, error = validate_email(email)
    if not is_valid:
        raise ValueError(error)

    return email.strip().lower()


def normalize_phone(phone: str) -> str:
    """
    Normalize phone number by removing formatting.

    Raises:
        ValueError: If phone is invalid
    """
    is_valid, error = validate_phone(phone)
    if not is_valid:
        raise ValueError(error)

    phone = phone.strip()
    digits = re.sub(r"\D", "", phone)
    return f"+{digits}" if phone.startswith("+") else digits


def normalize_referral_code(code: str) -> str:
    """
    Normalize referral code to upper case.

    Raises:
        ValueError: If code is invalid
    """
    is_valid, error = validate_referral_code(code)
    if not is_valid:
        raise ValueError(error)

    return code.strip().upper()
