import re
from typing import List, Optional

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def validate_non_empty(text: Optional[str]) -> bool:
    return bool(text)


def validate_length(text: str, min_length: int, max_length: int) -> bool:
    return min_length <= len(text) <= max_length


def validate_username(username: Optional[str]) -> List[str]:
    errors = []
    if not validate_non_empty(username):
        errors.append("Username cannot be empty!")
    if username is not None:
        if not validate_length(username, 4, 20):
            errors.append("Username must have length between 4 and 20 characters!")
        if not USERNAME_PATTERN.match(username):
            errors.append("Username must contain only letters, numbers, or the underscore!")
    return errors


def validate_email(email: Optional[str]) -> List[str]:
    errors = []
    if not validate_non_empty(email):
        errors.append("Email cannot be empty!")
    if email is not None and not validate_length(email, 0, 50):
        errors.append("Email must be shorter than 50 characters!")
    return errors


def validate_password(password: Optional[str]) -> List[str]:
    errors = []
    if not validate_non_empty(password):
        errors.append("Password cannot be empty!")
    if password is not None and not validate_length(password, 4, 20):
        errors.append("Password must have length between 4 and 20 characters!")
    return errors


def validate_repeated_password(password: Optional[str], password_repeat: Optional[str]) -> List[str]:
    errors = []
    if not validate_non_empty(password_repeat):
        errors.append("Password cannot be empty!")
    if password is not None and password_repeat is not None and password != password_repeat:
        errors.append("Passwords must match!")
    return errors


def validate_user(
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    password_repeat: Optional[str]
) -> List[str]:
    """All registration errors at once, in form order"""
    errors = []
    errors.extend(validate_username(username))
    errors.extend(validate_email(email))
    errors.extend(validate_password(password))
    errors.extend(validate_repeated_password(password, password_repeat))
    return errors


def validate_login(username: Optional[str], password: Optional[str]) -> List[str]:
    errors = []
    if not validate_non_empty(username):
        errors.append("Username cannot be empty!")
    if not validate_non_empty(password):
        errors.append("Password cannot be empty!")
    return errors
