"""
Username and password rules applied at registration.
"""

import re
from dataclasses import dataclass
from typing import List

from shared.errors import ErrorDetail

ALLOWED_USERNAME = re.compile(r"^[A-Za-z0-9\-._@+]+$")


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 6
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = True

    @classmethod
    def from_config(cls, config) -> "PasswordPolicy":
        return cls(
            min_length=config.password_min_length,
            require_digit=config.password_require_digit,
            require_lowercase=config.password_require_lowercase,
            require_uppercase=config.password_require_uppercase,
            require_non_alphanumeric=config.password_require_non_alphanumeric,
        )

    def check_username(self, username: str) -> List[ErrorDetail]:
        if not username:
            return [ErrorDetail(code="UserNameRequired", description="Username is required.")]
        if not ALLOWED_USERNAME.match(username):
            return [ErrorDetail(
                code="InvalidUserName",
                description=f"Username '{username}' is invalid, can only contain letters, digits or -._@+.",
            )]
        return []

    def check_password(self, password: str) -> List[ErrorDetail]:
        """Return every rule the password breaks; an empty list means it passes."""
        if not password:
            return [ErrorDetail(code="PasswordRequired", description="Password is required.")]

        errors = []
        if len(password) < self.min_length:
            errors.append(ErrorDetail(
                code="PasswordTooShort",
                description=f"Passwords must be at least {self.min_length} characters.",
            ))
        if self.require_non_alphanumeric and all(c.isalnum() for c in password):
            errors.append(ErrorDetail(
                code="PasswordRequiresNonAlphanumeric",
                description="Passwords must have at least one non alphanumeric character.",
            ))
        if self.require_digit and not any(c.isdigit() for c in password):
            errors.append(ErrorDetail(
                code="PasswordRequiresDigit",
                description="Passwords must have at least one digit ('0'-'9').",
            ))
        if self.require_lowercase and not any(c.islower() for c in password):
            errors.append(ErrorDetail(
                code="PasswordRequiresLower",
                description="Passwords must have at least one lowercase ('a'-'z').",
            ))
        if self.require_uppercase and not any(c.isupper() for c in password):
            errors.append(ErrorDetail(
                code="PasswordRequiresUpper",
                description="Passwords must have at least one uppercase ('A'-'Z').",
            ))
        return errors
