"""Password encoding port and bcrypt adapter."""

from typing import Protocol, runtime_checkable

import bcrypt as _bcrypt


@runtime_checkable
class PasswordEncoder(Protocol):
    """Port for password hashing and verification."""

    def hash(self, raw_password: str) -> str:
        ...

    def verify(self, raw_password: str, hashed_password: str) -> bool:
        ...


class BcryptPasswordEncoder:
    """
    PasswordEncoder adapter using bcrypt.

    Args:
        rounds: Number of bcrypt hashing rounds (default: 12)
    """

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, raw_password: str) -> str:
        salt = _bcrypt.gensalt(rounds=self._rounds)
        return _bcrypt.hashpw(raw_password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, raw_password: str, hashed_password: str) -> bool:
        return _bcrypt.checkpw(
            raw_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
