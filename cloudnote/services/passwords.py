"""
CloudNote Backend — Password Hashing & Strength Policy
========================================================

What:  bcrypt hashing via passlib, and the configurable strength rule
       applied at signup.
Why:   Passwords are stored only as salted one-way hashes. Each hash gets
       its own random salt, embedded in the digest string.
How:   passlib's CryptContext wraps bcrypt with the configured cost factor.
       Hashing is CPU-bound, so the async helpers run it in Starlette's
       thread pool instead of on the event loop.
"""

import string
from dataclasses import dataclass
from typing import List

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from cloudnote.config import Settings


class PasswordHasher:
    """bcrypt hasher bound to a cost factor."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._context.verify(password, password_hash)

    async def hash_async(self, password: str) -> str:
        return await run_in_threadpool(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await run_in_threadpool(self.verify, password, password_hash)


@dataclass(frozen=True)
class PasswordPolicy:
    """
    Minimum composition rules for a new password.

    Defaults: at least 8 characters including one lowercase letter, one
    uppercase letter, one digit and one symbol.
    """

    min_length: int = 8
    min_lowercase: int = 1
    min_uppercase: int = 1
    min_numbers: int = 1
    min_symbols: int = 1

    @classmethod
    def from_settings(cls, config: Settings) -> "PasswordPolicy":
        return cls(
            min_length=config.password_min_length,
            min_lowercase=config.password_min_lowercase,
            min_uppercase=config.password_min_uppercase,
            min_numbers=config.password_min_numbers,
            min_symbols=config.password_min_symbols,
        )

    def violations(self, password: str) -> List[str]:
        """Names of the rules `password` breaks; empty when it is strong enough."""
        lowercase = sum(1 for c in password if c.islower())
        uppercase = sum(1 for c in password if c.isupper())
        numbers = sum(1 for c in password if c.isdigit())
        symbols = sum(1 for c in password if c in string.punctuation or c == " ")

        failed = []
        if len(password) < self.min_length:
            failed.append("min_length")
        if lowercase < self.min_lowercase:
            failed.append("min_lowercase")
        if uppercase < self.min_uppercase:
            failed.append("min_uppercase")
        if numbers < self.min_numbers:
            failed.append("min_numbers")
        if symbols < self.min_symbols:
            failed.append("min_symbols")
        return failed

    def is_strong(self, password: str) -> bool:
        return not self.violations(password)
