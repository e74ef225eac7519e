"""
CloudNote Backend — Password Hashing & Policy Unit Tests
==========================================================
"""

import pytest

from cloudnote.config import Settings
from cloudnote.services.passwords import PasswordHasher, PasswordPolicy


class TestPasswordHasher:

    def test_hash_is_not_plaintext_and_verifies(self, password_hasher):
        digest = password_hasher.hash("Str0ng!Passw0rd")
        assert digest != "Str0ng!Passw0rd"
        assert digest.startswith("$2")
        assert password_hasher.verify("Str0ng!Passw0rd", digest)
        assert not password_hasher.verify("wrong", digest)

    def test_each_hash_gets_its_own_salt(self, password_hasher):
        assert password_hasher.hash("same-password") != password_hasher.hash("same-password")

    def test_cost_factor_is_applied(self):
        digest = PasswordHasher(rounds=5).hash("whatever")
        assert digest.split("$")[2] == "05"

    @pytest.mark.asyncio
    async def test_async_helpers_use_thread_pool(self, password_hasher):
        digest = await password_hasher.hash_async("Str0ng!Passw0rd")
        assert await password_hasher.verify_async("Str0ng!Passw0rd", digest)


class TestPasswordPolicy:

    @pytest.mark.parametrize(
        "password, broken_rule",
        [
            ("Sh0rt!", "min_length"),
            ("NOLOWER1!", "min_lowercase"),
            ("noupper1!", "min_uppercase"),
            ("NoDigits!!", "min_numbers"),
            ("NoSymbols12", "min_symbols"),
        ],
    )
    def test_default_policy_rejects_weak_passwords(self, password, broken_rule):
        policy = PasswordPolicy()
        assert broken_rule in policy.violations(password)
        assert not policy.is_strong(password)

    def test_default_policy_accepts_strong_password(self):
        assert PasswordPolicy().violations("Str0ng!Passw0rd") == []

    def test_policy_is_configurable(self):
        config = Settings(password_min_symbols=0, password_min_uppercase=0, password_min_length=4)
        policy = PasswordPolicy.from_settings(config)
        assert policy.is_strong("abc1")
