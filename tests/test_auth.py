import hashlib

import bcrypt
import pytest

from syncpos.utils.auth import hash_password, needs_rehash, verify_password

# fastest cost the policy accepts
FAST = 10


def _pbkdf2(password: str, iters: int = 1000) -> str:
    salt = bytes.fromhex("00112233445566778899aabbccddeeff")
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iters)
    return f"pbkdf2_sha256${iters}${salt.hex()}${dk.hex()}"


def test_hash_and_verify():
    digest = hash_password("correct horse", rounds=FAST)
    assert digest.startswith("$2b$10$")
    assert verify_password("correct horse", digest)
    assert not verify_password("wrong horse", digest)


def test_hashes_are_salted():
    assert hash_password("same", rounds=FAST) != hash_password("same", rounds=FAST)


def test_rounds_are_clamped_to_policy_minimum():
    assert hash_password("pw", rounds=4).startswith("$2b$10$")


@pytest.mark.parametrize("bad", [None, 123, b"bytes"])
def test_hash_rejects_non_text(bad):
    with pytest.raises(ValueError):
        hash_password(bad)


def test_empty_password_hashes_and_verifies():
    digest = hash_password("", rounds=FAST)
    assert verify_password("", digest)
    assert not verify_password(" ", digest)


def test_long_password_uses_first_72_bytes():
    long_pw = "x" * 100
    digest = hash_password(long_pw, rounds=FAST)
    assert verify_password(long_pw, digest)
    # same first 72 bytes, so bcrypt cannot tell them apart
    assert verify_password("x" * 72 + "different tail", digest)
    assert not verify_password("x" * 71, digest)


def test_long_digest_from_truncating_client_verifies():
    # a client that cut the input itself before hashing
    long_pw = "ü" * 50  # 100 UTF-8 bytes
    digest = bcrypt.hashpw(long_pw.encode("utf-8")[:72], bcrypt.gensalt(FAST)).decode("utf-8")
    assert verify_password(long_pw, digest)


def test_verify_never_raises_on_bad_input():
    digest = hash_password("pw", rounds=FAST)
    assert verify_password(None, digest) is False
    assert verify_password("pw", None) is False
    assert verify_password("pw", "") is False
    assert verify_password("pw", "plaintext") is False
    assert verify_password("pw", "$2b$10$tooshort") is False
    assert verify_password("pw", "pbkdf2_sha256$notanumber$zz$zz") is False
    assert verify_password(123, digest) is False
    # iteration count too large for a C long
    assert verify_password("pw", "pbkdf2_sha256$99999999999999999999999$00$00") is False
    # above the accepted work bound, rejected without hashing
    assert verify_password("pw", _pbkdf2("pw", iters=1000).replace("$1000$", "$50000000$")) is False
    assert verify_password("pw", "pbkdf2_sha256$0$00$00") is False


def test_verify_accepts_bytes_digest():
    digest = hash_password("pw", rounds=FAST)
    assert verify_password("pw", digest.encode("utf-8"))


def test_verify_accepts_2a_prefix():
    digest = bcrypt.hashpw(b"pw", bcrypt.gensalt(FAST, prefix=b"2a")).decode("utf-8")
    assert verify_password("pw", digest)


def test_legacy_pbkdf2_digest():
    legacy = _pbkdf2("old-secret")
    assert verify_password("old-secret", legacy)
    assert not verify_password("other", legacy)


def test_needs_rehash_policy():
    assert needs_rehash(_pbkdf2("pw"))
    assert needs_rehash(None)
    assert needs_rehash("md5$whatever")
    assert not needs_rehash(hash_password("pw", rounds=FAST))
    assert not needs_rehash(hash_password("pw", rounds=FAST), min_rounds=FAST)
    assert needs_rehash(hash_password("pw", rounds=FAST), min_rounds=12)
