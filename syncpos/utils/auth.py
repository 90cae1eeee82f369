# syncpos/utils/auth.py
from __future__ import annotations

import hashlib
import hmac
from typing import Optional, Union

import bcrypt

# ---- bcrypt policy ----
_BCRYPT_DEFAULT_ROUNDS = 12          # used when hashing
_BCRYPT_MIN_ACCEPTABLE_ROUNDS = 10   # never hash below this; rehash if stored lower
_BCRYPT_MAX_ROUNDS = 31
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
_BCRYPT_MAX_PASSWORD_BYTES = 72  # bcrypt only reads this many; longer input is cut

# ---- PBKDF2 (digests written by older installs; verify only) ----
_PBKDF2_PREFIX = "pbkdf2_sha256$"
_PBKDF2_MAX_ITERATIONS = 10_000_000


# --------------------------- helpers ---------------------------

def _as_text(digest: Union[str, bytes, None]) -> Optional[str]:
    if digest is None:
        return None
    if isinstance(digest, bytes):
        try:
            digest = digest.decode("utf-8")
        except UnicodeDecodeError:
            return None
    digest = digest.strip()
    return digest or None


def _clamp_rounds(rounds: int) -> int:
    return max(_BCRYPT_MIN_ACCEPTABLE_ROUNDS, min(int(rounds), _BCRYPT_MAX_ROUNDS))


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_PASSWORD_BYTES]


def _verify_pbkdf2(password: str, encoded: str) -> bool:
    # expected format: pbkdf2_sha256$<iters>$<salt_hex>$<digest_hex>
    try:
        iters_str, salt_hex, dk_hex = encoded[len(_PBKDF2_PREFIX):].split("$", 2)
        iters = int(iters_str)
        if not 0 < iters <= _PBKDF2_MAX_ITERATIONS:
            return False
        got = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), bytes.fromhex(salt_hex), iters
        )
        return hmac.compare_digest(got, bytes.fromhex(dk_hex))
    except (ValueError, OverflowError):
        return False


def _verify_bcrypt(password: str, encoded: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), encoded.encode("utf-8"))
    except ValueError:
        # malformed salt / digest
        return False


def _parse_bcrypt_cost(digest: str) -> Optional[int]:
    # '$2b$12$...' -> ['', '2b', '12', '...']
    parts = digest.split("$")
    if len(parts) < 4:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


# ------------------------------- Public API -------------------------------

def hash_password(password: str, *, rounds: int = _BCRYPT_DEFAULT_ROUNDS) -> str:
    """
    One-way salted hash of `password`.

    The result is a self-describing bcrypt string ($2b$<cost>$<salt><digest>),
    so no separate salt column is needed. `rounds` is the log2 work factor;
    values below the policy minimum are raised to it. Any string is accepted,
    including "". Only the first 72 UTF-8 bytes take part, as with jBCrypt.
    """
    if not isinstance(password, str):
        raise ValueError("Password must be a string")
    salt = bcrypt.gensalt(_clamp_rounds(rounds))
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: Optional[str], stored_hash: Union[str, bytes, None]) -> bool:
    """
    True iff `password` matches `stored_hash`. Never raises.

    Accepts bcrypt ($2a$/$2b$/$2y$) and legacy 'pbkdf2_sha256$...' digests;
    None on either side, unknown schemes and malformed digests give False.
    """
    if not isinstance(password, str):
        return False
    digest = _as_text(stored_hash)
    if digest is None:
        return False

    if digest.startswith(_BCRYPT_PREFIXES):
        return _verify_bcrypt(password, digest)
    if digest.startswith(_PBKDF2_PREFIX):
        return _verify_pbkdf2(password, digest)
    return False


def needs_rehash(
    stored_hash: Union[str, bytes, None],
    *,
    min_rounds: int = _BCRYPT_MIN_ACCEPTABLE_ROUNDS,
) -> bool:
    """
    Policy hook: True if the stored digest should be replaced on next login.

    - PBKDF2 digests always migrate to bcrypt.
    - bcrypt digests below `min_rounds` are upgraded.
    - Unknown or malformed digests are flagged.
    """
    digest = _as_text(stored_hash)
    if digest is None:
        return True
    if digest.startswith(_BCRYPT_PREFIXES):
        cost = _parse_bcrypt_cost(digest)
        return cost is None or cost < min_rounds
    return True
