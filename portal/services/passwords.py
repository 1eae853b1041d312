from __future__ import annotations

from passlib.context import CryptContext

# New hashes use pbkdf2_sha256. bcrypt hashes ($2a$/$2b$) written by the
# earlier admin tooling still verify and are flagged for rehash.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])

HASH_PREFIXES = ("$pbkdf2-sha256$", "$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False


def needs_rehash(password_hash: str) -> bool:
    try:
        return _pwd_context.needs_update(password_hash)
    except (ValueError, TypeError):
        return False


def looks_hashed(password: str) -> bool:
    return password.startswith(HASH_PREFIXES)
