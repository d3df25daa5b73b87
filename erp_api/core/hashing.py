# erp_api/core/hashing.py

import bcrypt

from erp_api.core.config import settings


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    raw = password.encode("utf-8")[:72]
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")
