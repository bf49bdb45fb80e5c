"""Password Hashing — bcrypt via passlib, run off the event loop.

Invariants:
    - Only bcrypt hashes are ever stored
    - verify_password never raises on a malformed stored hash: it reports a mismatch

Design Decisions:
    - bcrypt work is CPU-bound: async wrappers push it to the threadpool so
      concurrent requests keep flowing during login/registration
"""

import logging

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return str(pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except (ValueError, TypeError) as e:
        logger.warning(f"Stored password hash could not be verified: {e}")
        return False


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)
