"""Password hashing.

Passwords are derived with scrypt (memory-hard, per-hash random salt) through
passlib. ``verify_password`` recomputes the derivation with the stored salt and
compares digests in constant time.
"""

from passlib.context import CryptContext

password_context = CryptContext(schemes=["scrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return password_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check ``password`` against a stored hash.

    A missing hash still spends the time of a real verification so that unknown
    usernames and wrong passwords cannot be told apart by response time.
    """
    if not password_hash:
        password_context.dummy_verify()
        return False
    try:
        return password_context.verify(password, password_hash)
    except ValueError:
        # Stored value is not a recognised hash
        return False
