"""Password Hashing — the transform stored member hashes were produced with.

Invariants:
    - hash() is deterministic: same input, same lowercase hex digest
    - Input encoded as UTF-8

Design Decisions:
    - MD5 hex digest: matches the hashes already stored for existing members;
      swapping algorithms needs a rehash-on-login migration first
"""

import hashlib


class Md5PasswordHasher:
    """PasswordHasher producing lowercase MD5 hex digests."""

    def hash(self, raw_password: str) -> str:
        return hashlib.md5(raw_password.encode("utf-8")).hexdigest()
