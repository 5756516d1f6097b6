"""Content digests used as chunk keys."""

import hashlib
from typing import Union


def digest_key(data: Union[bytes, bytearray, memoryview]) -> str:
    """
    Hex-encoded 128-bit MD5 digest of ``data``.

    Identical bytes always produce identical keys, which is what downstream
    deduplication relies on. MD5 is used for addressing, not for security.
    """
    return hashlib.md5(data).hexdigest()
