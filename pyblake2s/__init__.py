"""
BLAKE2s — Python Implementation

Two implementations available:
- blake2s.py         — Pure Python (zero dependencies)
- blake2s_native.py  — Native-backend wrapper (hashlib's C code, pure Python fallback)

Usage:
    # Pure Python
    from pyblake2s.blake2s import blake2s, blake2s_hex, Blake2s

    # Native backend (faster)
    from pyblake2s.blake2s_native import blake2s, blake2s_hex

    digest = blake2s(b"Hello")                  # 32 bytes
    hex_str = blake2s_hex(b"Hello", key=b"k")   # hex string

    h = Blake2s(digest_size=16, salt=b"salt", person=b"me")
    h.update(b"Hel")
    h.update(b"lo")
    h.hexdigest()                               # 32 hex characters
"""

from .blake2s import Blake2s, ParameterError, blake2s, blake2s_hex, new

__all__ = ['Blake2s', 'ParameterError', 'blake2s', 'blake2s_hex', 'new']
__version__ = '1.0.0'
