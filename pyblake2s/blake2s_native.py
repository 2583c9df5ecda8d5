"""
BLAKE2s — Native Backend Wrapper

This module dispatches to the interpreter's C implementation of BLAKE2s
(hashlib.blake2s) for maximum performance. Falls back to pure Python if the
native implementation is unavailable (e.g. restricted or FIPS-only builds).

Usage:
    from pyblake2s.blake2s_native import blake2s, blake2s_hex

    digest = blake2s(b"Hello, World!")            # 32 bytes
    hex_str = blake2s_hex(b"Hello", key=b"k")     # hex string

Configuration:
    PYBLAKE2S_PURE=1   force the pure Python engine
"""

import hashlib
import logging
import os

from .blake2s import MAX_DIGEST_SIZE, _validate_params

logger = logging.getLogger(__name__)

_backend = None
_use_pure_python = False


def _load_backend():
    """Locate the native BLAKE2s constructor."""
    global _backend, _use_pure_python

    if _backend is not None or _use_pure_python:
        return _backend

    if os.environ.get('PYBLAKE2S_PURE', '').strip().lower() in ('1', 'true', 'yes'):
        logger.debug("PYBLAKE2S_PURE set, using pure Python engine")
        _use_pure_python = True
        return None

    ctor = getattr(hashlib, 'blake2s', None)
    if ctor is not None:
        try:
            ctor(b'')
        except ValueError as e:
            logger.debug("hashlib.blake2s unusable: %s", e)
        else:
            logger.debug("using native hashlib.blake2s backend")
            _backend = ctor
            return _backend

    logger.debug("native BLAKE2s unavailable, using pure Python engine")
    _use_pure_python = True
    return None


def new(data=b'', *, digest_size=MAX_DIGEST_SIZE, key=b'', salt=b'', person=b''):
    """
    Create a BLAKE2s hash object.

    Parameters are validated by the pure Python engine first, so both
    backends raise the same ParameterError and accept digest_size=0
    as the default of 32.

    Returns:
        An object with update(), digest(), hexdigest() and copy()
    """
    digest_size, key, salt, person = _validate_params(digest_size, key, salt, person)
    ctor = _load_backend()

    if _use_pure_python:
        from .blake2s import Blake2s
        return Blake2s(data, digest_size=digest_size, key=key, salt=salt, person=person)

    h = ctor(digest_size=digest_size, key=key, salt=salt, person=person)
    if data:
        h.update(data.encode('utf-8') if isinstance(data, str) else data)
    return h


def blake2s(data: bytes = b'', **params) -> bytes:
    """
    Compute BLAKE2s of the given input data.

    Uses the native implementation when available.

    Args:
        data: Input bytes to hash
        **params: digest_size, key, salt, person

    Returns:
        digest_size bytes (32 by default)
    """
    return new(data, **params).digest()


def blake2s_hex(data: bytes = b'', **params) -> str:
    """
    Compute BLAKE2s and return as hexadecimal string.

    Args:
        data: Input bytes to hash
        **params: digest_size, key, salt, person

    Returns:
        Lowercase hex string of 2 * digest_size characters
    """
    return new(data, **params).hexdigest()


def is_using_native_backend() -> bool:
    """Check if the native implementation is being used."""
    _load_backend()
    return not _use_pure_python


def _reset_backend():
    """Forget the cached backend so the next call re-detects it."""
    global _backend, _use_pure_python
    _backend = None
    _use_pure_python = False


if __name__ == '__main__':
    import sys

    print(f"Using native backend: {is_using_native_backend()}")

    if len(sys.argv) > 1:
        data = sys.argv[1].encode('utf-8')
    else:
        data = b''

    print(f"Input: {repr(data)}")
    print(f"Hash:  {blake2s_hex(data)}")
