"""
BLAKE2s — Pure Python Reference Implementation (RFC 7693)

This is the pure Python implementation with zero external dependencies.
For maximum performance, use the native-backend version (blake2s_native.py).

Features:
  K1: Keyed hashing (MAC mode), keys up to 32 bytes
  K2: Salt (up to 8 bytes) and personalization (up to 8 bytes)
  K3: Variable digest size, 1-32 bytes (0 selects the default of 32)
  K4: Streaming updates with arbitrary chunk sizes
  K5: Non-destructive digest reads (finalization runs on a copy)

Limits:
  Message length must stay below 2**64 bytes (width of the byte counter).
  Sequential mode only; fanout and depth are fixed at 1.
"""

import argparse
import logging
import struct
import sys

logger = logging.getLogger(__name__)

MASK32 = 0xFFFFFFFF

BLOCK_SIZE = 64
ROUNDS = 10
MAX_DIGEST_SIZE = 32
MAX_KEY_SIZE = 32
SALT_SIZE = 8
PERSON_SIZE = 8

# G rotation constants
R1, R2, R3, R4 = 16, 12, 8, 7

# Same IV as SHA-256 (fractional parts of the square roots of the first 8 primes)
IV = [
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
]

# Message schedule, one permutation of 0..15 per round
SIGMA = [
    [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15],
    [14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3],
    [11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4],
    [7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8],
    [9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13],
    [2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9],
    [12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11],
    [13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10],
    [6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5],
    [10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0],
]

_16I_UNPACK = struct.Struct('<16I').unpack
_8I_PACK = struct.Struct('<8I').pack
_PARAM_STRUCT = struct.Struct('<I12x8s8s32x')


class ParameterError(ValueError):
    """Raised when a key, salt, personalization or digest size is out of range."""


def _as_bytes(data, what='data'):
    if isinstance(data, str):
        return data.encode('utf-8')
    if isinstance(data, bytes):
        return data
    try:
        return memoryview(data).tobytes()
    except TypeError:
        raise TypeError(
            f"{what} must be a bytes-like object or str, not {type(data).__name__}"
        ) from None


def _validate_params(digest_size, key, salt, person):
    """Normalize hashing parameters and enforce the size limits.

    Returns ``(digest_size, key, salt, person)`` with the byte parameters
    converted to ``bytes`` and a zero/None digest size replaced by 32.
    """
    key = _as_bytes(key, 'key')
    salt = _as_bytes(salt, 'salt')
    person = _as_bytes(person, 'person')

    if not digest_size:
        digest_size = MAX_DIGEST_SIZE
    if not 1 <= digest_size <= MAX_DIGEST_SIZE:
        raise ParameterError(f"digest_size must be between 1 and {MAX_DIGEST_SIZE} bytes")
    if len(key) > MAX_KEY_SIZE:
        raise ParameterError(f"key size exceeds maximum {MAX_KEY_SIZE} bytes")
    if len(salt) > SALT_SIZE:
        raise ParameterError(f"salt size exceeds maximum {SALT_SIZE} bytes")
    if len(person) > PERSON_SIZE:
        raise ParameterError(f"personalization size exceeds maximum {PERSON_SIZE} bytes")

    return digest_size, key, salt, person


def _parameter_block(digest_size, key_len, salt=b'', person=b''):
    """Build the 64-byte parameter block as 16 little-endian words.

    Word 0 packs digest length, key length, fanout and depth (both 1).
    Words 4-5 carry the salt and words 6-7 the personalization, each
    left-aligned and zero-padded. Everything else is zero in sequential mode.
    """
    if not 1 <= digest_size <= MAX_DIGEST_SIZE:
        raise ParameterError(f"digest_size must be between 1 and {MAX_DIGEST_SIZE} bytes")
    if not 0 <= key_len <= MAX_KEY_SIZE:
        raise ParameterError(f"key size exceeds maximum {MAX_KEY_SIZE} bytes")
    if len(salt) > SALT_SIZE:
        raise ParameterError(f"salt size exceeds maximum {SALT_SIZE} bytes")
    if len(person) > PERSON_SIZE:
        raise ParameterError(f"personalization size exceeds maximum {PERSON_SIZE} bytes")

    word0 = digest_size | (key_len << 8) | (1 << 16) | (1 << 24)
    # struct pads the 8s fields with zero bytes
    return list(_16I_UNPACK(_PARAM_STRUCT.pack(word0, salt, person)))


def _g(v, a, b, c, d, x, y):
    """Mix four words of the working vector with two message words."""
    va = v[a]
    vb = v[b]
    vc = v[c]
    vd = v[d]

    va = (va + vb + x) & MASK32
    vd ^= va
    vd = (vd >> R1) | ((vd << (32 - R1)) & MASK32)
    vc = (vc + vd) & MASK32
    vb ^= vc
    vb = (vb >> R2) | ((vb << (32 - R2)) & MASK32)
    va = (va + vb + y) & MASK32
    vd ^= va
    vd = (vd >> R3) | ((vd << (32 - R3)) & MASK32)
    vc = (vc + vd) & MASK32
    vb ^= vc
    vb = (vb >> R4) | ((vb << (32 - R4)) & MASK32)

    v[a] = va
    v[b] = vb
    v[c] = vc
    v[d] = vd


def _compress(h, block, t0, t1, last=False):
    """Run the compression function over one 64-byte block.

    ``h`` is the 8-word chaining state and is updated in place. ``t0``/``t1``
    are the low and high words of the byte counter, and ``last`` marks the
    final block.
    """
    m = _16I_UNPACK(block)
    g = _g

    v = h[:8] + IV
    v[12] ^= t0
    v[13] ^= t1
    if last:
        v[14] ^= MASK32

    for s in SIGMA:
        # Columns
        g(v, 0, 4, 8, 12, m[s[0]], m[s[1]])
        g(v, 1, 5, 9, 13, m[s[2]], m[s[3]])
        g(v, 2, 6, 10, 14, m[s[4]], m[s[5]])
        g(v, 3, 7, 11, 15, m[s[6]], m[s[7]])
        # Diagonals
        g(v, 0, 5, 10, 15, m[s[8]], m[s[9]])
        g(v, 1, 6, 11, 12, m[s[10]], m[s[11]])
        g(v, 2, 7, 8, 13, m[s[12]], m[s[13]])
        g(v, 3, 4, 9, 14, m[s[14]], m[s[15]])

    for i in range(8):
        h[i] ^= v[i] ^ v[i + 8]


class Blake2s:
    """Incremental BLAKE2s hash object with a hashlib-style interface.

    >>> Blake2s(b'abc').hexdigest()[:16]
    '508c5e8c327c14e2'
    """

    name = 'blake2s'
    block_size = BLOCK_SIZE

    def __init__(self, data=b'', *, digest_size=MAX_DIGEST_SIZE, key=b'', salt=b'', person=b''):
        digest_size, key, salt, person = _validate_params(digest_size, key, salt, person)
        self._digest_size = digest_size

        p = _parameter_block(digest_size, len(key), salt, person)
        self._h = [IV[i] ^ p[i] for i in range(8)]
        self._t = [0, 0]
        self._buf = bytearray(BLOCK_SIZE)
        self._buflen = 0

        if key:
            self.update(key.ljust(BLOCK_SIZE, b'\x00'))
        if data:
            self.update(data)

    @property
    def digest_size(self):
        return self._digest_size

    def _increment_counter(self, n):
        t0 = (self._t[0] + n) & MASK32
        self._t[0] = t0
        if t0 < n:
            self._t[1] = (self._t[1] + 1) & MASK32

    def update(self, data):
        """Absorb more input. May be called any number of times."""
        data = memoryview(_as_bytes(data))
        n = len(data)
        pos = 0
        buf = self._buf

        while pos < n:
            # A full block is only compressed once more input arrives, so the
            # last block is always left for _finalize.
            if self._buflen == BLOCK_SIZE:
                self._increment_counter(BLOCK_SIZE)
                _compress(self._h, buf, self._t[0], self._t[1])
                self._buflen = 0

            take = min(BLOCK_SIZE - self._buflen, n - pos)
            buf[self._buflen:self._buflen + take] = data[pos:pos + take]
            self._buflen += take
            pos += take

    def copy(self):
        """Return an independent clone of the current hash state."""
        other = self.__class__.__new__(self.__class__)
        other._digest_size = self._digest_size
        other._h = list(self._h)
        other._t = list(self._t)
        other._buf = bytearray(self._buf)
        other._buflen = self._buflen
        return other

    def _finalize(self):
        self._increment_counter(self._buflen)
        self._buf[self._buflen:] = bytes(BLOCK_SIZE - self._buflen)
        _compress(self._h, self._buf, self._t[0], self._t[1], last=True)
        return _8I_PACK(*self._h)[:self._digest_size]

    def digest(self):
        """Return the digest of the data absorbed so far. Does not alter the state."""
        return self.copy()._finalize()

    def hexdigest(self):
        """Return the digest as a lowercase hex string of length 2 * digest_size."""
        return self.digest().hex()

    def __repr__(self):
        return f"<{self.name} hash object, digest_size={self._digest_size}>"


def blake2s(data: bytes = b'', *, digest_size=MAX_DIGEST_SIZE, key=b'', salt=b'', person=b'') -> bytes:
    """Compute BLAKE2s of the given input. Returns digest_size bytes."""
    return Blake2s(data, digest_size=digest_size, key=key, salt=salt, person=person).digest()


def blake2s_hex(data: bytes = b'', *, digest_size=MAX_DIGEST_SIZE, key=b'', salt=b'', person=b'') -> str:
    """Return hex string representation of BLAKE2s."""
    return blake2s(data, digest_size=digest_size, key=key, salt=salt, person=person).hex()


# hashlib-style constructor alias
new = Blake2s


# (description, message, continuation, expected after message, expected after continuation)
SELF_TEST_VECTORS = [
    ('empty string', b'', None,
     '69217a3079908094e11121d042354a7c1f55b6482ca1a51e1b250dfd1ed0eef9', None),
    ('"abc"', b'abc', None,
     '508c5e8c327c14e2e1a72ba34eeb452f37458b209ed63a294d999b4c86675982', None),
    ('streamed message', b'your-message', b'more-of-your-message',
     'f8e9011b75e46cd58ab6ea75764c22e88825b7b7ef9f914109b40048a8494c99',
     'b1072b76c963331b2f610c255bde6e4b0b90a0cb6db5f6114742f724d344e3c3'),
]


def self_test(out=None) -> bool:
    """Check the built-in known-answer vectors, printing one line per check."""
    out = out or sys.stdout
    ok = True
    for desc, message, more, expected, expected_more in SELF_TEST_VECTORS:
        h = Blake2s(message)
        checks = [(desc, h.hexdigest(), expected)]
        if more is not None:
            h.update(more)
            checks.append((desc + ' (continued)', h.hexdigest(), expected_more))
        for label, got, want in checks:
            if got == want:
                print(f"  [PASS] {label}", file=out)
            else:
                print(f"  [FAIL] {label} -- expected {want}, got {got}", file=out)
                ok = False
    return ok


def _bytes_arg(value: str) -> bytes:
    """Parse 'hex:<digits>' or a UTF-8 literal into bytes."""
    if value.startswith('hex:'):
        try:
            return bytes.fromhex(value[4:])
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid hex value: {value[4:]!r}") from None
    return value.encode('utf-8')


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog='pyblake2s',
        description='Compute BLAKE2s digests (RFC 7693) with the pure Python engine.',
    )
    ap.add_argument('message', nargs='?', help='message to hash (default: read stdin)')
    ap.add_argument('--file', '-f', help='hash the contents of this file')
    ap.add_argument('--key', type=_bytes_arg, default=b'', help='secret key, up to 32 bytes')
    ap.add_argument('--salt', type=_bytes_arg, default=b'', help='salt, up to 8 bytes')
    ap.add_argument('--person', type=_bytes_arg, default=b'', help='personalization, up to 8 bytes')
    ap.add_argument('--digest-size', type=int, default=MAX_DIGEST_SIZE,
                    help='digest length in bytes, 1-32 (default: 32)')
    ap.add_argument('--selftest', action='store_true', help='run the known-answer self test')
    ap.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return ap


def _hash_stream(h, stream, chunk_size=65536):
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        h.update(chunk)


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.selftest:
        ok = self_test()
        print(f"Self test: {'PASS' if ok else 'FAIL'}")
        return 0 if ok else 1

    try:
        h = Blake2s(digest_size=args.digest_size, key=args.key,
                    salt=args.salt, person=args.person)
        if args.file:
            logger.debug("hashing file %s", args.file)
            with open(args.file, 'rb') as f:
                _hash_stream(h, f)
            print(f"{h.hexdigest()}  {args.file}")
        elif args.message is not None:
            h.update(args.message)
            print(h.hexdigest())
        else:
            logger.debug("hashing standard input")
            _hash_stream(h, sys.stdin.buffer)
            print(h.hexdigest())
    except (ParameterError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
