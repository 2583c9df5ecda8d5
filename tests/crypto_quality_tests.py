#!/usr/bin/env python3
"""
BLAKE2s — Cryptographic Quality Tests

Statistical checks on the pure Python engine:
  - Avalanche (SAC) with flip rate and per-bit bias
  - Short-input avalanche (1-15 bytes)
  - Key / salt / personalization sensitivity
  - Bit distribution
  - Collision search
  - Length sensitivity across block boundaries
  - Streaming split fuzzing
  - Determinism + cross-check against hashlib

Run manually: python tests/crypto_quality_tests.py
"""

import hashlib
import os
import random
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from pyblake2s.blake2s import Blake2s, blake2s, blake2s_hex


def bit_diff(a, b):
    diff = 0
    for x, y in zip(a, b):
        diff += bin(x ^ y).count('1')
    return diff


def flip_bit(data, bit_pos):
    modified = bytearray(data)
    modified[bit_pos // 8] ^= (1 << (bit_pos % 8))
    return bytes(modified)


print("=" * 70)
print("  BLAKE2s — Cryptographic Quality Tests")
print("=" * 70)

all_pass = True


# ============================================================
# Test 1: Avalanche (SAC)
# ============================================================
print("\n--- Test 1: Avalanche (Strict Avalanche Criterion) ---")
N_TRIALS = 50
INPUT_LEN = 16
rng = random.Random(42)

total_hd = 0
total_flips = 0
min_hd = 999
max_hd = 0
bit_flip_counts = [0] * 256

for _ in range(N_TRIALS):
    base = bytes(rng.getrandbits(8) for _ in range(INPUT_LEN))
    h_base = blake2s(base)

    for bit_pos in range(INPUT_LEN * 8):
        h_mod = blake2s(flip_bit(base, bit_pos))
        hd = bit_diff(h_base, h_mod)
        total_hd += hd
        total_flips += 1
        min_hd = min(min_hd, hd)
        max_hd = max(max_hd, hd)

        for ob in range(32):
            diff_byte = h_base[ob] ^ h_mod[ob]
            for obit in range(8):
                if diff_byte & (1 << obit):
                    bit_flip_counts[ob * 8 + obit] += 1

avg_hd = total_hd / total_flips
flip_rate = avg_hd / 256.0
deviation = abs(flip_rate - 0.5) * 100

max_bit_bias = 0
for count in bit_flip_counts:
    bias = abs(count / total_flips - 0.5) * 100
    max_bit_bias = max(max_bit_bias, bias)

print(f"  Trials: {N_TRIALS} x {INPUT_LEN*8} bits = {total_flips} flips")
print(f"  Avg Hamming Distance: {avg_hd:.2f} / 256 ({flip_rate:.4%})")
print(f"  Deviation from 50%:  {deviation:.3f}%")
print(f"  Min HD: {min_hd}, Max HD: {max_hd}")
print(f"  Max output-bit bias: {max_bit_bias:.2f}%")
ok = deviation < 1.0 and min_hd > 60 and max_hd < 200
print(f"  => {'PASS' if ok else 'FAIL'}")
if not ok:
    all_pass = False


# ============================================================
# Test 2: Short-input avalanche
# ============================================================
print("\n--- Test 2: Short-Input Avalanche (1-15 bytes) ---")
N_SHORT = 40
rng2 = random.Random(999)

print(f"  {'Length':>8} {'Avg HD':>8} {'Min HD':>8} {'Max HD':>8} {'Bias%':>8} {'Status':>8}")
short_ok = True
for length in range(1, 16):
    total = 0
    count = 0
    smin = 999
    smax = 0
    for _ in range(N_SHORT):
        base = bytes(rng2.getrandbits(8) for _ in range(length))
        h_base = blake2s(base)
        for bit_pos in range(length * 8):
            hd = bit_diff(h_base, blake2s(flip_bit(base, bit_pos)))
            total += hd
            count += 1
            smin = min(smin, hd)
            smax = max(smax, hd)
    avg = total / count
    bias = abs(avg / 256.0 - 0.5) * 100
    status = "OK" if bias < 2.0 and smin > 50 else "WARN"
    if status != "OK":
        short_ok = False
    print(f"  {length:>5} B  {avg:>7.2f}  {smin:>7}  {smax:>7}  {bias:>7.3f}  {status:>7}")

print(f"  => {'PASS' if short_ok else 'FAIL'}")
if not short_ok:
    all_pass = False


# ============================================================
# Test 3: Key / salt / personalization sensitivity
# ============================================================
print("\n--- Test 3: Key / Salt / Personalization Sensitivity ---")
N_PARAM = 20
rng3 = random.Random(314)

print(f"  {'Parameter':>12} {'Avg HD':>8} {'Min HD':>8} {'Status':>8}")
param_ok = True
for name, size in [('key', 32), ('salt', 8), ('person', 8)]:
    total = 0
    count = 0
    pmin = 999
    for _ in range(N_PARAM):
        msg = bytes(rng3.getrandbits(8) for _ in range(24))
        value = bytes(rng3.getrandbits(8) for _ in range(size))
        h_base = blake2s(msg, **{name: value})
        for bit_pos in range(size * 8):
            hd = bit_diff(h_base, blake2s(msg, **{name: flip_bit(value, bit_pos)}))
            total += hd
            count += 1
            pmin = min(pmin, hd)
    avg = total / count
    status = "OK" if abs(avg - 128) < 4 and pmin > 60 else "WARN"
    if status != "OK":
        param_ok = False
    print(f"  {name:>12} {avg:>8.2f} {pmin:>8} {status:>8}")

print(f"  => {'PASS' if param_ok else 'FAIL'}")
if not param_ok:
    all_pass = False


# ============================================================
# Test 4: Bit distribution
# ============================================================
print("\n--- Test 4: Bit Distribution ---")
N_DIST = 3000
bit_ones = [0] * 256
rng4 = random.Random(777)

for _ in range(N_DIST):
    h = blake2s(bytes(rng4.getrandbits(8) for _ in range(32)))
    for byte_idx in range(32):
        for bit_idx in range(8):
            if h[byte_idx] & (1 << bit_idx):
                bit_ones[byte_idx * 8 + bit_idx] += 1

max_bias = 0
avg_bias = 0
for count in bit_ones:
    bias = abs(count / N_DIST - 0.5) * 100
    max_bias = max(max_bias, bias)
    avg_bias += bias
avg_bias /= 256

print(f"  Samples: {N_DIST}")
print(f"  Max bit bias:  {max_bias:.2f}%")
print(f"  Avg bit bias:  {avg_bias:.2f}%")
ok = max_bias < 5.0
print(f"  => {'PASS' if ok else 'FAIL'}")
if not ok:
    all_pass = False


# ============================================================
# Test 5: Collision search
# ============================================================
print("\n--- Test 5: Collision Search ---")
N_COLL = 20000
hashes = {}
full_collisions = 0
near_collisions = 0
min_coll_hd = 999
rng5 = random.Random(555)

for i in range(N_COLL):
    data = bytes(rng5.getrandbits(8) for _ in range(16))
    h = blake2s(data)
    if h in hashes and hashes[h] != data:
        full_collisions += 1

    if i < 1000:
        for prev_h in list(hashes)[:100]:
            hd = bit_diff(h, prev_h)
            if hd < 16:
                near_collisions += 1
            min_coll_hd = min(min_coll_hd, hd)

    hashes[h] = data

print(f"  Trials: {N_COLL}")
print(f"  Full collisions: {full_collisions}")
print(f"  Near collisions (HD<16, sampled): {near_collisions}")
print(f"  Min Hamming distance (sampled): {min_coll_hd}")
ok = full_collisions == 0 and near_collisions == 0
print(f"  => {'PASS' if ok else 'FAIL'}")
if not ok:
    all_pass = False


# ============================================================
# Test 6: Length sensitivity across block boundaries
# ============================================================
print("\n--- Test 6: Length Sensitivity ---")
N_LEN = 200
rng6 = random.Random(333)
pairs = [(0, 1), (31, 32), (63, 64), (64, 65), (127, 128), (128, 129)]

print(f"  {'Pair':>12} {'Avg HD':>8} {'Min HD':>8} {'Status':>8}")
len_ok = True
for l1, l2 in pairs:
    total = 0
    lmin = 999
    for _ in range(N_LEN):
        data = bytes(rng6.getrandbits(8) for _ in range(l2))
        hd = bit_diff(blake2s(data[:l1]), blake2s(data[:l2]))
        total += hd
        lmin = min(lmin, hd)
    avg = total / N_LEN
    status = "OK" if abs(avg - 128) < 8 and lmin > 60 else "WARN"
    if status != "OK":
        len_ok = False
    print(f"  {l1:>4}B vs {l2:>3}B  {avg:>7.2f}  {lmin:>7}  {status:>7}")

print(f"  => {'PASS' if len_ok else 'FAIL'}")
if not len_ok:
    all_pass = False


# ============================================================
# Test 7: Streaming split fuzzing
# ============================================================
print("\n--- Test 7: Streaming Split Fuzzing ---")
N_SPLIT = 300
rng7 = random.Random(2024)
mismatches = 0

for _ in range(N_SPLIT):
    data = bytes(rng7.getrandbits(8) for _ in range(rng7.randint(0, 300)))
    key = bytes(rng7.getrandbits(8) for _ in range(rng7.choice([0, 1, 16, 32])))
    size = rng7.randint(1, 32)
    expected = blake2s(data, key=key, digest_size=size)
    h = Blake2s(key=key, digest_size=size)
    pos = 0
    while pos < len(data):
        step = rng7.choice([0, 1, 7, 63, 64, 65, 128])
        h.update(data[pos:pos + step])
        pos += step
        if rng7.random() < 0.1:
            h.digest()
    if h.digest() != expected:
        mismatches += 1

print(f"  Trials: {N_SPLIT}")
print(f"  Mismatches: {mismatches}")
ok = mismatches == 0
print(f"  => {'PASS' if ok else 'FAIL'}")
if not ok:
    all_pass = False


# ============================================================
# Test 8: Determinism + hashlib cross-check
# ============================================================
print("\n--- Test 8: Determinism + Reference Cross-Check ---")
vectors = [
    (b'', {}),
    (b'a', {}),
    (b'abc', {}),
    (b'Hello, BLAKE2s!', {'digest_size': 16}),
    (b'SECRET', {'key': b'k' * 32}),
    (b'\x00' * 63, {'salt': b'saltsalt'}),
    (b'\x00' * 64, {'person': b'personal'}),
    (b'\x00' * 65, {'key': b'key', 'salt': b'salt', 'person': b'me', 'digest_size': 20}),
]

vec_ok = True
all_hashes = set()
have_ref = hasattr(hashlib, 'blake2s')
for data, params in vectors:
    h1 = blake2s_hex(data, **params)
    h2 = blake2s_hex(data, **params)
    determ = h1 == h2
    correct = not have_ref or h1 == hashlib.blake2s(data, **params).hexdigest()
    all_hashes.add(h1)
    label = repr(data) if len(data) < 20 else repr(data[:10]) + "..."
    status = "PASS" if determ and correct else "FAIL"
    if status == "FAIL":
        vec_ok = False
    print(f"  [{status}] {label} {params or ''}: {h1[:32]}...")

unique = len(all_hashes) == len(vectors)
if not unique:
    vec_ok = False
if not have_ref:
    print("  [SKIP] hashlib.blake2s not available, determinism only")
print(f"  All {len(vectors)} vectors unique: {unique}")
print(f"  => {'PASS' if vec_ok else 'FAIL'}")
if not vec_ok:
    all_pass = False


# ============================================================
# Summary
# ============================================================
print("\n" + "=" * 70)
if all_pass:
    print("  RESULT: ALL TESTS PASSED")
else:
    print("  RESULT: SOME TESTS FAILED")
print("=" * 70)
sys.exit(0 if all_pass else 1)
