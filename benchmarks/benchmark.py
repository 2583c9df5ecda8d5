#!/usr/bin/env python3
"""
BLAKE2s — Benchmark Suite

Compares the pure Python BLAKE2s engine against common hash algorithms:
  Cryptographic:     MD5, SHA-1, SHA-256, BLAKE2s (hashlib), BLAKE2b
  Non-cryptographic: xxHash64, xxHash128, MurmurHash3, CRC32

Optional extras: pip install .[bench]
"""

import hashlib
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from pyblake2s.blake2s import Blake2s, blake2s
from pyblake2s import blake2s_native


def bench(name, func, data, iterations):
    for _ in range(min(5, iterations)):
        func(data)

    start = time.perf_counter()
    for _ in range(iterations):
        func(data)
    elapsed = time.perf_counter() - start

    ms_per_iter = (elapsed / iterations) * 1000
    bytes_per_sec = len(data) / (elapsed / iterations) if elapsed > 0 else 0
    mb_per_sec = bytes_per_sec / (1024 * 1024)

    return {
        'name': name,
        'ms_per_iter': ms_per_iter,
        'mb_per_sec': mb_per_sec,
        'total_time': elapsed,
        'iterations': iterations,
    }


def hash_streamed(data, chunk=4096):
    h = Blake2s()
    for i in range(0, len(data), chunk):
        h.update(data[i:i + chunk])
    return h.digest()


def hash_md5(data): return hashlib.md5(data).digest()
def hash_sha1(data): return hashlib.sha1(data).digest()
def hash_sha256(data): return hashlib.sha256(data).digest()
def hash_blake2b(data): return hashlib.blake2b(data, digest_size=32).digest()

def hash_xxh64(data):
    import xxhash
    return xxhash.xxh64(data).digest()

def hash_xxh128(data):
    import xxhash
    return xxhash.xxh128(data).digest()

def hash_mmh3_128(data):
    import mmh3
    return mmh3.hash128(data).to_bytes(16, 'little')

def hash_crc32(data):
    import zlib
    return zlib.crc32(data).to_bytes(4, 'little')


def run_benchmark(data_size_bytes, iterations):
    data = os.urandom(data_size_bytes)
    size_label = format_size(data_size_bytes)

    print(f"\n{'='*82}")
    print(f"  Benchmark: {size_label} input | {iterations} iterations")
    print(f"{'='*82}")
    print(f"  {'Algorithm':<28} {'Output':>8} {'ms/iter':>10} {'MB/s':>12}")
    print(f"  {'-'*28} {'-'*8} {'-'*10} {'-'*12}")

    algorithms = [
        ('BLAKE2s (Python)', blake2s, 256),
        ('BLAKE2s (Python, 4K chunks)', hash_streamed, 256),
    ]
    if blake2s_native.is_using_native_backend():
        algorithms.append(('BLAKE2s (native)', blake2s_native.blake2s, 256))

    algorithms.append(('MD5', hash_md5, 128))
    algorithms.append(('SHA-1', hash_sha1, 160))
    algorithms.append(('SHA-256', hash_sha256, 256))
    algorithms.append(('BLAKE2b-256', hash_blake2b, 256))

    try:
        import xxhash
        algorithms.append(('xxHash64', hash_xxh64, 64))
        algorithms.append(('xxHash128', hash_xxh128, 128))
    except ImportError:
        pass

    try:
        import mmh3
        algorithms.append(('MurmurHash3-128', hash_mmh3_128, 128))
    except ImportError:
        pass

    algorithms.append(('CRC32', hash_crc32, 32))

    results = []
    for name, func, bits in algorithms:
        iters = max(1, iterations // 100) if 'Python' in name and data_size_bytes > 10000 else iterations
        r = bench(name, func, data, iters)
        r['bits'] = bits
        results.append(r)
        marker = '***' if 'BLAKE2s' in name else '   '
        print(f"  {marker} {name:<25} {bits:>5} bit {r['ms_per_iter']:>9.3f}ms {r['mb_per_sec']:>10.2f}")

    return results


def format_size(n):
    if n >= 1024 * 1024:
        return f"{n / (1024*1024):.0f} MB"
    elif n >= 1024:
        return f"{n / 1024:.0f} KB"
    else:
        return f"{n} B"


def print_ranking(all_results):
    print(f"\n{'='*82}")
    print("  RANKING (by throughput)")
    print(f"{'='*82}")

    for size_label, results in all_results:
        print(f"\n  [{size_label}]")
        sha256_tp = next((r['mb_per_sec'] for r in results if r['name'] == 'SHA-256'), 1)
        if sha256_tp == 0:
            sha256_tp = 1

        for r in sorted(results, key=lambda x: x['mb_per_sec'], reverse=True):
            ratio = r['mb_per_sec'] / sha256_tp
            bar = '#' * int(min(ratio * 12, 40))
            marker = ' **' if r['name'] == 'BLAKE2s (Python)' else '   '
            print(f"    {r['name']:<28} {r['mb_per_sec']:>8.2f} MB/s  {ratio:>7.4f}x  {bar}{marker}")


if __name__ == '__main__':
    print("=" * 82)
    print("  BLAKE2s — Performance Benchmark")
    print("=" * 82)

    if blake2s_native.is_using_native_backend():
        print("\n  [OK] native hashlib.blake2s backend available")
    else:
        print("\n  [WARN] native backend not available, pure Python only")

    all_results = []

    configs = [
        (64, 2000),
        (1024, 500),
        (65536, 200),
        (1048576, 100),
    ]

    for data_size, iters in configs:
        results = run_benchmark(data_size, iters)
        all_results.append((format_size(data_size), results))

    print_ranking(all_results)

    print(f"\n{'='*82}")
    print("  Benchmark complete.")
    print(f"{'='*82}")
