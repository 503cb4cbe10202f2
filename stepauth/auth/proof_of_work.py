"""Leading-zero-bit difficulty over SHA-512, used as an anti-automation proof.

A client searches for a string whose hash starts with at least N zero bits.
Each extra bit doubles the expected number of attempts.
"""
import hashlib

from stepauth.core.config import HASHING_SPEED


def hash(data: str) -> bytes:
    return hashlib.sha512(data.encode("utf-8", "surrogatepass")).digest()


def leading_zero_bits(digest: bytes) -> int:
    """Count zero bits from the most significant bit of the first byte onward."""
    count = 0
    for byte in digest:
        if byte == 0:
            count += 8
            continue
        mask = 0x80
        while not byte & mask:
            count += 1
            mask >>= 1
        break
    return count


def difficulty(data: str) -> int:
    return leading_zero_bits(hash(data))


def check(data: str, required: int) -> bool:
    """True if the first ``required`` bits of the hash are all zero."""
    if required <= 0:
        return True
    digest = hash(data)
    if required > len(digest) * 8:
        return False
    for i in range(required):
        if digest[i >> 3] & (1 << (7 - (i & 0b111))):
            return False
    return True


def estimate_work(difficulty: int) -> int:
    return 2 ** difficulty


def estimate_seconds(difficulty: int, hashing_speed: int = HASHING_SPEED) -> float:
    return estimate_work(difficulty) / hashing_speed
