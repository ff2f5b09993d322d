from typing import Iterable, Optional

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def hex_digits(chars: Iterable[str]) -> str:
    """Keep only hex digits, dropping whitespace and anything else."""
    return "".join(c for c in chars if c in HEX_DIGITS)


def decode_pairs(digits: str) -> Optional[bytes]:
    '''
    "4142" -> b"AB". The first digit of each pair is the high nibble.
    Returns None for an odd number of digits.
    '''
    if len(digits) % 2:
        return None
    return bytes(int(digits[i:i+2], 16) for i in range(0, len(digits), 2))


def hex_dump(payload: bytes) -> str:
    return " ".join(f"{b:02x}" for b in payload)
