"""Public keys, base58 text form and program-derived addresses."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Iterable, Union

PUBKEY_BYTES = 32
MAX_SEED_LEN = 32
MAX_SEEDS = 16
PDA_MARKER = b"ProgramDerivedAddress"

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {char: value for value, char in enumerate(_ALPHABET)}

_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


class PubkeyError(Exception):
    """Address derivation failed."""


def b58encode(data: bytes) -> str:
    """Encode bytes as base58 text."""
    data = bytes(data)
    stripped = data.lstrip(b"\0")
    number = int.from_bytes(stripped, "big")
    digits = []
    while number:
        number, rem = divmod(number, 58)
        digits.append(_ALPHABET[rem])
    return "1" * (len(data) - len(stripped)) + "".join(reversed(digits))


def b58decode(text: str) -> bytes:
    """Decode base58 text into bytes."""
    number = 0
    for char in text:
        try:
            number = number * 58 + _INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    zeros = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    return b"\0" * zeros + body


@dataclass(frozen=True, order=True, repr=False)
class Pubkey:
    """A 32-byte account address."""

    raw: bytes

    def __post_init__(self) -> None:
        if isinstance(self.raw, (bytearray, memoryview)):
            object.__setattr__(self, "raw", bytes(self.raw))
        if not isinstance(self.raw, bytes) or len(self.raw) != PUBKEY_BYTES:
            raise ValueError(f"a public key is exactly {PUBKEY_BYTES} bytes")

    @classmethod
    def from_base58(cls, text: str) -> "Pubkey":
        """Parse the base58 text form of a key."""
        return cls(b58decode(text))

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return b58encode(self.raw)

    def __repr__(self) -> str:
        return f"Pubkey({self})"


Seed = Union[bytes, bytearray, memoryview, Pubkey]


def is_on_curve(data: bytes) -> bool:
    """Return whether ``data`` decompresses to an ed25519 curve point."""
    data = bytes(data)
    if len(data) != PUBKEY_BYTES:
        return False
    y = int.from_bytes(data, "little") & ((1 << 255) - 1)
    y %= _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    x2 = u * pow(v, _P - 2, _P) % _P
    return x2 == 0 or pow(x2, (_P - 1) // 2, _P) == 1


def _seed_bytes(seed: Seed) -> bytes:
    if isinstance(seed, (int, str)):
        raise TypeError("seeds must be bytes or public keys")
    return bytes(seed)


def create_program_address(seeds: Iterable[Seed], program_id: Pubkey) -> Pubkey:
    """Derive the address for ``seeds`` under ``program_id``; it must be off the curve."""
    parts = [_seed_bytes(seed) for seed in seeds]
    if len(parts) > MAX_SEEDS or any(len(part) > MAX_SEED_LEN for part in parts):
        raise PubkeyError("Length of the seed is too long for address generation")
    digest = hashlib.sha256(b"".join(parts) + bytes(program_id) + PDA_MARKER).digest()
    if is_on_curve(digest):
        raise PubkeyError("Provided seeds do not result in a valid address")
    return Pubkey(digest)


def find_program_address(seeds: Iterable[Seed], program_id: Pubkey) -> tuple[Pubkey, int]:
    """Find a valid address and its bump, trying bumps from 255 downwards."""
    parts = [_seed_bytes(seed) for seed in seeds]
    if len(parts) + 1 > MAX_SEEDS or any(len(part) > MAX_SEED_LEN for part in parts):
        raise PubkeyError("Length of the seed is too long for address generation")
    for bump in range(255, 0, -1):
        try:
            return create_program_address([*parts, bytes([bump])], program_id), bump
        except PubkeyError:
            continue
    raise PubkeyError("Unable to find a viable program address bump seed")