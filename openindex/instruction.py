"""Instruction data and account metadata for the index protocol program."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar, Sequence

from .pubkey import PUBKEY_BYTES, Pubkey

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1


def _check_range(name: str, value: int, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if not 0 <= value <= upper:
        raise ValueError(f"{name}={value} is out of range 0..{upper}")
    return value


class _Reader:
    """Sequential reader over borsh-encoded bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    def take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise ValueError("instruction data ended unexpectedly")
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u32(self) -> int:
        return struct.unpack("<I", self.take(4))[0]

    def u64(self) -> int:
        return struct.unpack("<Q", self.take(8))[0]

    def pubkey(self) -> Pubkey:
        return Pubkey(self.take(PUBKEY_BYTES))

    def finish(self) -> None:
        if self._offset != len(self._data):
            raise ValueError("instruction data has trailing bytes")


@dataclass(frozen=True)
class AccountMeta:
    """An account referenced by an instruction, with its access flags."""

    pubkey: Pubkey
    is_signer: bool
    is_writable: bool

    @classmethod
    def writable(cls, pubkey: Pubkey, is_signer: bool) -> "AccountMeta":
        """A writable account reference."""
        return cls(pubkey, is_signer, True)

    @classmethod
    def readonly(cls, pubkey: Pubkey, is_signer: bool) -> "AccountMeta":
        """A read-only account reference."""
        return cls(pubkey, is_signer, False)


@dataclass(frozen=True)
class Instruction:
    """A program call: target program, accounts and opaque data."""

    program_id: Pubkey
    accounts: tuple[AccountMeta, ...]
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "data", bytes(self.data))


class ProtocolInstruction:
    """Base of every instruction understood by the index program."""

    TAG: ClassVar[int]

    def to_bytes(self) -> bytes:
        """Borsh encoding: one variant byte followed by the fields."""
        return bytes([self.TAG]) + self._payload()

    def _payload(self) -> bytes:
        return b""

    @classmethod
    def _read(cls, reader: _Reader) -> "ProtocolInstruction":
        return cls()


@dataclass(frozen=True)
class InitProtocol(ProtocolInstruction):
    """Create the single protocol account."""

    TAG: ClassVar[int] = 0


@dataclass(frozen=True)
class InitController(ProtocolInstruction):
    """Create a new controller under the protocol."""

    TAG: ClassVar[int] = 1


@dataclass(frozen=True)
class InitControllerGlobalConfig(ProtocolInstruction):
    """Create the global controller configuration."""

    TAG: ClassVar[int] = 2
    max_index_components: int

    def __post_init__(self) -> None:
        _check_range("max_index_components", self.max_index_components, _U32_MAX)

    def _payload(self) -> bytes:
        return struct.pack("<I", self.max_index_components)

    @classmethod
    def _read(cls, reader: _Reader) -> "InitControllerGlobalConfig":
        return cls(reader.u32())


@dataclass(frozen=True)
class InitModule(ProtocolInstruction):
    """Register an external module program."""

    TAG: ClassVar[int] = 3


@dataclass(frozen=True)
class CreateIndex(ProtocolInstruction):
    """Create a new index and its mint under a controller."""

    TAG: ClassVar[int] = 4


@dataclass(frozen=True)
class AddIndexComponents(ProtocolInstruction):
    """Register the component mints of an index and their units."""

    TAG: ClassVar[int] = 5
    amounts: Sequence[int] = field(default_factory=tuple)
    mints: Sequence[Pubkey] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        amounts = tuple(self.amounts)
        mints = tuple(self.mints)
        for amount in amounts:
            _check_range("amount", amount, _U64_MAX)
        for mint in mints:
            if not isinstance(mint, Pubkey):
                raise TypeError("mints must be public keys")
        if len(amounts) > _U32_MAX or len(mints) > _U32_MAX:
            raise ValueError("too many entries for a borsh vector")
        object.__setattr__(self, "amounts", amounts)
        object.__setattr__(self, "mints", mints)

    def _payload(self) -> bytes:
        parts = [struct.pack("<I", len(self.amounts))]
        parts.extend(struct.pack("<Q", amount) for amount in self.amounts)
        parts.append(struct.pack("<I", len(self.mints)))
        parts.extend(bytes(mint) for mint in self.mints)
        return b"".join(parts)

    @classmethod
    def _read(cls, reader: _Reader) -> "AddIndexComponents":
        amounts = [reader.u64() for _ in range(reader.u32())]
        mints = [reader.pubkey() for _ in range(reader.u32())]
        return cls(amounts=amounts, mints=mints)


@dataclass(frozen=True)
class _IndexAmount(ProtocolInstruction):
    index_id: int
    amount: int

    def __post_init__(self) -> None:
        _check_range("index_id", self.index_id, _U64_MAX)
        _check_range("amount", self.amount, _U64_MAX)

    def _payload(self) -> bytes:
        return struct.pack("<QQ", self.index_id, self.amount)

    @classmethod
    def _read(cls, reader: _Reader) -> "_IndexAmount":
        index_id = reader.u64()
        return cls(index_id, reader.u64())


@dataclass(frozen=True)
class Mint(_IndexAmount):
    """Mint index tokens against deposited components."""

    TAG: ClassVar[int] = 6


@dataclass(frozen=True)
class Redeem(_IndexAmount):
    """Burn index tokens and withdraw the components."""

    TAG: ClassVar[int] = 7


_VARIANTS: dict[int, type[ProtocolInstruction]] = {
    variant.TAG: variant
    for variant in (
        InitProtocol,
        InitController,
        InitControllerGlobalConfig,
        InitModule,
        CreateIndex,
        AddIndexComponents,
        Mint,
        Redeem,
    )
}


def decode_instruction(data: bytes) -> ProtocolInstruction:
    """Decode borsh instruction data; raises ValueError if it is malformed."""
    reader = _Reader(data)
    tag = reader.u8()
    try:
        variant = _VARIANTS[tag]
    except KeyError:
        raise ValueError(f"unknown instruction variant {tag}") from None
    instruction = variant._read(reader)
    reader.finish()
    return instruction