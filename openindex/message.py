"""Keypairs, blockhashes, compiled messages and signed transactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .errors import TransactionAccountsLimitError
from .instruction import Instruction
from .pubkey import PUBKEY_BYTES, Pubkey, b58decode, b58encode

SIGNATURE_BYTES = 64
SEED_BYTES = 32
MAX_ACCOUNTS = 256
_V0_PREFIX = 0x80


def _shortvec(length: int) -> bytes:
    if not 0 <= length <= 0xFFFF:
        raise ValueError(f"length {length} does not fit a compact-u16")
    out = bytearray()
    while True:
        low = length & 0x7F
        length >>= 7
        if length:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def _array(items: Iterable[bytes]) -> bytes:
    items = list(items)
    return _shortvec(len(items)) + b"".join(items)


@dataclass(frozen=True, repr=False)
class Hash:
    """A 32-byte recent blockhash."""

    raw: bytes = bytes(32)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", bytes(self.raw))
        if len(self.raw) != 32:
            raise ValueError("a hash is exactly 32 bytes")

    @classmethod
    def from_base58(cls, text: str) -> "Hash":
        return cls(b58decode(text))

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return b58encode(self.raw)

    def __repr__(self) -> str:
        return f"Hash({self})"


class Keypair:
    """An ed25519 signing key and its public key."""

    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key
        self._pubkey = Pubkey(bytes(signing_key.verify_key))

    @classmethod
    def generate(cls) -> "Keypair":
        """A fresh random keypair."""
        return cls(SigningKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "Keypair":
        """The keypair derived from a 32-byte seed."""
        seed = bytes(seed)
        if len(seed) != SEED_BYTES:
            raise ValueError(f"a seed is exactly {SEED_BYTES} bytes")
        return cls(SigningKey(seed))

    def pubkey(self) -> Pubkey:
        return self._pubkey

    def sign(self, message: bytes) -> bytes:
        """Detached 64-byte signature of ``message``."""
        return self._signing_key.sign(bytes(message)).signature

    def __repr__(self) -> str:
        return f"Keypair({self._pubkey})"


def _verify(pubkey: Pubkey, message: bytes, signature: bytes) -> bool:
    try:
        VerifyKey(bytes(pubkey)).verify(message, signature)
    except (BadSignatureError, ValueError):
        return False
    return True


@dataclass(frozen=True)
class MessageHeader:
    """Counts that split the account keys into signer and access groups."""

    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int

    def serialize(self) -> bytes:
        return bytes(
            [
                self.num_required_signatures,
                self.num_readonly_signed_accounts,
                self.num_readonly_unsigned_accounts,
            ]
        )


@dataclass(frozen=True)
class CompiledInstruction:
    """An instruction whose keys are replaced by indexes into the message."""

    program_id_index: int
    accounts: tuple[int, ...]
    data: bytes

    def serialize(self) -> bytes:
        return (
            bytes([self.program_id_index])
            + _array([bytes([index]) for index in self.accounts])
            + _shortvec(len(self.data))
            + self.data
        )


@dataclass
class _KeyMeta:
    is_signer: bool = False
    is_writable: bool = False
    is_invoked: bool = False


def _collect_keys(
    instructions: Sequence[Instruction], payer: Optional[Pubkey]
) -> dict[Pubkey, _KeyMeta]:
    metas: dict[Pubkey, _KeyMeta] = {}
    for instruction in instructions:
        metas.setdefault(instruction.program_id, _KeyMeta()).is_invoked = True
        for account in instruction.accounts:
            meta = metas.setdefault(account.pubkey, _KeyMeta())
            meta.is_signer = meta.is_signer or bool(account.is_signer)
            meta.is_writable = meta.is_writable or bool(account.is_writable)
    if payer is not None:
        meta = metas.setdefault(payer, _KeyMeta())
        meta.is_signer = True
        meta.is_writable = True
    return metas


def _order_keys(
    metas: dict[Pubkey, _KeyMeta], payer: Optional[Pubkey]
) -> tuple[MessageHeader, tuple[Pubkey, ...]]:
    rest = sorted(key for key in metas if key != payer)

    def pick(signer: bool, writable: bool) -> list[Pubkey]:
        return [
            key
            for key in rest
            if metas[key].is_signer == signer and metas[key].is_writable == writable
        ]

    writable_signers = ([payer] if payer is not None else []) + pick(True, True)
    readonly_signers = pick(True, False)
    writable_unsigned = pick(False, True)
    readonly_unsigned = pick(False, False)
    header = MessageHeader(
        len(writable_signers) + len(readonly_signers),
        len(readonly_signers),
        len(readonly_unsigned),
    )
    keys = tuple(writable_signers + readonly_signers + writable_unsigned + readonly_unsigned)
    return header, keys


def _compile_instructions(
    instructions: Sequence[Instruction], keys: Sequence[Pubkey]
) -> tuple[CompiledInstruction, ...]:
    if len(keys) > MAX_ACCOUNTS:
        raise TransactionAccountsLimitError()
    position = {key: index for index, key in enumerate(keys)}
    return tuple(
        CompiledInstruction(
            position[instruction.program_id],
            tuple(position[account.pubkey] for account in instruction.accounts),
            instruction.data,
        )
        for instruction in instructions
    )


def _sign(
    message_bytes: bytes, required: Sequence[Pubkey], signers: Iterable[Keypair]
) -> tuple[bytes, ...]:
    slots = {key: index for index, key in enumerate(required)}
    signatures: list[Optional[bytes]] = [None] * len(required)
    for signer in signers:
        slot = slots.get(signer.pubkey())
        if slot is None:
            raise ValueError(f"keypair {signer.pubkey()} is not a required signer")
        signatures[slot] = signer.sign(message_bytes)
    missing = [str(key) for key, sig in zip(required, signatures) if sig is None]
    if missing:
        raise ValueError(f"not enough signers: missing {', '.join(missing)}")
    return tuple(sig for sig in signatures if sig is not None)


def _all_verified(
    message_bytes: bytes, required: Sequence[Pubkey], signatures: Sequence[bytes]
) -> bool:
    if len(signatures) != len(required):
        return False
    return all(
        _verify(key, message_bytes, signature)
        for key, signature in zip(required, signatures)
    )


@dataclass(frozen=True)
class Message:
    """A legacy message: header, account keys, blockhash and instructions."""

    header: MessageHeader
    account_keys: tuple[Pubkey, ...]
    recent_blockhash: Hash
    instructions: tuple[CompiledInstruction, ...]

    @classmethod
    def compile(
        cls,
        instructions: Iterable[Instruction],
        payer: Optional[Pubkey],
        recent_blockhash: Hash,
    ) -> "Message":
        """Collect, order and index every key the instructions reference."""
        instructions = tuple(instructions)
        header, keys = _order_keys(_collect_keys(instructions, payer), payer)
        return cls(header, keys, recent_blockhash, _compile_instructions(instructions, keys))

    @property
    def signer_keys(self) -> tuple[Pubkey, ...]:
        return self.account_keys[: self.header.num_required_signatures]

    def serialize(self) -> bytes:
        return (
            self.header.serialize()
            + _array(bytes(key) for key in self.account_keys)
            + bytes(self.recent_blockhash)
            + _array(instruction.serialize() for instruction in self.instructions)
        )


@dataclass(frozen=True)
class Transaction:
    """A legacy message with one signature per required signer."""

    signatures: tuple[bytes, ...]
    message: Message

    @classmethod
    def new_signed_with_payer(
        cls,
        instructions: Iterable[Instruction],
        payer: Optional[Pubkey],
        signers: Iterable[Keypair],
        recent_blockhash: Hash,
    ) -> "Transaction":
        """Compile the instructions and sign with every required signer."""
        message = Message.compile(instructions, payer, recent_blockhash)
        return cls(_sign(message.serialize(), message.signer_keys, signers), message)

    def serialize(self) -> bytes:
        return _array(self.signatures) + self.message.serialize()

    def verify(self) -> bool:
        """Whether every signature matches its signer and the message."""
        return _all_verified(
            self.message.serialize(), self.message.signer_keys, self.signatures
        )


@dataclass(frozen=True)
class AddressLookupTableAccount:
    """An on-chain table of addresses a versioned message can refer to."""

    key: Pubkey
    addresses: tuple[Pubkey, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "addresses", tuple(self.addresses))


@dataclass(frozen=True)
class MessageAddressTableLookup:
    """Indexes of keys loaded from one lookup table."""

    account_key: Pubkey
    writable_indexes: tuple[int, ...]
    readonly_indexes: tuple[int, ...]

    def serialize(self) -> bytes:
        return (
            bytes(self.account_key)
            + _shortvec(len(self.writable_indexes))
            + bytes(self.writable_indexes)
            + _shortvec(len(self.readonly_indexes))
            + bytes(self.readonly_indexes)
        )


def _drain(
    metas: dict[Pubkey, _KeyMeta], table: AddressLookupTableAccount, writable: bool
) -> tuple[list[int], list[Pubkey]]:
    indexes: list[int] = []
    drained: list[Pubkey] = []
    for key in sorted(metas):
        meta = metas[key]
        if meta.is_signer or meta.is_invoked or meta.is_writable != writable:
            continue
        try:
            position = table.addresses.index(key)
        except ValueError:
            continue
        if position > 0xFF:
            raise ValueError(f"lookup table index {position} does not fit in a byte")
        indexes.append(position)
        drained.append(key)
    for key in drained:
        del metas[key]
    return indexes, drained


@dataclass(frozen=True)
class MessageV0:
    """A version 0 message, which may load keys from lookup tables."""

    header: MessageHeader
    account_keys: tuple[Pubkey, ...]
    recent_blockhash: Hash
    instructions: tuple[CompiledInstruction, ...]
    address_table_lookups: tuple[MessageAddressTableLookup, ...]

    @classmethod
    def try_compile(
        cls,
        payer: Pubkey,
        instructions: Iterable[Instruction],
        lookup_tables: Iterable[AddressLookupTableAccount],
        recent_blockhash: Hash,
    ) -> "MessageV0":
        """Compile, moving plain non-signer keys found in the tables out of the message."""
        instructions = tuple(instructions)
        metas = _collect_keys(instructions, payer)
        lookups: list[MessageAddressTableLookup] = []
        loaded_writable: list[Pubkey] = []
        loaded_readonly: list[Pubkey] = []
        for table in lookup_tables:
            writable_indexes, writable_keys = _drain(metas, table, writable=True)
            readonly_indexes, readonly_keys = _drain(metas, table, writable=False)
            if writable_indexes or readonly_indexes:
                lookups.append(
                    MessageAddressTableLookup(
                        table.key, tuple(writable_indexes), tuple(readonly_indexes)
                    )
                )
                loaded_writable += writable_keys
                loaded_readonly += readonly_keys
        header, static_keys = _order_keys(metas, payer)
        all_keys = [*static_keys, *loaded_writable, *loaded_readonly]
        return cls(
            header,
            static_keys,
            recent_blockhash,
            _compile_instructions(instructions, all_keys),
            tuple(lookups),
        )

    @property
    def signer_keys(self) -> tuple[Pubkey, ...]:
        return self.account_keys[: self.header.num_required_signatures]

    def serialize(self) -> bytes:
        return (
            bytes([_V0_PREFIX])
            + self.header.serialize()
            + _array(bytes(key) for key in self.account_keys)
            + bytes(self.recent_blockhash)
            + _array(instruction.serialize() for instruction in self.instructions)
            + _array(lookup.serialize() for lookup in self.address_table_lookups)
        )


@dataclass(frozen=True)
class VersionedTransaction:
    """A version 0 message with its signatures."""

    signatures: tuple[bytes, ...]
    message: MessageV0

    @classmethod
    def try_new(
        cls, message: MessageV0, signers: Iterable[Keypair]
    ) -> "VersionedTransaction":
        """Sign ``message``; the signers must be exactly its required signers."""
        signers = list(signers)
        required = message.signer_keys
        if len(signers) > len(required):
            raise ValueError("too many signers")
        return cls(_sign(message.serialize(), required, signers), message)

    def serialize(self) -> bytes:
        return _array(self.signatures) + self.message.serialize()

    def verify(self) -> bool:
        """Whether every signature matches its signer and the message."""
        return _all_verified(
            self.message.serialize(), self.message.signer_keys, self.signatures
        )