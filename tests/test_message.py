import pytest

from openindex.builders import SYSTEM_PROGRAM_ID, init_protocol_instruction
from openindex.errors import TransactionAccountsLimitError
from openindex.instruction import AccountMeta, Instruction
from openindex.message import (
    AddressLookupTableAccount,
    Hash,
    Keypair,
    Message,
    MessageV0,
    Transaction,
    VersionedTransaction,
)
from openindex.pubkey import Pubkey


def key(n):
    return Pubkey(bytes([n]) * 32)


PROGRAM = key(200)
PROTOCOL = key(2)
PAYER = Keypair.from_seed(bytes(range(32)))
BLOCKHASH = Hash(bytes([9]) * 32)


def protocol_ix(caller=None):
    return init_protocol_instruction(PROGRAM, caller or PAYER.pubkey(), PROTOCOL)


def test_keypair_from_seed_is_deterministic():
    first = Keypair.from_seed(bytes(32))
    assert first.pubkey() == Keypair.from_seed(bytes(32)).pubkey()
    assert first.pubkey() != Keypair.from_seed(bytes([1]) * 32).pubkey()


def test_keypair_from_seed_rejects_bad_length():
    with pytest.raises(ValueError):
        Keypair.from_seed(bytes(31))


def test_generated_keypairs_differ_and_sign_64_bytes():
    first, second = Keypair.generate(), Keypair.generate()
    assert first.pubkey() != second.pubkey()
    assert len(first.sign(b"message")) == 64


def test_hash_base58_round_trip():
    assert Hash.from_base58(str(BLOCKHASH)) == BLOCKHASH


def test_hash_rejects_bad_length():
    with pytest.raises(ValueError):
        Hash(bytes(31))


def test_message_compile_orders_keys():
    message = Message.compile([protocol_ix()], PAYER.pubkey(), BLOCKHASH)
    keys = message.account_keys
    assert keys[0] == PAYER.pubkey()
    assert keys[1] == PROTOCOL
    assert message.header.num_required_signatures == 1
    readonly = keys[len(keys) - message.header.num_readonly_unsigned_accounts:]
    assert sorted(readonly) == sorted([SYSTEM_PROGRAM_ID, PROGRAM])
    assert list(readonly) == sorted(readonly)


def test_message_compiled_instruction_resolves_keys():
    ix = protocol_ix()
    message = Message.compile([ix], PAYER.pubkey(), BLOCKHASH)
    compiled = message.instructions[0]
    keys = message.account_keys
    assert keys[compiled.program_id_index] == PROGRAM
    assert [keys[i] for i in compiled.accounts] == [a.pubkey for a in ix.accounts]
    assert compiled.data == ix.data


def test_message_sorts_within_group():
    ix = Instruction(
        PROGRAM,
        [AccountMeta.writable(key(5), False), AccountMeta.writable(key(3), False)],
        b"",
    )
    message = Message.compile([ix], PAYER.pubkey(), BLOCKHASH)
    assert message.account_keys[1:3] == (key(3), key(5))


def test_message_without_payer_starts_with_signer():
    caller = key(1)
    message = Message.compile([protocol_ix(caller)], None, BLOCKHASH)
    assert message.account_keys[0] == caller
    assert message.signer_keys == (caller,)


def test_message_serialize_layout():
    message = Message.compile([protocol_ix()], PAYER.pubkey(), BLOCKHASH)
    data = message.serialize()
    assert data[:3] == message.header.serialize()
    assert data[3] == len(message.account_keys)
    end = 4 + 32 * len(message.account_keys)
    assert data[4:end] == b"".join(bytes(k) for k in message.account_keys)
    assert data[end:end + 32] == bytes(BLOCKHASH)


def test_transaction_signs_and_verifies():
    tx = Transaction.new_signed_with_payer([protocol_ix()], PAYER.pubkey(), [PAYER], BLOCKHASH)
    assert tx.verify()
    raw = tx.serialize()
    assert raw[0] == len(tx.signatures)
    assert raw[1:65] == tx.signatures[0]
    assert raw[65:] == tx.message.serialize()


def test_tampered_transaction_fails_verification():
    tx = Transaction.new_signed_with_payer([protocol_ix()], PAYER.pubkey(), [PAYER], BLOCKHASH)
    bad = bytes([tx.signatures[0][0] ^ 1]) + tx.signatures[0][1:]
    assert not Transaction((bad,), tx.message).verify()


def test_transaction_missing_signer():
    other = key(7)
    ix = Instruction(PROGRAM, [AccountMeta.readonly(other, True)], b"")
    with pytest.raises(ValueError):
        Transaction.new_signed_with_payer([ix], PAYER.pubkey(), [PAYER], BLOCKHASH)


def test_transaction_unrelated_signer():
    stranger = Keypair.from_seed(bytes([5]) * 32)
    with pytest.raises(ValueError):
        Transaction.new_signed_with_payer(
            [protocol_ix()], PAYER.pubkey(), [PAYER, stranger], BLOCKHASH
        )


def test_too_many_accounts():
    accounts = [AccountMeta.writable(Pubkey(i.to_bytes(32, "big")), False) for i in range(300)]
    ix = Instruction(PROGRAM, accounts, b"")
    with pytest.raises(TransactionAccountsLimitError):
        Message.compile([ix], PAYER.pubkey(), BLOCKHASH)


def test_v0_moves_writable_key_to_lookup():
    table = AddressLookupTableAccount(key=key(50), addresses=[PROTOCOL])
    ix = protocol_ix()
    message = MessageV0.try_compile(PAYER.pubkey(), [ix], [table], BLOCKHASH)
    assert PROTOCOL not in message.account_keys
    lookup = message.address_table_lookups[0]
    assert lookup.account_key == key(50)
    assert lookup.writable_indexes == (0,)
    assert lookup.readonly_indexes == ()
    full = [*message.account_keys, PROTOCOL]
    assert [full[i] for i in message.instructions[0].accounts] == [a.pubkey for a in ix.accounts]


def test_v0_moves_readonly_key_to_lookup():
    table = AddressLookupTableAccount(key=key(50), addresses=[key(99), SYSTEM_PROGRAM_ID])
    message = MessageV0.try_compile(PAYER.pubkey(), [protocol_ix()], [table], BLOCKHASH)
    assert message.address_table_lookups[0].readonly_indexes == (1,)
    assert SYSTEM_PROGRAM_ID not in message.account_keys


def test_v0_keeps_signers_and_programs_static():
    table = AddressLookupTableAccount(key=key(50), addresses=[PAYER.pubkey(), PROGRAM])
    message = MessageV0.try_compile(PAYER.pubkey(), [protocol_ix()], [table], BLOCKHASH)
    assert message.address_table_lookups == ()
    assert PROGRAM in message.account_keys
    assert message.account_keys[0] == PAYER.pubkey()


def test_v0_serialize_starts_with_version_prefix():
    message = MessageV0.try_compile(PAYER.pubkey(), [protocol_ix()], [], BLOCKHASH)
    data = message.serialize()
    assert data[0] == 0x80
    assert data[1:4] == message.header.serialize()


def test_versioned_transaction_signs_and_verifies():
    table = AddressLookupTableAccount(key=key(50), addresses=[PROTOCOL])
    message = MessageV0.try_compile(PAYER.pubkey(), [protocol_ix()], [table], BLOCKHASH)
    tx = VersionedTransaction.try_new(message, [PAYER])
    assert tx.verify()
    raw = tx.serialize()
    assert raw[0] == len(tx.signatures)
    assert raw[1:65] == tx.signatures[0]
    assert raw[65:] == message.serialize()


def test_versioned_transaction_wrong_signer():
    message = MessageV0.try_compile(PAYER.pubkey(), [protocol_ix()], [], BLOCKHASH)
    with pytest.raises(ValueError):
        VersionedTransaction.try_new(message, [Keypair.from_seed(bytes([5]) * 32)])


def test_versioned_transaction_too_many_signers():
    message = MessageV0.try_compile(PAYER.pubkey(), [protocol_ix()], [], BLOCKHASH)
    with pytest.raises(ValueError):
        VersionedTransaction.try_new(message, [PAYER, Keypair.from_seed(bytes([5]) * 32)])