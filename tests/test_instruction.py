import pytest

from openindex.instruction import (
    AccountMeta,
    AddIndexComponents,
    CreateIndex,
    InitController,
    InitControllerGlobalConfig,
    InitModule,
    InitProtocol,
    Instruction,
    Mint,
    Redeem,
    decode_instruction,
)
from openindex.pubkey import Pubkey


def _key(fill: int) -> Pubkey:
    return Pubkey(bytes([fill]) * 32)


ALL_SAMPLES = [
    InitProtocol(),
    InitController(),
    InitControllerGlobalConfig(max_index_components=10),
    InitModule(),
    CreateIndex(),
    AddIndexComponents(amounts=[1, 2**64 - 1], mints=[_key(1), _key(2)]),
    AddIndexComponents(amounts=[], mints=[]),
    Mint(index_id=3, amount=1000),
    Redeem(index_id=2**64 - 1, amount=1),
]


def test_init_protocol_is_single_zero_byte():
    assert InitProtocol().to_bytes() == b"\x00"


def test_global_config_wire_bytes():
    assert InitControllerGlobalConfig(5).to_bytes() == b"\x02\x05\x00\x00\x00"


def test_variant_bytes_follow_declaration_order():
    firsts = [
        InitProtocol().to_bytes()[0],
        InitController().to_bytes()[0],
        InitControllerGlobalConfig(1).to_bytes()[0],
        InitModule().to_bytes()[0],
        CreateIndex().to_bytes()[0],
        AddIndexComponents().to_bytes()[0],
        Mint(1, 1).to_bytes()[0],
        Redeem(1, 1).to_bytes()[0],
    ]
    assert firsts == list(range(8))


def test_mint_fields_little_endian():
    data = Mint(index_id=1, amount=2).to_bytes()
    assert data[1:9] == (1).to_bytes(8, "little")
    assert data[9:] == (2).to_bytes(8, "little")


def test_add_components_layout_amounts_before_mints():
    instr = AddIndexComponents(amounts=[7], mints=[_key(9)])
    data = instr.to_bytes()
    assert data[1:5] == (1).to_bytes(4, "little")
    assert data[5:13] == (7).to_bytes(8, "little")
    assert data[13:17] == (1).to_bytes(4, "little")
    assert data[17:] == bytes(_key(9))


@pytest.mark.parametrize("instr", ALL_SAMPLES)
def test_round_trip(instr):
    assert decode_instruction(instr.to_bytes()) == instr


def test_add_components_sequences_become_tuples_and_compare_equal():
    a = AddIndexComponents(amounts=[1, 2], mints=[_key(1)])
    b = AddIndexComponents(amounts=(1, 2), mints=(_key(1),))
    assert a == b
    assert a.amounts == (1, 2)


def test_mint_and_redeem_differ():
    assert Mint(1, 2) != Redeem(1, 2)
    assert Mint(1, 2).to_bytes()[1:] == Redeem(1, 2).to_bytes()[1:]


def test_decode_empty_raises():
    with pytest.raises(ValueError):
        decode_instruction(b"")


def test_decode_unknown_variant_raises():
    with pytest.raises(ValueError):
        decode_instruction(b"\x08")


def test_decode_truncated_raises():
    data = Mint(1, 2).to_bytes()
    with pytest.raises(ValueError):
        decode_instruction(data[:-1])


def test_decode_trailing_bytes_raises():
    with pytest.raises(ValueError):
        decode_instruction(InitProtocol().to_bytes() + b"\x00")


def test_decode_vector_longer_than_data_raises():
    with pytest.raises(ValueError):
        decode_instruction(b"\x05" + (3).to_bytes(4, "little") + b"\x00" * 8)


@pytest.mark.parametrize("value", [-1, 2**32])
def test_global_config_out_of_range(value):
    with pytest.raises(ValueError):
        InitControllerGlobalConfig(value)


def test_mint_amount_out_of_range():
    with pytest.raises(ValueError):
        Mint(index_id=0, amount=2**64)


def test_add_components_rejects_non_key_mint():
    with pytest.raises(TypeError):
        AddIndexComponents(amounts=[1], mints=[b"\x00" * 32])


def test_account_meta_constructors():
    key = _key(4)
    assert AccountMeta.writable(key, True) == AccountMeta(key, True, True)
    assert AccountMeta.readonly(key, False) == AccountMeta(key, False, False)


def test_instruction_normalises_fields():
    meta = AccountMeta.readonly(_key(1), True)
    instr = Instruction(_key(2), [meta], bytearray(b"\x01"))
    assert instr.accounts == (meta,)
    assert instr.data == b"\x01"
    assert decode_instruction(instr.data) == InitController()