import pytest

from openindex.pubkey import (
    Pubkey,
    PubkeyError,
    b58decode,
    b58encode,
    create_program_address,
    find_program_address,
    is_on_curve,
)

PROGRAM_ID = Pubkey(bytes(range(32)))
BASE_POINT = bytes([0x58]) + bytes([0x66]) * 31
IDENTITY = bytes([1]) + bytes(31)


def test_zero_key_encodes_as_ones():
    assert b58encode(bytes(32)) == "1" * 32


def test_known_base58_value():
    assert b58encode(b"Hello World!") == "2NEpo7TZRRrLZSi2U"
    assert b58decode("2NEpo7TZRRrLZSi2U") == b"Hello World!"


@pytest.mark.parametrize(
    "data", [b"", b"\0", b"\0\0\x01", bytes(range(32)), b"\xff" * 40]
)
def test_base58_roundtrip(data):
    assert b58decode(b58encode(data)) == data


def test_base58_rejects_invalid_characters():
    with pytest.raises(ValueError):
        b58decode("0OIl")


def test_pubkey_text_roundtrip():
    text = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
    key = Pubkey.from_base58(text)
    assert str(key) == text
    assert len(bytes(key)) == 32


def test_pubkey_bytes_and_equality():
    key = Pubkey(bytearray(range(32)))
    assert bytes(key) == bytes(range(32))
    assert key == PROGRAM_ID
    assert hash(key) == hash(PROGRAM_ID)


def test_pubkey_rejects_wrong_length():
    with pytest.raises(ValueError):
        Pubkey(b"\x01" * 31)
    with pytest.raises(ValueError):
        Pubkey.from_base58("abc")


def test_points_on_curve():
    assert is_on_curve(IDENTITY)
    assert is_on_curve(BASE_POINT)
    negated = BASE_POINT[:31] + bytes([BASE_POINT[31] | 0x80])
    assert is_on_curve(negated)


def test_wrong_length_is_not_on_curve():
    assert is_on_curve(b"\x01" * 31) is False


def test_find_program_address_is_off_curve_and_reproducible():
    address, bump = find_program_address([b"seed"], PROGRAM_ID)
    assert not is_on_curve(bytes(address))
    assert 1 <= bump <= 255
    assert create_program_address([b"seed", bytes([bump])], PROGRAM_ID) == address


def test_higher_bumps_were_rejected():
    address, bump = find_program_address([b"another"], PROGRAM_ID)
    for higher in range(bump + 1, 256):
        with pytest.raises(PubkeyError):
            create_program_address([b"another", bytes([higher])], PROGRAM_ID)


def test_find_is_deterministic_and_seed_sensitive():
    first = find_program_address([b"a"], PROGRAM_ID)
    assert find_program_address([b"a"], PROGRAM_ID) == first
    assert find_program_address([b"b"], PROGRAM_ID)[0] != first[0]


def test_pubkey_seed_equals_bytes_seed():
    assert find_program_address([PROGRAM_ID], PROGRAM_ID) == find_program_address(
        [bytes(PROGRAM_ID)], PROGRAM_ID
    )


def test_seed_too_long():
    with pytest.raises(PubkeyError):
        create_program_address([b"x" * 33], PROGRAM_ID)
    with pytest.raises(PubkeyError):
        find_program_address([b"x" * 33], PROGRAM_ID)


def test_too_many_seeds():
    with pytest.raises(PubkeyError):
        create_program_address([b"x"] * 17, PROGRAM_ID)
    with pytest.raises(PubkeyError):
        find_program_address([b"x"] * 16, PROGRAM_ID)


def test_integer_seed_rejected():
    with pytest.raises(TypeError):
        create_program_address([5], PROGRAM_ID)