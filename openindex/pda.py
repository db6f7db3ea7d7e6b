"""Seeds and address derivation for every account the protocol owns."""

from __future__ import annotations

from .pubkey import Pubkey, create_program_address, find_program_address

PROTOCOL_SEED = b"open_index"
CONTROLLER_SEED = b"open_index_controller"
CONTROLLER_GLOBAL_CONFIG_SEED = b"open_index_controller_global"
INDEX_SEED = b"open_index_index"
INDEX_MINT_SEED = b"open_index_mint"
INDEX_MINTS_DATA_SEED = b"open_index_mints_data"
INDEX_MINT_AUTHORITY_SEED = b"open_index_mint_authority"
COMPONENT_SEED = b"open_index_component"
COMPONENT_VAULT_SEED = b"open_index_component_vault"
MODULE_SEED = b"open_index_module"


def _u64(value: int) -> bytes:
    if not 0 <= value < 2**64:
        raise ValueError(f"{value} does not fit in an unsigned 64-bit integer")
    return value.to_bytes(8, "little")


def _bump(value: int) -> bytes:
    if not 0 <= value <= 255:
        raise ValueError(f"bump {value} is not a single byte")
    return bytes([value])


def find_protocol_address(program_id: Pubkey) -> tuple[Pubkey, int]:
    return find_program_address([PROTOCOL_SEED], program_id)


def create_protocol_address(program_id: Pubkey, bump: int) -> Pubkey:
    return create_program_address([PROTOCOL_SEED, _bump(bump)], program_id)


def find_controller_address(program_id: Pubkey, controller_id: int) -> tuple[Pubkey, int]:
    return find_program_address([CONTROLLER_SEED, _u64(controller_id)], program_id)


def find_index_address(
    program_id: Pubkey, controller_key: Pubkey, index_id: int
) -> tuple[Pubkey, int]:
    return find_program_address([INDEX_SEED, controller_key, _u64(index_id)], program_id)


def create_index_address(
    program_id: Pubkey, controller_account: Pubkey, index_id: int, bump: int
) -> Pubkey:
    return create_program_address(
        [INDEX_SEED, controller_account, _u64(index_id), _bump(bump)], program_id
    )


def find_controller_global_config_address(program_id: Pubkey) -> tuple[Pubkey, int]:
    return find_program_address([CONTROLLER_GLOBAL_CONFIG_SEED], program_id)


def find_index_mint_address(
    program_id: Pubkey, controller_account: Pubkey, index_id: int
) -> tuple[Pubkey, int]:
    return find_program_address(
        [INDEX_MINT_SEED, controller_account, _u64(index_id)], program_id
    )


def find_index_mints_data_address(
    program_id: Pubkey, controller_account: Pubkey, index_id: int
) -> tuple[Pubkey, int]:
    return find_program_address(
        [INDEX_MINTS_DATA_SEED, controller_account, _u64(index_id)], program_id
    )


def create_index_mints_data_address(
    program_id: Pubkey, controller_account: Pubkey, index_id: int, bump: int
) -> Pubkey:
    return create_program_address(
        [INDEX_MINTS_DATA_SEED, controller_account, _u64(index_id), _bump(bump)],
        program_id,
    )


def find_component_address(
    program_id: Pubkey, index_key: Pubkey, mint_key: Pubkey
) -> tuple[Pubkey, int]:
    return find_program_address([COMPONENT_SEED, index_key, mint_key], program_id)


def create_component_address(
    program_id: Pubkey, index_key: Pubkey, mint_key: Pubkey, bump: int
) -> Pubkey:
    return create_program_address(
        [COMPONENT_SEED, index_key, mint_key, _bump(bump)], program_id
    )


def find_component_vault_address(
    program_id: Pubkey, index_key: Pubkey, mint_key: Pubkey
) -> tuple[Pubkey, int]:
    return find_program_address([COMPONENT_VAULT_SEED, index_key, mint_key], program_id)


def create_component_vault_address(
    program_id: Pubkey, index_key: Pubkey, mint_key: Pubkey, bump: int
) -> Pubkey:
    return create_program_address(
        [COMPONENT_VAULT_SEED, index_key, mint_key, _bump(bump)], program_id
    )


def find_module_signer_address(program_id: Pubkey) -> tuple[Pubkey, int]:
    return find_program_address([program_id], program_id)


def find_registered_module_address(
    program_id: Pubkey, module_signer_account: Pubkey
) -> tuple[Pubkey, int]:
    return find_program_address([MODULE_SEED, module_signer_account], program_id)


def find_index_mint_authority_address(
    program_id: Pubkey, controller_account: Pubkey, index_id: int
) -> tuple[Pubkey, int]:
    return find_program_address(
        [INDEX_MINT_AUTHORITY_SEED, controller_account, _u64(index_id)], program_id
    )