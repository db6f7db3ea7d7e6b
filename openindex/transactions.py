"""Signed transactions for the index protocol and the setup steps around it."""

from __future__ import annotations

import struct
from typing import Sequence

from .builders import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    add_index_components_instruction,
    add_index_components_instruction_with_dynamic_accounts,
    create_index_instruction,
    get_associated_token_address,
    init_controller_global_config_instruction,
    init_controller_instruction,
    init_module_instruction,
    init_protocol_instruction,
    mint_instruction_with_dynamic_accounts,
    redeem_instruction_with_dynamic_accounts,
)
from .instruction import AccountMeta, Instruction
from .message import (
    AddressLookupTableAccount,
    Hash,
    Keypair,
    MessageV0,
    Transaction,
    VersionedTransaction,
)
from .pda import (
    find_controller_address,
    find_controller_global_config_address,
    find_index_address,
    find_index_mint_address,
    find_index_mint_authority_address,
    find_index_mints_data_address,
    find_module_signer_address,
    find_protocol_address,
    find_registered_module_address,
)
from .pubkey import Pubkey

_SYSTEM_CREATE_ACCOUNT = 0
_ATA_CREATE = 0


def create_account_instruction(
    from_pubkey: Pubkey, to_pubkey: Pubkey, lamports: int, space: int, owner: Pubkey
) -> Instruction:
    """System program instruction that creates and funds a new account."""
    data = struct.pack("<IQQ", _SYSTEM_CREATE_ACCOUNT, lamports, space) + bytes(owner)
    return Instruction(
        SYSTEM_PROGRAM_ID,
        (
            AccountMeta.writable(from_pubkey, True),
            AccountMeta.writable(to_pubkey, True),
        ),
        data,
    )


def create_associated_token_account_instruction(
    funding: Pubkey, wallet_address: Pubkey, mint: Pubkey
) -> Instruction:
    """Instruction that creates the associated token account of a wallet for a mint."""
    ata = get_associated_token_address(wallet_address, mint, TOKEN_PROGRAM_ID)
    return Instruction(
        ASSOCIATED_TOKEN_PROGRAM_ID,
        (
            AccountMeta.writable(funding, True),
            AccountMeta.writable(ata, False),
            AccountMeta.readonly(wallet_address, False),
            AccountMeta.readonly(mint, False),
            AccountMeta.readonly(SYSTEM_PROGRAM_ID, False),
            AccountMeta.readonly(TOKEN_PROGRAM_ID, False),
        ),
        bytes([_ATA_CREATE]),
    )


def _signed(
    instruction: Instruction, payer: Keypair, recent_blockhash: Hash, *extra: Keypair
) -> Transaction:
    return Transaction.new_signed_with_payer(
        [instruction], payer.pubkey(), [payer, *extra], recent_blockhash
    )


def _index_keys(
    program_id: Pubkey, controller_id: int, index_id: int
) -> tuple[Pubkey, Pubkey, Pubkey, Pubkey]:
    controller, _ = find_controller_address(program_id, controller_id)
    index, _ = find_index_address(program_id, controller, index_id)
    global_config, _ = find_controller_global_config_address(program_id)
    mints_data, _ = find_index_mints_data_address(program_id, controller, index_id)
    return controller, index, global_config, mints_data


def add_index_components_transaction(
    payer: Keypair,
    program_id: Pubkey,
    index_id: int,
    controller_id: int,
    recent_blockhash: Hash,
    mints: Sequence[Pubkey],
    amounts: Sequence[int],
) -> Transaction:
    """Signed transaction adding components, with the per-component accounts."""
    controller, index, global_config, mints_data = _index_keys(
        program_id, controller_id, index_id
    )
    instruction = add_index_components_instruction_with_dynamic_accounts(
        program_id, payer.pubkey(), index, mints_data, controller, global_config,
        mints, amounts,
    )
    return _signed(instruction, payer, recent_blockhash)


def add_index_components_versioned_transaction(
    payer: Keypair,
    program_id: Pubkey,
    index_id: int,
    controller_id: int,
    recent_blockhash: Hash,
    mints: Sequence[Pubkey],
    amounts: Sequence[int],
    lookup_table_account: AddressLookupTableAccount,
) -> VersionedTransaction:
    """Signed version 0 transaction adding components through a lookup table."""
    controller, index, global_config, mints_data = _index_keys(
        program_id, controller_id, index_id
    )
    instruction = add_index_components_instruction(
        program_id, payer.pubkey(), index, mints_data, controller, global_config,
        mints, amounts,
    )
    message = MessageV0.try_compile(
        payer.pubkey(), [instruction], [lookup_table_account], recent_blockhash
    )
    return VersionedTransaction.try_new(message, [payer])


def create_account_transaction(
    payer: Keypair, account: Keypair, lamports: int, recent_blockhash: Hash
) -> Transaction:
    """Signed transaction creating a token-program-owned account.

    The lamport amount is also used as the account's size in bytes.
    """
    instruction = create_account_instruction(
        payer.pubkey(), account.pubkey(), lamports, lamports, TOKEN_PROGRAM_ID
    )
    return _signed(instruction, payer, recent_blockhash, account)


def create_index_transaction(
    payer: Keypair,
    program_id: Pubkey,
    index_id: int,
    controller_id: int,
    manager: Pubkey,
    recent_blockhash: Hash,
) -> Transaction:
    """Signed transaction creating an index and its mint."""
    controller, _ = find_controller_address(program_id, controller_id)
    index, _ = find_index_address(program_id, controller, index_id)
    global_config, _ = find_controller_global_config_address(program_id)
    mint, _ = find_index_mint_address(program_id, controller, index_id)
    instruction = create_index_instruction(
        program_id, payer.pubkey(), manager, index, mint, controller, global_config
    )
    return _signed(instruction, payer, recent_blockhash)


def create_token_account_transaction(
    payer: Keypair,
    funding: Pubkey,
    wallet_address: Pubkey,
    mint: Pubkey,
    recent_blockhash: Hash,
) -> Transaction:
    """Signed transaction creating an associated token account."""
    instruction = create_associated_token_account_instruction(funding, wallet_address, mint)
    return _signed(instruction, payer, recent_blockhash)


def init_controller_global_config_transaction(
    payer: Keypair, program_id: Pubkey, max_index_components: int, recent_blockhash: Hash
) -> Transaction:
    """Signed transaction creating the global controller configuration."""
    protocol, _ = find_protocol_address(program_id)
    global_config, _ = find_controller_global_config_address(program_id)
    instruction = init_controller_global_config_instruction(
        program_id, payer.pubkey(), protocol, global_config, max_index_components
    )
    return _signed(instruction, payer, recent_blockhash)


def init_controller_transaction(
    payer: Keypair, program_id: Pubkey, controller_id: int, recent_blockhash: Hash
) -> Transaction:
    """Signed transaction creating a controller."""
    protocol, _ = find_protocol_address(program_id)
    controller, _ = find_controller_address(program_id, controller_id)
    instruction = init_controller_instruction(program_id, payer.pubkey(), protocol, controller)
    return _signed(instruction, payer, recent_blockhash)


def init_module_transaction(
    payer: Keypair, program_id: Pubkey, module_program_id: Pubkey, recent_blockhash: Hash
) -> Transaction:
    """Signed transaction registering a module program."""
    protocol, _ = find_protocol_address(program_id)
    module_signer, _ = find_module_signer_address(module_program_id)
    registered, _ = find_registered_module_address(program_id, module_signer)
    instruction = init_module_instruction(
        program_id, payer.pubkey(), protocol, module_signer, registered
    )
    return _signed(instruction, payer, recent_blockhash)


def init_protocol_transaction(
    payer: Keypair, program_id: Pubkey, recent_blockhash: Hash
) -> Transaction:
    """Signed transaction creating the protocol account."""
    protocol, _ = find_protocol_address(program_id)
    instruction = init_protocol_instruction(program_id, payer.pubkey(), protocol)
    return _signed(instruction, payer, recent_blockhash)


def mint_transaction(
    amount: int,
    payer: Keypair,
    program_id: Pubkey,
    index_id: int,
    controller_id: int,
    token_account: Pubkey,
    recent_blockhash: Hash,
    mints: Sequence[Pubkey],
    token_accounts: Sequence[Pubkey],
) -> Transaction:
    """Signed transaction minting index tokens against the components."""
    controller, _ = find_controller_address(program_id, controller_id)
    index, _ = find_index_address(program_id, controller, index_id)
    mint, _ = find_index_mint_address(program_id, controller, index_id)
    authority, _ = find_index_mint_authority_address(program_id, controller, index_id)
    mints_data, _ = find_index_mints_data_address(program_id, controller, index_id)
    instruction = mint_instruction_with_dynamic_accounts(
        payer.pubkey(), program_id, controller, mint, authority, index, mints_data,
        token_account, TOKEN_PROGRAM_ID, mints, token_accounts, index_id, amount,
    )
    return _signed(instruction, payer, recent_blockhash)


def redeem_transaction(
    amount: int,
    payer: Keypair,
    program_id: Pubkey,
    index_id: int,
    controller_id: int,
    token_account: Pubkey,
    recent_blockhash: Hash,
    mints: Sequence[Pubkey],
    token_accounts: Sequence[Pubkey],
) -> Transaction:
    """Signed transaction burning index tokens and withdrawing the components.

    The index mint is derived from the controller id, not the index id.
    """
    controller, _ = find_controller_address(program_id, controller_id)
    index, _ = find_index_address(program_id, controller, index_id)
    mint, _ = find_index_mint_address(program_id, controller, controller_id)
    authority, _ = find_index_mint_authority_address(program_id, controller, index_id)
    mints_data, _ = find_index_mints_data_address(program_id, controller, index_id)
    instruction = redeem_instruction_with_dynamic_accounts(
        payer.pubkey(), program_id, controller, mint, authority, index, mints_data,
        token_account, TOKEN_PROGRAM_ID, mints, token_accounts, index_id, amount,
    )
    return _signed(instruction, payer, recent_blockhash)