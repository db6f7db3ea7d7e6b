"""Builders for the instructions understood by the index program."""

from __future__ import annotations

from typing import Iterable, Sequence

from .instruction import (
    AccountMeta,
    AddIndexComponents,
    CreateIndex,
    InitController,
    InitControllerGlobalConfig,
    InitModule,
    InitProtocol,
    Instruction,
    Mint,
    ProtocolInstruction,
    Redeem,
)
from .pda import find_component_address, find_component_vault_address
from .pubkey import Pubkey, find_program_address

SYSTEM_PROGRAM_ID = Pubkey(bytes(32))
TOKEN_PROGRAM_ID = Pubkey.from_base58("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_base58(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)

_ro = AccountMeta.readonly
_rw = AccountMeta.writable


def get_associated_token_address(
    wallet: Pubkey, mint: Pubkey, token_program_id: Pubkey = TOKEN_PROGRAM_ID
) -> Pubkey:
    """Address of the associated token account of ``wallet`` for ``mint``."""
    address, _ = find_program_address(
        [wallet, token_program_id, mint], ASSOCIATED_TOKEN_PROGRAM_ID
    )
    return address


def _build(
    program_id: Pubkey, accounts: Iterable[AccountMeta], instruction: ProtocolInstruction
) -> Instruction:
    return Instruction(program_id, tuple(accounts), instruction.to_bytes())


def _component_keys(
    program_id: Pubkey, index_account: Pubkey, mint: Pubkey
) -> tuple[Pubkey, Pubkey, Pubkey]:
    component, _ = find_component_address(program_id, index_account, mint)
    vault, _ = find_component_vault_address(program_id, index_account, mint)
    vault_ata = get_associated_token_address(vault, mint, TOKEN_PROGRAM_ID)
    return component, vault, vault_ata


def _pair_token_accounts(
    mints: Sequence[Pubkey], token_accounts: Sequence[Pubkey]
) -> list[tuple[Pubkey, Pubkey]]:
    mints = list(mints)
    token_accounts = list(token_accounts)
    if len(token_accounts) < len(mints):
        raise ValueError(
            f"{len(mints)} mints need as many token accounts, got {len(token_accounts)}"
        )
    return list(zip(mints, token_accounts))


def init_protocol_instruction(
    program_id: Pubkey, caller: Pubkey, protocol_account: Pubkey
) -> Instruction:
    """Build the instruction that creates the protocol account."""
    return _build(
        program_id,
        [
            _ro(caller, True),
            _rw(protocol_account, False),
            _ro(SYSTEM_PROGRAM_ID, False),
        ],
        InitProtocol(),
    )


def init_controller_instruction(
    program_id: Pubkey,
    caller: Pubkey,
    protocol_account: Pubkey,
    controller_account: Pubkey,
) -> Instruction:
    """Build the instruction that creates a controller."""
    return _build(
        program_id,
        [
            _ro(caller, True),
            _rw(protocol_account, False),
            _rw(controller_account, False),
            _ro(SYSTEM_PROGRAM_ID, False),
        ],
        InitController(),
    )


def init_controller_global_config_instruction(
    program_id: Pubkey,
    caller: Pubkey,
    protocol_account: Pubkey,
    controller_global_config_account: Pubkey,
    max_index_components: int,
) -> Instruction:
    """Build the instruction that creates the global controller configuration."""
    return _build(
        program_id,
        [
            _ro(caller, True),
            _ro(protocol_account, False),
            _rw(controller_global_config_account, False),
            _ro(SYSTEM_PROGRAM_ID, False),
        ],
        InitControllerGlobalConfig(max_index_components=max_index_components),
    )


def init_module_instruction(
    program_id: Pubkey,
    caller: Pubkey,
    protocol_account: Pubkey,
    module_signer_account: Pubkey,
    registered_module_account: Pubkey,
) -> Instruction:
    """Build the instruction that registers a module."""
    return _build(
        program_id,
        [
            _ro(caller, True),
            _ro(protocol_account, False),
            _ro(module_signer_account, False),
            _rw(registered_module_account, False),
            _ro(SYSTEM_PROGRAM_ID, False),
        ],
        InitModule(),
    )


def create_index_instruction(
    program_id: Pubkey,
    caller: Pubkey,
    manager: Pubkey,
    index_account: Pubkey,
    mint_account: Pubkey,
    controller_account: Pubkey,
    controller_global_config_account: Pubkey,
) -> Instruction:
    """Build the instruction that creates an index and its mint."""
    return _build(
        program_id,
        [
            _ro(caller, True),
            _ro(manager, False),
            _rw(index_account, False),
            _rw(mint_account, False),
            _rw(controller_account, False),
            _ro(controller_global_config_account, False),
            _ro(SYSTEM_PROGRAM_ID, False),
            _ro(TOKEN_PROGRAM_ID, False),
        ],
        CreateIndex(),
    )


def _add_components_static(
    caller: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    controller_account: Pubkey,
    controller_global_config_account: Pubkey,
) -> list[AccountMeta]:
    return [
        _ro(caller, True),
        _ro(index_account, False),
        _rw(index_mints_data_account, False),
        _ro(controller_account, False),
        _ro(controller_global_config_account, False),
        _ro(SYSTEM_PROGRAM_ID, False),
        _ro(ASSOCIATED_TOKEN_PROGRAM_ID, False),
        _ro(TOKEN_PROGRAM_ID, False),
    ]


def add_index_components_instruction(
    program_id: Pubkey,
    caller: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    controller_account: Pubkey,
    controller_global_config_account: Pubkey,
    mints: Sequence[Pubkey],
    amounts: Sequence[int],
) -> Instruction:
    """Build AddIndexComponents with only the fixed accounts."""
    accounts = _add_components_static(
        caller,
        index_account,
        index_mints_data_account,
        controller_account,
        controller_global_config_account,
    )
    return _build(program_id, accounts, AddIndexComponents(amounts=amounts, mints=mints))


def add_index_components_instruction_with_dynamic_accounts(
    program_id: Pubkey,
    caller: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    controller_account: Pubkey,
    controller_global_config_account: Pubkey,
    mints: Sequence[Pubkey],
    amounts: Sequence[int],
) -> Instruction:
    """Build AddIndexComponents with the four per-component accounts appended."""
    mints = list(mints)
    accounts = _add_components_static(
        caller,
        index_account,
        index_mints_data_account,
        controller_account,
        controller_global_config_account,
    )
    for mint in mints:
        component, vault, vault_ata = _component_keys(program_id, index_account, mint)
        accounts += [
            _rw(mint, False),
            _rw(component, False),
            _ro(vault, False),
            _rw(vault_ata, False),
        ]
    return _build(program_id, accounts, AddIndexComponents(amounts=amounts, mints=mints))


def _transfer_static(
    caller: Pubkey,
    program_id: Pubkey,
    controller_account: Pubkey,
    mint_account: Pubkey,
    mint_authority_account: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    token_account: Pubkey,
    token_program_account: Pubkey,
    include_program: bool,
) -> list[AccountMeta]:
    accounts = [
        _ro(caller, True),
        _ro(controller_account, False),
        _rw(mint_account, False),
        _ro(mint_authority_account, False),
        _ro(index_account, False),
        _ro(index_mints_data_account, False),
    ]
    if include_program:
        accounts.append(_ro(program_id, False))
    accounts += [_rw(token_account, False), _ro(token_program_account, False)]
    return accounts


def _component_bundles(
    program_id: Pubkey,
    index_account: Pubkey,
    mints: Sequence[Pubkey],
    token_accounts: Sequence[Pubkey],
) -> list[AccountMeta]:
    accounts: list[AccountMeta] = []
    for mint, owner_token_account in _pair_token_accounts(mints, token_accounts):
        component, vault, vault_ata = _component_keys(program_id, index_account, mint)
        accounts += [
            _ro(mint, False),
            _ro(component, False),
            _ro(vault, False),
            _rw(vault_ata, False),
            _rw(owner_token_account, False),
        ]
    return accounts


def mint_instruction(
    caller: Pubkey,
    program_id: Pubkey,
    controller_account: Pubkey,
    mint_account: Pubkey,
    mint_authority_account: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    token_account: Pubkey,
    token_program_account: Pubkey,
    index_id: int,
    amount: int,
) -> Instruction:
    """Build Mint with the fixed accounts, the program itself among them."""
    accounts = _transfer_static(
        caller, program_id, controller_account, mint_account, mint_authority_account,
        index_account, index_mints_data_account, token_account, token_program_account,
        include_program=True,
    )
    return _build(program_id, accounts, Mint(index_id=index_id, amount=amount))


def mint_instruction_with_dynamic_accounts(
    caller: Pubkey,
    program_id: Pubkey,
    controller_account: Pubkey,
    mint_account: Pubkey,
    mint_authority_account: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    token_account: Pubkey,
    token_program_account: Pubkey,
    mints: Sequence[Pubkey],
    token_accounts: Sequence[Pubkey],
    index_id: int,
    amount: int,
) -> Instruction:
    """Build Mint with five accounts appended for each component."""
    instruction = Mint(index_id=index_id, amount=amount)
    accounts = _transfer_static(
        caller, program_id, controller_account, mint_account, mint_authority_account,
        index_account, index_mints_data_account, token_account, token_program_account,
        include_program=False,
    )
    accounts += _component_bundles(program_id, index_account, mints, token_accounts)
    return _build(program_id, accounts, instruction)


def redeem_instruction(
    caller: Pubkey,
    program_id: Pubkey,
    controller_account: Pubkey,
    mint_account: Pubkey,
    mint_authority_account: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    token_account: Pubkey,
    token_program_account: Pubkey,
    index_id: int,
    amount: int,
) -> Instruction:
    """Build Redeem with the fixed accounts, the program itself among them."""
    accounts = _transfer_static(
        caller, program_id, controller_account, mint_account, mint_authority_account,
        index_account, index_mints_data_account, token_account, token_program_account,
        include_program=True,
    )
    return _build(program_id, accounts, Redeem(index_id=index_id, amount=amount))


def redeem_instruction_with_dynamic_accounts(
    caller: Pubkey,
    program_id: Pubkey,
    controller_account: Pubkey,
    mint_account: Pubkey,
    mint_authority_account: Pubkey,
    index_account: Pubkey,
    index_mints_data_account: Pubkey,
    token_account: Pubkey,
    token_program_account: Pubkey,
    mints: Sequence[Pubkey],
    token_accounts: Sequence[Pubkey],
    index_id: int,
    amount: int,
) -> Instruction:
    """Build Redeem with five accounts appended for each component."""
    instruction = Redeem(index_id=index_id, amount=amount)
    accounts = _transfer_static(
        caller, program_id, controller_account, mint_account, mint_authority_account,
        index_account, index_mints_data_account, token_account, token_program_account,
        include_program=False,
    )
    accounts += _component_bundles(program_id, index_account, mints, token_accounts)
    return _build(program_id, accounts, instruction)