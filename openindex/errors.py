"""Error types raised by the index protocol SDK."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ProtocolError(IntEnum):
    """Custom error codes reported by the on-chain index program."""

    INVALID_TOKEN_ACCOUNT = 500
    INVALID_PROTOCOL_ACCOUNT_DATA = 501
    AMOUNT_MUST_BE_GREATER_THAN_ZERO = 502
    INVALID_TOKEN_MINT = 503
    INVALID_MINT_ACCOUNT = 504
    INVALID_MAX_INDEX_COMPONENTS = 505
    INVALID_INDEX_MINTS_ACCOUNT_DATA = 506
    INVALID_COMPONENT_DATA = 507
    INCORRECT_PROTOCOL_ACCOUNT = 508
    INCORRECT_MINT_AUTHORITY = 509
    INVALID_REGISTERED_MODULE_ACCOUNT = 510
    INCORRECT_CONTROLLER_ACCOUNT = 511
    INCORRECT_CONTROLLER_GLOBAL_CONFIG_ACCOUNT = 512
    INCORRECT_VAULT_ACCOUNT = 513
    INCORRECT_MINT_ACCOUNT = 514
    PROTOCOL_NOT_INITIALIZED = 515
    INCORRECT_INDEX_ACCOUNT = 516
    INCORRECT_INDEX_MINTS_ACCOUNT = 517
    INCORRECT_MODULE_ACCOUNT = 518
    INCORRECT_COMPONENT_ACCOUNT = 519
    INCORRECT_VAULT_ATA = 520
    CONTROLLER_GLOBAL_CONFIG_NOT_INITIALIZED = 521
    ONLY_PROTOCOL_OWNER = 522
    ONLY_CONTROLLER_OWNER = 523
    ONLY_ACTIVE_MODULES = 524
    MAX_INDEX_COMPONENTS_EXCEEDED = 525
    NO_MINTS_PROVIDED = 526
    UNKNOWN_CONTROLLER_GLOBAL_CONFIG_ACCOUNT = 527
    UNKNOWN_CONTROLLER_ACCOUNT = 528
    UNKNOWN_INDEX_ACCOUNT = 529
    UNKNOWN_INDEX_MINTS_ACCOUNT = 530
    UNKNOWN_PROTOCOL_ACCOUNT = 531
    UNKNOWN_MODULE_ACCOUNT = 532
    MINTS_AMOUNTS_LEN_MISMATCH = 533
    INVALID_MINT = 534
    COMPONENT_AMOUNT_ERROR = 535
    COMPONENT_NOT_INITIALIZED = 536
    INDEX_NOT_INITIALIZED = 537

    def message(self) -> str:
        """Human-readable description of this error."""
        return _MESSAGES[self]


_MESSAGES = {
    ProtocolError.INVALID_TOKEN_ACCOUNT: "Error:Invalid token account",
    ProtocolError.INVALID_PROTOCOL_ACCOUNT_DATA: "Error:Invalid protocol account data",
    ProtocolError.AMOUNT_MUST_BE_GREATER_THAN_ZERO: "Error:Amount must be greater than zero",
    ProtocolError.INVALID_TOKEN_MINT: "Error:Invalid token mint",
    ProtocolError.INVALID_MINT_ACCOUNT: "Error:Invalid mint account",
    ProtocolError.INVALID_MAX_INDEX_COMPONENTS: "Error:Invalid max index components",
    ProtocolError.INVALID_INDEX_MINTS_ACCOUNT_DATA: "Invalid index mints account data",
    ProtocolError.INVALID_COMPONENT_DATA: "Invalid component account data",
    ProtocolError.INCORRECT_PROTOCOL_ACCOUNT: "Error:incorrect protocol account",
    ProtocolError.INCORRECT_MINT_AUTHORITY: "Error:incorrect mint authority",
    ProtocolError.INVALID_REGISTERED_MODULE_ACCOUNT: "Error:Invalid module account",
    ProtocolError.INCORRECT_CONTROLLER_ACCOUNT: "Error:incorrect controller account",
    ProtocolError.INCORRECT_CONTROLLER_GLOBAL_CONFIG_ACCOUNT: (
        "Error:incorrect controller global config account"
    ),
    ProtocolError.INCORRECT_VAULT_ACCOUNT: "Error:incorrect vault account",
    ProtocolError.INCORRECT_MINT_ACCOUNT: "Error:Incorrect mint account",
    ProtocolError.PROTOCOL_NOT_INITIALIZED: "Error:Protocol not initialized",
    ProtocolError.INCORRECT_INDEX_ACCOUNT: "Error:Incorrect index account",
    ProtocolError.INCORRECT_INDEX_MINTS_ACCOUNT: "Error:Incorrect index mints account",
    ProtocolError.INCORRECT_MODULE_ACCOUNT: "Error:Incorrect module account",
    ProtocolError.INCORRECT_COMPONENT_ACCOUNT: "Error:Incorrect component account",
    ProtocolError.INCORRECT_VAULT_ATA: "Error:Incorrect vault ata",
    ProtocolError.CONTROLLER_GLOBAL_CONFIG_NOT_INITIALIZED: (
        "Error:Controller glocal confog not initialized"
    ),
    ProtocolError.ONLY_PROTOCOL_OWNER: "Error:Only protocol owner can execute this instruction",
    ProtocolError.ONLY_CONTROLLER_OWNER: (
        "Error:Only controller owner can execute this instruction"
    ),
    ProtocolError.ONLY_ACTIVE_MODULES: "Error:Only active modules can execute this instruction",
    ProtocolError.MAX_INDEX_COMPONENTS_EXCEEDED: "Error:Max index components exceeded",
    ProtocolError.NO_MINTS_PROVIDED: "Error:No mints provided",
    ProtocolError.UNKNOWN_CONTROLLER_GLOBAL_CONFIG_ACCOUNT: (
        "Error:Invalid controller global config account owner"
    ),
    ProtocolError.UNKNOWN_CONTROLLER_ACCOUNT: "Error:Invalid controller account owner",
    ProtocolError.UNKNOWN_INDEX_ACCOUNT: "Error:Invalid index account",
    ProtocolError.UNKNOWN_INDEX_MINTS_ACCOUNT: "Error: Invalid index mints account",
    ProtocolError.UNKNOWN_PROTOCOL_ACCOUNT: "Error:Invalid protocol account owner",
    ProtocolError.UNKNOWN_MODULE_ACCOUNT: "Error:Invalid Module owner",
    ProtocolError.MINTS_AMOUNTS_LEN_MISMATCH: "Error:Mints amounts lengths (len) mismatch",
    ProtocolError.INVALID_MINT: "Error:Invalid mint",
    ProtocolError.COMPONENT_AMOUNT_ERROR: "Error:Component amount error",
    ProtocolError.COMPONENT_NOT_INITIALIZED: "Error: Comoponent not initialized",
    ProtocolError.INDEX_NOT_INITIALIZED: "Error:Index not initialized",
}


class ProtocolException(Exception):
    """Raised when a protocol rule is violated; carries a ProtocolError."""

    type_name = "Protocol Error"

    def __init__(self, error: ProtocolError) -> None:
        self.error = ProtocolError(error)
        self.code = int(self.error)
        super().__init__(self.error.message())


class TransactionBuilderError(Exception):
    """Base class for failures while assembling instructions or transactions."""


class MintToError(TransactionBuilderError):
    """Building a mint_to instruction failed."""

    def __init__(self, program_error: Any) -> None:
        self.program_error = program_error
        super().__init__("Error: Creating mint_to instruction failed")


class TransactionAccountsLimitError(TransactionBuilderError):
    """A transaction would reference more accounts than allowed."""

    def __init__(self) -> None:
        super().__init__("Error: Number of accounts exceeds transaction accounts limit")


def require(condition: object, error: ProtocolError | BaseException) -> None:
    """Raise ``error`` unless ``condition`` holds."""
    if condition:
        return
    if isinstance(error, ProtocolError):
        raise ProtocolException(error)
    raise error