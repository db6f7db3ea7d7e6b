"""Client SDK for the Open-Index protocol: addresses, instructions and signed transactions."""

__version__ = "0.1.0"
__all__ = ["errors", "pubkey", "pda", "instruction", "builders", "message", "transactions"]