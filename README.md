# openindex

A client library for the Open-Index protocol. It derives the protocol's
program-derived addresses, encodes and decodes its instructions, and builds
signed legacy and version 0 transactions in their wire format.

## Installation

```
pip install openindex
```

The tests use pytest:

```
pip install "openindex[test]"
pytest
```

## Modules

- `openindex.pubkey` – `Pubkey` (32-byte address, base58 text form),
  `b58encode` / `b58decode`, `is_on_curve`, `create_program_address`,
  `find_program_address` and `PubkeyError`.
- `openindex.pda` – the protocol's seeds and one `find_*` / `create_*`
  function per account kind (protocol, controller, global config, index,
  index mint, index mints data, mint authority, component, component vault,
  module signer, registered module).
- `openindex.instruction` – `AccountMeta`, `Instruction`, the instruction
  variants and `decode_instruction`.
- `openindex.builders` – functions that assemble each protocol instruction
  with its accounts, plus `get_associated_token_address`.
- `openindex.message` – `Keypair`, `Hash`, `Message`, `Transaction`,
  `MessageV0`, `AddressLookupTableAccount` and `VersionedTransaction`.
- `openindex.transactions` – ready-made signed transactions for every
  protocol step and for creating accounts and associated token accounts.
- `openindex.errors` – `ProtocolError`, `ProtocolException`, `require` and
  the transaction-builder errors.

## Addresses

```python
from openindex.pubkey import Pubkey
from openindex.pda import (
    find_protocol_address,
    find_controller_address,
    find_index_address,
    find_index_mint_address,
)

program_id = Pubkey.from_base58("11111111111111111111111111111112")

protocol, bump = find_protocol_address(program_id)
controller, _ = find_controller_address(program_id, 1)
index, _ = find_index_address(program_id, controller, 1)
index_mint, _ = find_index_mint_address(program_id, controller, 1)
print(protocol, controller, index, index_mint)
```

`find_*` functions try bump seeds from 255 downwards until the address lies
off the ed25519 curve and return the address with its bump; `create_*`
functions rebuild an address from a known bump and raise `PubkeyError` when
the seeds give no valid address. Integer ids are encoded as little-endian
unsigned 64-bit values; out-of-range ids or bumps raise `ValueError`.

## Instructions

```python
from openindex.builders import init_controller_global_config_instruction
from openindex.instruction import decode_instruction
from openindex.message import Keypair
from openindex.pda import find_controller_global_config_address

caller = Keypair.generate().pubkey()
global_config, _ = find_controller_global_config_address(program_id)

ix = init_controller_global_config_instruction(
    program_id, caller, protocol, global_config, 10
)
print(decode_instruction(ix.data))  # InitControllerGlobalConfig(max_index_components=10)
```

Each variant (`InitProtocol`, `InitController`, `InitControllerGlobalConfig`,
`InitModule`, `CreateIndex`, `AddIndexComponents`, `Mint`, `Redeem`) encodes
with `to_bytes()` as one variant byte followed by its borsh fields, and reads
back with `decode_instruction`, which raises `ValueError` on unknown variants,
short data or trailing bytes.

The `*_with_dynamic_accounts` builders append the per-component accounts
(four per mint for `AddIndexComponents`, five per mint for `Mint` and
`Redeem`); the plain `mint_instruction` and `redeem_instruction` carry only
the fixed accounts, with the program id among them.

## Transactions

```python
from openindex.message import Keypair, Hash
from openindex.transactions import init_protocol_transaction, create_index_transaction

payer = Keypair.generate()
blockhash = Hash(bytes(32))

tx = init_protocol_transaction(payer, program_id, blockhash)
assert tx.verify()
wire = tx.serialize()

tx = create_index_transaction(payer, program_id, 1, 1, payer.pubkey(), blockhash)
```

`add_index_components_versioned_transaction` compiles a version 0 message
against an `AddressLookupTableAccount`: non-signer, non-program keys found in
the table are loaded from it instead of being listed in the message.

Some behaviour to be aware of:

- `create_account_transaction` uses the lamport amount also as the new
  account's size, and makes the token program its owner.
- `redeem_transaction` derives the index mint from the controller id rather
  than the index id.
- A message referencing more than 256 accounts raises
  `TransactionAccountsLimitError`.
- Signing raises `ValueError` if a keypair is not a required signer or a
  required signer is missing.

## Errors

Protocol error codes are members of `ProtocolError`, starting at 500, and
`ProtocolError.message()` gives their text. Checks raise `ProtocolException`,
which carries the error, its code and its message; `require(condition, error)`
raises it when the condition is false (or raises `error` itself if it is an
exception).

## What this package does not do

It only builds and signs transactions. It has no RPC client, so it cannot
fetch blockhashes, read account data or send transactions to a cluster, and
it contains no on-chain program logic: the checks the program performs on
the accounts happen only on chain.