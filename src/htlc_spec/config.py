"""HTLC swap program configuration constants.

Keep this file aligned with the deployed program's storage size and the host
ledger's PDA rules.
"""

from solders.system_program import ID as _SYSTEM_PROGRAM_ID

# Identities
PUBKEY_LEN = 32
DEFAULT_PUBKEY = bytes(PUBKEY_LEN)
# The system program id is the all-zero key, identical to the default key.
SYSTEM_PROGRAM_ID = bytes(_SYSTEM_PROGRAM_ID)
NATIVE_TOKEN_SENTINEL = bytes(PUBKEY_LEN)

# Hash sizes
HASH_SIZE = 32
SECRET_LEN = 32

# Escrow address seeds
VAULT_SEED = b"swap"
VAULT_DATA_SEED = b"swap_data"

# Payment record: commitment(32) || lock_time(8) || state(1)
STORAGE_SPACE_ALLOCATED = 41

# Instruction tags and total buffer lengths (tag byte included)
TAG_NATIVE_PAYMENT = 0
TAG_TOKEN_PAYMENT = 1
TAG_RECEIVER_SPEND = 2
TAG_SENDER_REFUND = 3

INSTRUCTION_LENGTHS = {
    TAG_NATIVE_PAYMENT: 92,
    TAG_TOKEN_PAYMENT: 124,
    TAG_RECEIVER_SPEND: 116,
    TAG_SENDER_REFUND: 116,
}

# Account list: payer-or-settler, vault-data, vault, system program
COMMON_ACCOUNT_COUNT = 4

# Program derived addresses
MAX_SEEDS = 16
MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"

# Integer bounds
U64_MAX = (1 << 64) - 1

# Units
LAMPORTS_PER_SOL = 1_000_000_000
