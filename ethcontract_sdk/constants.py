"""
Default values shared across the ethcontract SDK.
"""

# Receipt polling, in seconds
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_RECEIPT_TIMEOUT = 1.0

# Gas limit attached to read-only calls
DEFAULT_CALL_GAS_LIMIT = 3_000_000

DEFAULT_COMPILE_CACHE_SIZE = 32

# HTTP session defaults for the node client
DEFAULT_RETRY_COUNT = 3
DEFAULT_HTTP_TIMEOUT = 30

# Length of the "0x" prefix on compiled bytecode
CODE_PREFIX_LENGTH = 2

# Keccak selector length in bytes
SELECTOR_LENGTH = 4
