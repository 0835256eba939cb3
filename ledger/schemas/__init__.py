"""
Schemas & Encoding

Public API for ledger data models, canonical encoding, error taxonomy and
verification results.
"""

from .versioning import (
    ENCODING_VERSION,
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    SchemaVersion,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
    is_compatible_schema_version,
)

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    HEADER_LAYOUT,
    MAX_UINT32,
    MAX_UINT64,
    TRANSACTION_LAYOUT,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    encode_header,
    encode_transaction,
)

from .errors import (
    BlockRangeError,
    CanonicalizationException,
    ChainValidationError,
    ErrorCodes,
    LedgerError,
    LedgerException,
    MempoolValidationError,
    MiningError,
    RangeError,
    StateFileError,
    TransactionNotFoundError,
    TransactionRangeError,
)

from .chain import (
    GENESIS_PREVIOUS_HASH,
    Block,
    BlockHeader,
    Blockchain,
    HashHex,
    Mempool,
    MempoolEntry,
    Transaction,
    normalize_hash,
)

from .proof import (
    InclusionProof,
    ProofStep,
    SiblingPosition,
)

from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)
