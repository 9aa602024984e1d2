"""DBF format constants, markers, and fixed sizes."""

# Header preamble
HEADER_PREAMBLE_SIZE = 32   # version(1) + date(3) + count(4) + header len(2) + record len(2) + reserved(20)

# Field descriptor table
FIELD_DESCRIPTOR_SIZE = 32
FIELD_NAME_SIZE = 11
HEADER_TERMINATOR = 0x0D    # Replaces the first name byte of the next descriptor

# Record stream
DATA_ENDED = 0x1A           # End of the record area
DATA_DELETED = 0x2A         # '*' deletion flag
DELETION_FLAG_SIZE = 1

# dBase stores the update year as years since 1900
YEAR_BASE = 1900

# Fixed-width field types
DATE_LENGTH = 8
INTEGER_LENGTH = 4

# Memo link encodings: binary block number (VFP) or ASCII block number (dBase III/IV)
MEMO_BINARY_LENGTH = 4
MEMO_TEXT_LENGTH = 10

# Marker some writers use for unset numeric fields
NUMERIC_UNSET_MARKER = b"?"

# Logical values that decode to True
LOGICAL_TRUE = frozenset(b"YyTt")
