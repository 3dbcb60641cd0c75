"""Application-wide constants.

Field lengths, pagination limits and token settings shared by the
ORM models, the request schemas and the auth backend.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 255
MAX_CODE_LENGTH = 100
MAX_PATH_LENGTH = 255
MAX_ICON_LENGTH = 64

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72  # bcrypt ignores anything past 72 bytes
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
