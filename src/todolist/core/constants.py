"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Subdomains (DNS label rules)
MIN_SUBDOMAIN_LENGTH = 3
MAX_SUBDOMAIN_LENGTH = 63
SUBDOMAIN_PATTERN = r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$"

# Tenant fields
MIN_TENANT_NAME_LENGTH = 2
MAX_TENANT_NAME_LENGTH = 100
HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"
MAX_LOGO_URL_LENGTH = 2048

# String field lengths
MAX_EMAIL_LENGTH = 255
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100

# Todo fields
MAX_TODO_TITLE_LENGTH = 255
MAX_TODO_DESCRIPTION_LENGTH = 1000
MAX_LIST_TITLE_LENGTH = 255
UPCOMING_WINDOW_DAYS = 7

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32
PASSWORD_RESET_PURPOSE = "password-reset"

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Tenant cache
TENANT_CACHE_PREFIX = "tenant:subdomain:"
