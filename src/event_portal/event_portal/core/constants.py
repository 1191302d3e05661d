"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
UNKNOWN_STUDENT_NAME = "Unknown Student"
QR_TOKEN_PREFIX = "EVENT"
QR_TOKEN_BYTES = 24
MAX_QR_TOKEN_ATTEMPTS = 5
ZERO_AMOUNT = Decimal("0.00")

# Column limits from database/schema.sql; longer input is rejected, not truncated.
MAX_PENALTY_AMOUNT = Decimal("99999999.99")
MAX_TITLE_LENGTH = 200
MAX_VENUE_LENGTH = 200
MAX_NAME_LENGTH = 150
MAX_EMAIL_LENGTH = 255
MAX_IDENTIFIER_LENGTH = 50
MAX_DETAILS_LENGTH = 150
