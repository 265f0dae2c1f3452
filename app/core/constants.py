"""Application constants."""

from app.core.enums import Theme

# Username rules (registration)
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 100
USERNAME_PATTERN = r"^[a-zA-Z0-9_-]+$"

# Email rules (register and login)
EMAIL_MAX_LENGTH = 255

# Password rules (registration)
PASSWORD_MIN_LENGTH = 6

# Defaults for the user_settings row created at registration
DEFAULT_THEME = Theme.LIGHT
DEFAULT_CURRENCY = "USD"
DEFAULT_NOTIFICATIONS_ENABLED = False
DEFAULT_EMAIL_ALERTS = False

# Client-facing messages
MSG_REGISTERED = "User registered successfully"
MSG_LOGGED_IN = "Login successful"
MSG_PROFILE = "User profile retrieved"
MSG_USER_EXISTS = "User with this email or username already exists"
MSG_INVALID_CREDENTIALS = "Invalid email or password"
MSG_USER_NOT_FOUND = "User not found"
MSG_AUTH_REQUIRED = "Authentication required. Please provide a valid token."
MSG_INVALID_TOKEN = "Invalid or expired token. Please login again."
MSG_VALIDATION_FAILED = "Validation failed"
MSG_INVALID_EMAIL = "Please provide a valid email"
MSG_INTERNAL_ERROR = "Internal server error"
