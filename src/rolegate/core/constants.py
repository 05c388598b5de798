"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_ROLE_NAME_LENGTH = 100
MAX_PERMISSION_CODE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Identity propagation
DEFAULT_IDENTITY_HEADER = "X-User-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Built-in permission codes gating the admin surface
MANAGE_USERS = "manage_users"
MANAGE_ROLES = "manage_roles"
MANAGE_PERMISSIONS = "manage_permissions"
VIEW_DASHBOARD = "view_dashboard"
