"""Classification of constraint violations raised on flush."""

from sqlalchemy.exc import IntegrityError


# Fragments of the driver messages for unique and primary key violations.
# PostgreSQL: 'duplicate key value violates unique constraint "uq_user_role"'
# SQLite: 'UNIQUE constraint failed: user_roles.user_id, user_roles.role_id'
_UNIQUE_MARKERS = ("unique", "duplicate")


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a duplicate row apart from other integrity failures.

    Foreign key violations (a referenced user or role deleted by another
    transaction) return False.
    """
    message = str(exc.orig if exc.orig is not None else exc).lower()
    return any(marker in message for marker in _UNIQUE_MARKERS)
