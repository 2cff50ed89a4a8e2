"""
Shared Constants Module.

Common constants used across the pet-care marketplace services.
"""

# =============================================================================
# SYSTEM CONSTANTS
# =============================================================================

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


# =============================================================================
# USER ROLES
# =============================================================================

class UserRole:
    """
    Role claim values issued by the auth service.

    These are the literal strings stored on user accounts, so they are
    compared as-is against the token's ``role`` claim.
    """
    PET_OWNER = "Pet owner"
    SERVICE_PROVIDER = "Service provider"
    MANAGER = "Manager"

    ALL = (PET_OWNER, SERVICE_PROVIDER, MANAGER)
