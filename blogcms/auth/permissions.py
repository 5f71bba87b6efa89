"""Role hierarchy used by the identity provider."""

# Define role hierarchy (higher index = more permissions)
ROLE_HIERARCHY = {
    "user": 0,
    "moderator": 1,
    "admin": 2,
}


def has_role_or_higher(user_role: str, required_role: str) -> bool:
    """
    Check if user has the required role or higher.

    Unknown user roles rank lowest. Unknown required roles cannot be met.

    Args:
        user_role: User's current role
        required_role: Required role for access

    Returns:
        bool: True if user has required role or higher
    """
    user_level = ROLE_HIERARCHY.get(user_role, 0)
    required_level = ROLE_HIERARCHY.get(required_role, max(ROLE_HIERARCHY.values()) + 1)
    return user_level >= required_level
