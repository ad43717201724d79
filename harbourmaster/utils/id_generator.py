"""Name slug generation for containers."""

import secrets
import string

ALPHANUMERIC = string.ascii_letters + string.digits


def generate_slug(length: int) -> str:
    """Generate a random alphanumeric slug of the given length."""
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def slugged_name(base_name: str | None, slug_length: int = 0, separator: str = "_") -> str | None:
    """
    Append a random slug to a container name.

    Useful when creating many containers that should have human readable
    names without colliding, e.g. ``test_container_Xk3p9Q``.

    Args:
        base_name: The requested container name (None means engine-assigned)
        slug_length: Number of slug characters; 0 disables the slug
        separator: Text placed between the name and the slug

    Returns:
        The name with slug appended, or None when no name was requested
    """
    if base_name is None:
        return None
    if slug_length <= 0:
        return base_name
    return f"{base_name}{separator}{generate_slug(slug_length)}"
