"""Text processing utilities."""

import re

from todolist.core.constants import MAX_SUBDOMAIN_LENGTH


def suggest_subdomain(name: str, max_length: int = MAX_SUBDOMAIN_LENGTH) -> str:
    """Derive a subdomain label from a tenant name.

    Lowercases, drops anything outside ``[a-z0-9 -]``, collapses runs of
    spaces and hyphens into one hyphen and trims hyphens from both ends
    so the result is a valid DNS label (if it is long enough).

    Args:
        name: The tenant's display name
        max_length: Maximum length of the label (default 63)

    Returns:
        Lowercase label, possibly empty

    Examples:
        >>> suggest_subdomain("Acme Corp")
        'acme-corp'
        >>> suggest_subdomain("Hello! World_2024")
        'hello-world2024'
    """
    label = name.lower().strip()
    label = re.sub(r"[^a-z0-9\s-]", "", label)
    label = re.sub(r"[-\s]+", "-", label)
    return label[:max_length].strip("-")
