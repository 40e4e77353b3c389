"""Namespace classification for scoping the system pod check."""

from __future__ import annotations

from healthchecker.models.config import NamespaceRule


def is_system_namespace(name: str, rule: NamespaceRule) -> bool:
    """Return True if *name* is a platform/system namespace under *rule*.

    A namespace qualifies if it starts with any configured prefix or equals
    any configured exact name.  An empty rule matches nothing.
    """
    if any(name.startswith(prefix) for prefix in rule.prefixes):
        return True
    return name in rule.exact_names
