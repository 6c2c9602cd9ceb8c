"""Auto-derived tab names from query text."""

from __future__ import annotations

import re

DEFAULT_TAB_NAME = "New Query"

# Leading verb, then either "... FROM <target>" or the verb's direct target
_VERB_TARGET_RE = re.compile(
    r"^\s*(SELECT|INSERT|UPDATE|DELETE|CREATE|ALTER|DROP)\s+(?:.*?FROM\s+)?([^\s;]+)",
    re.IGNORECASE,
)


def derive_tab_name(text: str) -> str:
    """Return ``"<VERB> <target>"`` for recognisable SQL, else the default.

    >>> derive_tab_name("SELECT * FROM orders;")
    'SELECT orders'
    >>> derive_tab_name("garbage")
    'New Query'
    """
    match = _VERB_TARGET_RE.match(text.strip())
    if match is None:
        return DEFAULT_TAB_NAME
    verb, target = match.groups()
    return f"{verb.upper()} {target}"
