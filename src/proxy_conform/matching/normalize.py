"""Name normalization shared by masters and proxies."""

import re

# Anything that is not a letter or digit: ".", "_", "-", whitespace, brackets...
_NON_ALNUM = re.compile(r"[\W_]+", re.UNICODE)


def normalize_name(name: str) -> str:
    """Collapse naming variants to a comparison key.

    ``"A_001"``, ``"a-001"``, ``"A 001"`` and ``"a.001"`` all become
    ``"a001"``. The function is idempotent.
    """
    return _NON_ALNUM.sub("", name.casefold())
