"""
Derivation of partition keys from user identities.
"""

from __future__ import annotations

import re
from typing import Optional

_UNSAFE_CHARS = re.compile(r"[^a-z0-9._-]")


def _replacement(match: re.Match) -> str:
    # Characters outside the BMP count as two UTF-16 code units, matching
    # keys produced by the JavaScript server.
    return "__" if ord(match.group()) > 0xFFFF else "_"


def derive_storage_key(identity: Optional[str]) -> str:
    """
    Lowercase the identity and replace every character outside
    ``[a-z0-9._-]`` with ``_``. ``None`` and ``""`` map to ``""``.

    Distinct identities may collapse to the same key (``A@x.com`` and
    ``a@x.com``); they then share one partition.
    """
    return _UNSAFE_CHARS.sub(_replacement, str(identity or "").lower())
