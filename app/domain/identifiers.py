"""
app/domain/identifiers.py

Public identifiers exposed through the API (``u_``, ``m_``, ``v_``, ``r_``).
"""

from __future__ import annotations

import uuid

UPLOAD_PREFIX = "u"
MAPPING_PREFIX = "m"
VALIDATION_PREFIX = "v"
REPORT_PREFIX = "r"


def new_public_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"
