import re
from typing import Optional, Sequence

from app.core.config import settings

DASHED_ID_PATTERN = re.compile(r"^\d{6}-\d{2}-\d{4}$")
UNDASHED_ID_PATTERN = re.compile(r"^\d{12}$")


def format_id_number(digits: str) -> str:
    """950920086687 -> 950920-08-6687"""
    return f"{digits[:6]}-{digits[6:8]}-{digits[8:12]}"


def parse_scan_code(raw: str, prefix: Optional[Sequence[str]] = None) -> Optional[str]:
    """
    Turn scanned QR text into a canonical ID number (NNNNNN-NN-NNNN).

    Accepted forms:
        aux-training-950920-08-6687
        aux-training-950920086687
        950920-08-6687
        950920086687

    Returns None when the text is not a recognisable code. A prefixed code
    is trusted: whatever follows the prefix is returned, reformatted only
    when it is twelve bare digits.
    """
    if raw is None:
        return None
    if prefix is None:
        prefix = settings.scan_prefix_tokens

    code = raw.strip()
    parts = code.split("-")

    if len(parts) >= 3 and tuple(parts[:2]) == tuple(prefix):
        remainder = "-".join(parts[2:])
        if UNDASHED_ID_PATTERN.match(remainder):
            return format_id_number(remainder)
        return remainder

    if DASHED_ID_PATTERN.match(code):
        return code

    if UNDASHED_ID_PATTERN.match(code):
        return format_id_number(code)

    return None
