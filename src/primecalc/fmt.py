# src/primecalc/fmt.py
from __future__ import annotations

import re

from primecalc.oracle import U128_MAX
from primecalc.runtime import CFG
from primecalc.utility import UserInputError

# ---- number parsing helpers ----
_THIN_SPACES = ("\u2009", "\u202F", "\u00A0")  # thin, narrow no-break, no-break
_SEP_CLASS = r"[ ,._']"  # one separator per number; thin spaces are folded to ' '
_PLAIN_RE = re.compile(r"^\+?\d[\d_]*$")
_GROUPED_RE = re.compile(rf"^\+?\d{{1,3}}(?P<sep>{_SEP_CLASS})\d{{3}}(?:(?P=sep)\d{{3}})*$")

# 2**128 - 1 has 39 digits; anything much longer is rejected before int()
_MAX_INPUT_CHARS = 80


def _not_a_number(text: str) -> UserInputError:
    return UserInputError(f"Not possible to convert '{text}' into a positive integer")


def parse_number(text: str) -> int:
    """Parse decimal input for the oracle.

    Accepts: 42  +42  1_000_000  1.000.000  1,000,000  1 000 000
    Rejects: -7  3.14  1,23  0xFF  and anything above 2**128 - 1
    """
    if text is None:
        raise _not_a_number("")

    s = text.strip()
    if not s or len(s) > _MAX_INPUT_CHARS:
        raise _not_a_number(text)

    for ch in _THIN_SPACES:
        s = s.replace(ch, " ")

    if _PLAIN_RE.match(s) and not s.endswith("_"):
        n = int(s.replace("_", ""))
    elif _GROUPED_RE.match(s):
        n = int(re.sub(_SEP_CLASS, "", s))
    else:
        raise _not_a_number(text)

    if n > U128_MAX:
        raise _not_a_number(text)
    return n


def group_digits(n: int, sep: str | None = None) -> str:
    """Render n with thousands grouping; sep=None reads FORMATTING.GROUP_SEPARATOR."""
    if sep is None:
        sep = str(CFG("FORMATTING.GROUP_SEPARATOR", "."))
    if not sep:
        return str(n)
    return f"{n:,}".replace(",", sep)
