import re
from datetime import datetime

from remitos.constants import NUMBER_WIDTH

_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def money(v: float) -> str:
    return f"${v:.2f}"


def plain_number(v: float) -> str:
    """2.0 -> '2', 2.5 -> '2.5'"""
    v = float(v)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def remito_number(n: int) -> str:
    return str(n).zfill(NUMBER_WIDTH)


def short_date(when: datetime) -> str:
    return when.strftime("%d/%m/%Y")


def safe_filename_part(text: str, default: str = "cliente") -> str:
    t = re.sub(r"\s+", "_", (text or "").strip())
    t = _UNSAFE_FILENAME.sub("", t)
    return t or default
