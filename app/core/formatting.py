# app/core/formatting.py
import math
import unicodedata
from typing import Any


def format_idr(value: Any) -> str:
    """Format an amount the way the storefront shows it: `Rp 1.250.000`."""
    try:
        num = float(value or 0)
    except (TypeError, ValueError):
        num = 0.0
    if not math.isfinite(num):
        num = 0.0
    amount = math.floor(abs(num) + 0.5)
    sign = "-" if num < 0 else ""
    return f"{sign}Rp {amount:,}".replace(",", ".")


def format_price(value: Any) -> str:
    """Like format_idr, but non-numeric prices are shown as stored."""
    if isinstance(value, bool):
        return str(value)
    try:
        num = float(value)
    except (TypeError, ValueError):
        return str(value or "")
    if not math.isfinite(num):
        return str(value or "")
    return format_idr(num)


def display_text(value: Any) -> str:
    """Trimmed text, or '-' when empty."""
    text = str(value if value is not None else "").strip()
    return text or "-"


def collation_key(value: Any) -> tuple[str, str]:
    """
    Sort key for shopper-facing text, independent of the process locale.

    Accents are folded and case ignored ("Éclair" sorts between "alpha"
    and "Zeta"); the raw text breaks ties so the order is deterministic.
    """
    text = str(value if value is not None else "")
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded.casefold(), text
