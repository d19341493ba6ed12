from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

DIGITS = "0123456789"
SEPARATORS = ".,"


@dataclass(frozen=True)
class Signal:
    text: str
    source: str = ""

    @property
    def value(self) -> Decimal:
        return Decimal(self.text)

    def __str__(self) -> str:
        return self.text


def extract_odds(text: Optional[str]) -> Optional[str]:
    """
    Pull the first decimal-looking number out of `text`.

    "2,35 @odds" -> "2.35", "2.3.5" -> "2.3", "235" -> "235", "abc" -> None.
    A comma decimal separator is normalized to a dot.
    """
    if not text:
        return None
    t = text.replace("\n", " ").strip()

    digits = []
    seen_digit = False
    seen_sep = False
    for c in t:
        if c in DIGITS:
            digits.append(c)
            seen_digit = True
        elif c in SEPARATORS and seen_digit and not seen_sep:
            digits.append(".")
            seen_sep = True
        elif seen_digit:
            break

    out = "".join(digits).rstrip(".")
    return out or None


def extract_signal(text: Optional[str]) -> Optional[Signal]:
    num = extract_odds(text)
    if num is None:
        return None
    return Signal(text=num, source=text or "")
