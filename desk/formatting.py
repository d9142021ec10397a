"""
Currency and date display helpers shared by the desk screens.
"""
from datetime import date, datetime
from typing import Any, Optional


class Formatter:
    """Formats amounts as '<CODE> 1,234.500' and ISO dates as '15 Jan 2024'."""

    def __init__(self, currency_code: str = "OMR", decimals: int = 3) -> None:
        self.currency_code = currency_code
        self.decimals = decimals

    @classmethod
    def from_config(cls, config) -> "Formatter":
        return cls(config.currency_code, config.currency_decimals)

    def format_currency(self, value: Any) -> str:
        return f"{self.currency_code} {to_number(value):,.{self.decimals}f}"

    def format_date(self, value: Optional[Any]) -> str:
        if not value:
            return "-"
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return value
        if isinstance(value, (date, datetime)):
            return value.strftime("%d %b %Y")
        return str(value)


def to_number(value: Any) -> float:
    """Lenient numeric coercion: None, blanks and junk become 0."""
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
