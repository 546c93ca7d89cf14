"""Duration parsing, ingredient amount scaling and quantity combination."""

import math
import re
from dataclasses import dataclass, field

from dishplanner.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Durations
# =============================================================================

_HOURS_PATTERN = re.compile(r"(\d+)\s*(?:hours?|hrs?|h)(?![a-z])", re.IGNORECASE)
_MINUTES_PATTERN = re.compile(r"(\d+)\s*(?:minutes?|mins?|m)(?![a-z])", re.IGNORECASE)


def parse_duration_minutes(text: str | None) -> int:
    """
    Parse a duration string into whole minutes.

    Handles formats like:
    - "30 minutes"
    - "1 hour"
    - "1 hour 30 minutes"
    - "2h 15min"

    Strings without a recognizable hour or minute unit parse to 0.
    """
    if not text:
        return 0

    total = 0

    hour_match = _HOURS_PATTERN.search(text)
    if hour_match:
        total += int(hour_match.group(1)) * 60

    minute_match = _MINUTES_PATTERN.search(text)
    if minute_match:
        total += int(minute_match.group(1))

    return total


def format_duration(minutes: int) -> str:
    """Format whole minutes as a duration string the parser reads back."""
    minutes = max(0, int(minutes))
    if minutes < 60:
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"

    hours, remaining = divmod(minutes, 60)
    hours_str = "1 hour" if hours == 1 else f"{hours} hours"
    if remaining == 0:
        return hours_str

    minutes_str = "1 minute" if remaining == 1 else f"{remaining} minutes"
    return f"{hours_str} {minutes_str}"


# =============================================================================
# Amounts
# =============================================================================

# Non-numeric qualifiers are never rescaled
QUALIFIERS: tuple[str, ...] = (
    "to taste",
    "a pinch",
    "pinch",
    "a dash",
    "dash",
    "a little",
    "a few",
    "some",
    "as needed",
)

_AMOUNT_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)(\s*)(.*)$")


@dataclass(frozen=True)
class ParsedAmount:
    """A numeric ingredient amount split into its parts."""

    value: float
    separator: str
    unit: str


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going away from zero for positive values."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Round to 2 decimals; whole numbers print without a decimal point."""
    rounded = round_half_up(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")


def is_qualifier(amount: str) -> bool:
    """Check whether an amount is a non-numeric qualifier like "to taste"."""
    text = amount.strip().lower()
    if not text or text[0].isdigit():
        return False
    return any(qualifier in text for qualifier in QUALIFIERS)


def extract_quantity_and_unit(amount: str) -> ParsedAmount | None:
    """
    Split a numeric amount into value, separator and unit text.

    Examples:
        "200g" -> ParsedAmount(200.0, "", "g")
        "2 cups" -> ParsedAmount(2.0, " ", "cups")
        "to taste" -> None
    """
    if not amount:
        return None

    match = _AMOUNT_PATTERN.match(amount.strip())
    if not match:
        return None

    return ParsedAmount(
        value=float(match.group(1)),
        separator=match.group(2),
        unit=match.group(3),
    )


def scale_amount(amount: str, factor: float) -> str:
    """
    Scale an ingredient amount by a factor.

    Qualifiers and amounts that do not start with a number pass through
    unchanged; the unit text of numeric amounts is preserved verbatim.
    """
    if is_qualifier(amount):
        return amount

    parsed = extract_quantity_and_unit(amount)
    if parsed is None:
        return amount

    return f"{format_number(parsed.value * factor)}{parsed.separator}{parsed.unit}"


# =============================================================================
# Quantity Combination
# =============================================================================


@dataclass
class CombinedQuantity:
    """
    A shopping quantity built from one or more ingredient amounts.

    Amounts sharing a unit are summed; anything else is kept as its own
    term and the display joins the terms with " + ". Terms display in a
    canonical order so the result does not depend on the order amounts
    were added in.
    """

    numeric: dict[str, float] = field(default_factory=dict)
    separators: dict[str, str] = field(default_factory=dict)
    literals: list[str] = field(default_factory=list)

    @classmethod
    def from_amount(cls, amount: str) -> "CombinedQuantity":
        quantity = cls()
        parsed = None if is_qualifier(amount) else extract_quantity_and_unit(amount)
        if parsed is None:
            quantity.literals.append(amount.strip())
        else:
            quantity.numeric[parsed.unit] = parsed.value
            quantity.separators[parsed.unit] = parsed.separator
        return quantity

    def __add__(self, other: "CombinedQuantity") -> "CombinedQuantity":
        """Combine two quantities, summing terms that share a unit."""
        numeric = dict(self.numeric)
        separators = dict(self.separators)
        for unit, value in other.numeric.items():
            if unit in numeric:
                numeric[unit] = round_half_up(numeric[unit] + value, 2)
            else:
                numeric[unit] = value
                separators[unit] = other.separators[unit]

        if other.literals or self.literals:
            logger.debug(
                f"Keeping non-numeric quantities as literal terms: "
                f"{self.literals + other.literals}"
            )

        return CombinedQuantity(
            numeric=numeric,
            separators=separators,
            literals=self.literals + other.literals,
        )

    @property
    def is_numeric(self) -> bool:
        """True when the quantity is a single number with one unit."""
        return len(self.numeric) == 1 and not self.literals

    def terms(self) -> list[str]:
        """Display terms: numeric terms ordered by unit, then literals."""
        numeric_terms = [
            f"{format_number(self.numeric[unit])}{self.separators.get(unit, '')}{unit}"
            for unit in sorted(self.numeric, key=lambda u: (u.casefold(), u))
        ]
        literal_terms = sorted(self.literals, key=lambda t: (t.casefold(), t))
        return numeric_terms + literal_terms

    def to_display_string(self) -> str:
        """Convert back to a human-readable quantity."""
        return " + ".join(self.terms())


def combine_quantities(first: str, second: str) -> str:
    """
    Combine two amount strings.

    Same-unit numeric amounts are summed ("400g" + "200g" -> "600g");
    otherwise both stay visible, joined by " + ".
    """
    combined = CombinedQuantity.from_amount(first) + CombinedQuantity.from_amount(second)
    return combined.to_display_string()


# =============================================================================
# Ingredient Names
# =============================================================================


def normalize_ingredient_name(name: str) -> str:
    """Lowercase and collapse whitespace for keyword matching."""
    if not name:
        return ""
    return " ".join(name.lower().split())
