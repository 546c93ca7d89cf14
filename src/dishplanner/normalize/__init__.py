"""Normalize durations and ingredient amounts."""

from dishplanner.normalize.units import (
    CombinedQuantity,
    ParsedAmount,
    combine_quantities,
    extract_quantity_and_unit,
    format_duration,
    format_number,
    is_qualifier,
    normalize_ingredient_name,
    parse_duration_minutes,
    round_half_up,
    scale_amount,
)

__all__ = [
    "CombinedQuantity",
    "ParsedAmount",
    "combine_quantities",
    "extract_quantity_and_unit",
    "format_duration",
    "format_number",
    "is_qualifier",
    "normalize_ingredient_name",
    "parse_duration_minutes",
    "round_half_up",
    "scale_amount",
]
