"""Domain errors raised by the planning engine.

Every error carries a machine-readable ``kind``, a human-readable ``details``
string meant to be shown to end users verbatim, and an optional remediation
``hint``. None of them are retried automatically: selection over the same
filtered set fails the same way until the preferences change.
"""

from dataclasses import dataclass
from typing import Any


class PlannerError(Exception):
    """Base exception for planning engine errors."""

    kind = "planner_error"
    default_hint: str | None = None

    def __init__(self, details: str, hint: str | None = None):
        super().__init__(details)
        self.details = details
        self.hint = hint if hint is not None else self.default_hint

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "error": self.kind, "details": self.details}
        if self.hint:
            payload["hint"] = self.hint
        return payload

    def __str__(self) -> str:
        return self.details


class ValidationError(PlannerError):
    """Raised when preferences or request bounds are malformed, before any selection runs."""

    kind = "validation_error"


class EmptyCatalogError(PlannerError):
    """Raised when the recipe catalog holds no recipes at all."""

    kind = "empty_catalog"
    default_hint = "Load a recipe catalog before requesting plans."

    def __init__(self, details: str = "Recipe catalog is empty", hint: str | None = None):
        super().__init__(details, hint)


class NoEligibleRecipesError(PlannerError):
    """Raised when filtering leaves no candidates."""

    kind = "no_eligible_recipes"
    default_hint = "Try fewer dietary restrictions, a higher skill level or a longer time limit."

    def __init__(self, constraint: str, details: str | None = None, hint: str | None = None):
        super().__init__(
            details or f"No recipes available after filtering (constraint: {constraint})",
            hint,
        )
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["constraint"] = self.constraint
        return payload


class RecipeNotFoundError(PlannerError):
    """Raised when a recipe lookup by id or name finds nothing."""

    kind = "recipe_not_found"


class CatalogError(PlannerError):
    """Raised when a recipe catalog cannot be loaded or is inconsistent."""

    kind = "catalog_error"


@dataclass(frozen=True)
class PartialResultWarning:
    """A result was produced but smaller than requested.

    Returned alongside the result instead of raised, so callers can decide
    whether to retry with relaxed constraints.
    """

    details: str
    requested: int
    produced: int
    kind: str = "partial_result"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "details": self.details,
            "requested": self.requested,
            "produced": self.produced,
        }
