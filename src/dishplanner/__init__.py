"""Dishplanner - meal plans, dish combinations and shopping lists from a recipe catalog."""

__version__ = "0.1.0"
