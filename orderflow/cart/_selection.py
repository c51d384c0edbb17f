"""
AddonSelectionValidator — category rules for addon choices.

For each category attached to a product:

    min = min_selection if set, else 1 if required else 0
    max = max_selection (0 = unlimited)

A selection is valid when every category has ``min <= count`` and, if
bounded, ``count <= max``. Unavailable addons never count as selectable.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from orderflow._errors import Errors, ValidationError
from orderflow._types import Error, Ok, Result
from orderflow.catalog import Addon, AddonCategory


class AddonSelectionValidator:
    @staticmethod
    def bounds(category: AddonCategory) -> tuple[int, int]:
        if category.min_selection > 0:
            minimum = category.min_selection
        else:
            minimum = 1 if category.required else 0
        return minimum, max(category.max_selection, 0)

    @staticmethod
    def count(category: AddonCategory, selected: Collection[str]) -> int:
        return sum(1 for addon in category.addons if addon.id in selected)

    @classmethod
    def check(
        cls,
        categories: Iterable[AddonCategory],
        selected: Collection[str],
    ) -> Result[None, ValidationError]:
        """
        Validate a full selection against the product's categories.

        The first failing category is named in the error.
        """
        categories = tuple(categories)
        known: dict[str, Addon] = {
            addon.id: addon for category in categories for addon in category.addons
        }
        for addon_id in selected:
            addon = known.get(addon_id)
            if addon is None:
                return Error(Errors.unknown("addon", addon_id))
            if not addon.is_available:
                return Error(Errors.unavailable("addon", addon.name))

        for category in categories:
            minimum, maximum = cls.bounds(category)
            count = cls.count(category, selected)
            if count < minimum:
                return Error(
                    Errors.invalid_selection(
                        category.name,
                        f"Choose at least {minimum} option(s) in {category.name}",
                    )
                )
            if maximum and count > maximum:
                return Error(
                    Errors.invalid_selection(
                        category.name,
                        f"Choose at most {maximum} option(s) in {category.name}",
                    )
                )
        return Ok(None)

    @classmethod
    def toggle(
        cls,
        selected: frozenset[str],
        addon: Addon,
        category: AddonCategory,
    ) -> Result[frozenset[str], ValidationError]:
        """
        Flip one addon in a selection.

        Turning an addon off always works. Turning one on fails when it is
        unavailable or its category is already at its maximum.
        """
        if addon.id in selected:
            return Ok(selected - {addon.id})
        if not addon.is_available:
            return Error(Errors.unavailable("addon", addon.name))
        _, maximum = cls.bounds(category)
        if maximum and cls.count(category, selected) >= maximum:
            return Error(Errors.max_selection_reached(category.name, maximum))
        return Ok(selected | {addon.id})


__all__ = ("AddonSelectionValidator",)
