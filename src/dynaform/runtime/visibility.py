"""
Visibility Evaluator - decides which fields are shown or hidden.

Every call starts from "all fields visible" and replays the rules against
the current values, so the result depends only on its inputs.

Precedence: a field named by any matched hide (directly or via hide tags)
stays hidden even if another matched rule shows it. Rule order does not
matter.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Set

from dynaform.schemas.form_spec import FieldSpec, VisibilityRule
from dynaform.utils.coercion import stringify

logger = logging.getLogger(__name__)


def controller_value(model: Mapping[str, Any], key: str) -> Optional[str]:
    """String form of a controller field's current value (None if unset)."""
    return stringify(model.get(key))


def _tagged_keys(fields: Iterable[FieldSpec], tags: Optional[Iterable[str]]) -> Set[str]:
    """Keys of fields carrying at least one of the given tags."""
    if not tags:
        return set()
    wanted = set(tags)
    return {f.key for f in fields if any(t in wanted for t in f.tags)}


def evaluate_visibility(
    rules: Optional[Iterable[VisibilityRule]],
    model: Mapping[str, Any],
    fields: Iterable[FieldSpec],
) -> Set[str]:
    """
    Compute the set of hidden field keys.

    Args:
        rules: Visibility rules in declaration order (None means no rules)
        model: Current values keyed by field key (context merged in)
        fields: All fields of the form; their keys are the universe and
            their tags feed showTags/hideTags matching

    Returns:
        Keys of fields that must be hidden
    """
    fields = list(fields)
    universe = {f.key for f in fields}
    if not rules:
        return set()

    show: Set[str] = set()
    hide: Set[str] = set()
    matched = 0

    for rule in rules:
        # Rules without a controller only carry option filters
        if not rule.has_controller:
            continue
        if not rule.matches(controller_value(model, rule.field)):
            continue

        matched += 1
        show.update(rule.show or ())
        hide.update(rule.hide or ())
        show.update(_tagged_keys(fields, rule.show_tags))
        hide.update(_tagged_keys(fields, rule.hide_tags))

    hidden = hide & universe
    logger.debug(
        f"Visibility: {matched} rules matched, "
        f"{len(show - hide)} shown, {len(hidden)} hidden"
    )
    return hidden


class VisibilityEvaluator:
    """Visibility evaluation bound to one form's rules and fields."""

    def __init__(self, rules: Iterable[VisibilityRule], fields: Iterable[FieldSpec]):
        self.rules = list(rules or ())
        self.fields = list(fields)

    def evaluate(self, model: Mapping[str, Any]) -> Set[str]:
        """Hidden field keys for the given values."""
        return evaluate_visibility(self.rules, model, self.fields)

    def visibility_map(self, model: Mapping[str, Any]) -> Dict[str, bool]:
        """Field key -> True (visible) / False (hidden), in field order."""
        hidden = self.evaluate(model)
        return {f.key: f.key not in hidden for f in self.fields}
