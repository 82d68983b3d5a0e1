"""
Option Filter Evaluator - narrows the option lists of choice fields.

Rules with an ``options`` sub-rule contribute include/exclude tags for one
target field. Contributions for the same target are unioned, then the
target's original option list is filtered:

1. If any include tags were contributed, keep options sharing one of them.
2. Drop options sharing any exclude tag.

An include filter that matches nothing yields an empty list. That is a
valid outcome, not an error.

This module only computes lists. Writing the resulting selection back into
a value model is the session's job, done with notifications suppressed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from dynaform.schemas.form_spec import Option, VisibilityRule
from dynaform.utils.coercion import stringify, to_sequence

logger = logging.getLogger(__name__)


@dataclass
class TagFilter:
    """Aggregated tag filter for one target field.

    ``include`` stays None until a rule contributes include tags, which is
    different from an include set that matches nothing.
    """

    include: Optional[Set[str]] = None
    exclude: Set[str] = field(default_factory=set)

    def add(self, include_tags: Optional[Iterable[str]], exclude_tags: Optional[Iterable[str]]) -> None:
        # A present-but-empty include list is treated like an absent one
        if include_tags:
            if self.include is None:
                self.include = set()
            self.include.update(include_tags)
        if exclude_tags:
            self.exclude.update(exclude_tags)

    def apply(self, options: Iterable[Option]) -> List[Option]:
        result = list(options)
        if self.include:
            result = [o for o in result if o.has_any_tag(self.include)]
        if self.exclude:
            result = [o for o in result if not o.has_any_tag(self.exclude)]
        return result


def _rule_applies(rule: VisibilityRule, model: Mapping[str, Any]) -> bool:
    """No controller or no condition means the rule always applies."""
    if not rule.field or not rule.field.strip():
        return True
    if not rule.has_condition:
        return True
    return rule.matches(stringify(model.get(rule.field)))


def collect_tag_filters(
    rules: Optional[Iterable[VisibilityRule]],
    model: Mapping[str, Any],
) -> Dict[str, TagFilter]:
    """Aggregate include/exclude tags per target field for matching rules."""
    filters: Dict[str, TagFilter] = {}
    if not rules:
        return filters

    for rule in rules:
        sub = rule.options
        if sub is None:
            continue
        target = sub.target
        if not target or not target.strip():
            continue
        if not _rule_applies(rule, model):
            continue

        filters.setdefault(target, TagFilter()).add(sub.include_tags, sub.exclude_tags)

    return filters


def evaluate_option_filters(
    rules: Optional[Iterable[VisibilityRule]],
    model: Mapping[str, Any],
    original_options: Mapping[str, List[Option]],
) -> Dict[str, List[Option]]:
    """
    Filter the original option lists of targeted fields.

    Args:
        rules: Visibility rules (only those with an options sub-rule count)
        model: Current values keyed by field key (context merged in)
        original_options: Unfiltered options per field key

    Returns:
        Filtered options for every targeted field present in
        ``original_options``. Fields that no applicable rule targets are
        absent from the result and keep their original list.
    """
    filtered: Dict[str, List[Option]] = {}
    for target, tag_filter in collect_tag_filters(rules, model).items():
        original = original_options.get(target)
        if original is None:
            logger.debug(f"Option filter targets unknown field '{target}', skipping")
            continue
        filtered[target] = tag_filter.apply(original)
        logger.debug(
            f"Option filter for '{target}': {len(filtered[target])}/{len(original)} options kept"
        )
    return filtered


def reselect(options: List[Option], current: Any, multi: bool = False) -> Any:
    """
    Carry a selection over to a re-filtered option list.

    Single-select keeps ``current`` if its value is still offered, else
    falls back to the first remaining option (None when the list is empty).
    Multi-select keeps the values still offered, in option order, and drops
    the rest.
    """
    values = [o.value for o in options]

    if multi:
        wanted = {stringify(v) for v in to_sequence(current)}
        return [v for v in values if v in wanted]

    selected = stringify(current)
    if selected is not None and selected in values:
        return selected
    return values[0] if values else None
