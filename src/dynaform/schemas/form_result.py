"""Result snapshot produced when a form session completes."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class FormResult:
    """Outcome of a form session.

    Attributes:
        submitted: True if the form was submitted, False if dismissed.
        values: Read-only snapshot of field values keyed by field key.
    """

    submitted: bool
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Detach from the caller's dict so later model edits do not leak in
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, key: str) -> Optional[Any]:
        return self.values.get(key)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)
