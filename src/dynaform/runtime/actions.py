"""Resolution of a form's submit and dismiss actions."""

from dataclasses import dataclass
from typing import Iterable, Optional

from dynaform.config.settings import EngineSettings, get_settings
from dynaform.schemas.form_spec import ActionSpec

DEFAULT_SUBMIT_ID = "ok"
DEFAULT_DISMISS_ID = "cancel"


@dataclass(frozen=True)
class ResolvedActions:
    """The one action that submits and the one that dismisses."""

    submit: ActionSpec
    dismiss: ActionSpec

    def kind_of(self, action_id: str) -> Optional[str]:
        """'submit', 'dismiss' or None for an action id."""
        if action_id == self.submit.id:
            return "submit"
        if action_id == self.dismiss.id:
            return "dismiss"
        return None


def resolve_actions(
    actions: Optional[Iterable[ActionSpec]],
    settings: Optional[EngineSettings] = None,
) -> ResolvedActions:
    """
    Pick the submit and dismiss actions in declaration order.

    The first action flagged ``submit`` or ``primary`` submits; the first
    flagged ``dismiss`` dismisses. A missing role gets a synthetic action.
    """
    settings = settings or get_settings()
    submit: Optional[ActionSpec] = None
    dismiss: Optional[ActionSpec] = None

    for action in actions or ():
        if submit is None and (action.submit or action.primary):
            submit = action
        if dismiss is None and action.dismiss:
            dismiss = action

    if submit is None:
        submit = ActionSpec(
            id=DEFAULT_SUBMIT_ID, label=settings.submit_label, primary=True, submit=True
        )
    if dismiss is None:
        dismiss = ActionSpec(id=DEFAULT_DISMISS_ID, label=settings.dismiss_label, dismiss=True)

    return ResolvedActions(submit=submit, dismiss=dismiss)
