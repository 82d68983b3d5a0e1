"""
Form Session Controller - owns the value model of one form interaction.

Lifecycle:

    BUILDING     fields are registered (initial values handed to the renderer)
       |  start(): initial visibility + option filter pass
    INTERACTIVE  field changes re-run visibility, then option filters
       |  request_submit() (only if validation passes) / request_dismiss()
    COMPLETED    terminal; ``result`` holds the snapshot

The session is the only writer of the value model. A renderer talks to it
through ``notify_changed`` and the submit/dismiss entry points, and gets
told what to show through a ``FormRenderer``.

Two rules keep renderer callbacks from looping back into the evaluators:
- while the session writes to the renderer it suppresses notifications,
  so echoes of its own writes are dropped;
- a notification that arrives while another one is being processed (for
  example from ``FormRenderer.field_changed``) is queued and handled after
  it, never recursively.
"""

import logging
from collections import deque
from contextlib import contextmanager
from enum import Enum
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Deque,
    Dict,
    FrozenSet,
    Iterator,
    List,
    Mapping,
    Optional,
    Set,
    Tuple,
    Union,
)

from dynaform.config.settings import EngineSettings, get_settings
from dynaform.runtime.actions import resolve_actions
from dynaform.runtime.option_filter import evaluate_option_filters, reselect
from dynaform.runtime.schema_loader import parse_form_spec
from dynaform.runtime.validators import ValidationReport, validate_all
from dynaform.runtime.visibility import VisibilityEvaluator
from dynaform.schemas.field_kind import FieldKind
from dynaform.schemas.form_result import FormResult
from dynaform.schemas.form_spec import FieldSpec, FormSpec, Option
from dynaform.utils.coercion import coerce_field_value

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#000000"

_TEXT_KINDS = frozenset(
    {FieldKind.TEXT, FieldKind.EMAIL, FieldKind.PASSWORD, FieldKind.TEXTAREA, FieldKind.FILE}
)

Getter = Callable[[], Any]


class SessionState(str, Enum):
    """Lifecycle state of a form session."""

    BUILDING = "building"
    INTERACTIVE = "interactive"
    COMPLETED = "completed"


class SessionStateError(Exception):
    """Raised when a session entry point is used in the wrong state."""
    pass


class FormRenderer:
    """Receiver of the session's display updates.

    Every hook is a no-op here; a UI adapter overrides the ones it needs.
    Display hooks are called with notifications suppressed, so an adapter
    may update widgets that fire change events without feeding them back.

    ``field_changed`` is the exception: it runs after a change has been
    applied and re-evaluated, with notifications live, so an adapter can
    cascade follow-up changes (clearing a dependent field, say). Those are
    queued and applied after the current change, never recursively.
    """

    def apply_visibility(self, hidden: Set[str], visible: Set[str]) -> None:
        pass

    def apply_options(self, key: str, options: List[Option], selection: Any) -> None:
        pass

    def show_errors(self, errors: Dict[str, Optional[str]]) -> None:
        pass

    def field_changed(self, key: str, value: Any) -> None:
        pass

    def close(self, result: FormResult) -> None:
        pass


class FormSession:
    """
    State machine for a single form interaction.

    Args:
        spec: Parsed form schema
        data_overrides: Initial values merged over ``spec.data`` (override wins)
        context: Read-only values visible to rule evaluation only; the live
            model overrides them and they never reach the result
        renderer: Display adapter (defaults to a no-op renderer)
        settings: Engine settings (defaults to the process settings)
    """

    def __init__(
        self,
        spec: FormSpec,
        data_overrides: Optional[Mapping[str, Any]] = None,
        context: Optional[Mapping[str, Any]] = None,
        renderer: Optional[FormRenderer] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.spec = spec.with_data(dict(data_overrides) if data_overrides else None)
        self.settings = settings or get_settings()
        self.renderer = renderer or FormRenderer()
        self.actions = resolve_actions(self.spec.actions, self.settings)

        self._context: Mapping[str, Any] = MappingProxyType(dict(context or {}))
        self._model: Dict[str, Any] = dict(self.spec.data)
        self._fields: Dict[str, FieldSpec] = {f.key: f for f in self.spec.fields}
        self._getters: Dict[str, Optional[Getter]] = {}
        self._original_options: Dict[str, List[Option]] = {}
        self._options: Dict[str, List[Option]] = {}
        self._hidden: FrozenSet[str] = frozenset()
        self._errors: Dict[str, Optional[str]] = {}
        self._visibility = VisibilityEvaluator(self.spec.visibility, self.spec.fields)

        self._state = SessionState.BUILDING
        self._result: Optional[FormResult] = None
        self._suppress_depth = 0
        self._pending: Deque[Tuple[str, Any]] = deque()
        self._draining = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_completed(self) -> bool:
        return self._state is SessionState.COMPLETED

    @property
    def submitted(self) -> Optional[bool]:
        """True/False once completed, None before."""
        return self._result.submitted if self._result is not None else None

    @property
    def values(self) -> Mapping[str, Any]:
        return MappingProxyType(self._model)

    @property
    def context(self) -> Mapping[str, Any]:
        return self._context

    @property
    def hidden_fields(self) -> FrozenSet[str]:
        return self._hidden

    @property
    def visible_fields(self) -> List[str]:
        return [key for key in self._fields if key not in self._hidden]

    @property
    def errors(self) -> Dict[str, Optional[str]]:
        """Messages from the latest submit attempt."""
        return dict(self._errors)

    @property
    def result(self) -> FormResult:
        if self._result is None:
            raise SessionStateError("Form session has not completed yet")
        return self._result

    def is_visible(self, key: str) -> bool:
        self._field(key)
        return key not in self._hidden

    def options_for(self, key: str) -> List[Option]:
        """Currently offered options of a choice field (after filtering)."""
        self._field(key)
        return list(self._options.get(key, []))

    def evaluation_view(self) -> Dict[str, Any]:
        """Values rules are evaluated against: context overlaid by the model."""
        view = dict(self._context)
        view.update(self._model)
        return view

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def register_field(self, key: str, getter: Optional[Getter] = None) -> Any:
        """
        Register a field and return the typed initial value to display.

        Args:
            key: Field key declared in the form schema
            getter: Optional callable returning the widget's current value;
                it is read before submit and dismiss

        Returns:
            The initial value, also stored in the value model
        """
        self._require_state(SessionState.BUILDING, "register fields")
        field_spec = self._field(key)
        if key in self._getters:
            raise SessionStateError(f"Field '{key}' is already registered")

        raw = self._model[key] if key in self._model else field_spec.default
        if field_spec.has_options:
            options = field_spec.normalized_options(self.settings.empty_option_label)
            self._original_options[key] = options
            self._options[key] = options

        initial = self._initial_value(field_spec, raw)
        self._model[key] = initial
        self._getters[key] = getter
        return initial

    def start(self) -> "FormSession":
        """Register any remaining fields, run the initial pass, go interactive."""
        self._require_state(SessionState.BUILDING, "start")
        for key in self._fields:
            if key not in self._getters:
                self.register_field(key)

        self._refresh()
        self._state = SessionState.INTERACTIVE
        logger.info(
            f"Form '{self.spec.title}' interactive: {len(self._fields)} fields, "
            f"{len(self._hidden)} hidden"
        )
        return self

    def _initial_value(self, field_spec: FieldSpec, raw: Any) -> Any:
        kind = field_spec.type
        value = coerce_field_value(kind, raw)

        if kind is FieldKind.SELECT:
            return reselect(self._original_options[field_spec.key], value)
        if kind is FieldKind.MULTISELECT:
            return reselect(self._original_options[field_spec.key], value, multi=True)
        if kind is FieldKind.RADIO:
            offered = {o.value for o in self._original_options[field_spec.key]}
            return value if value in offered else None
        if kind in (FieldKind.SLIDER, FieldKind.RANGE) and value is None:
            return field_spec.min if field_spec.min is not None else 0.0
        if kind is FieldKind.COLOR and value is None:
            return DEFAULT_COLOR
        if kind in _TEXT_KINDS and value is None:
            return ""
        return value

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    @contextmanager
    def suppress_notifications(self) -> Iterator[None]:
        """Drop change notifications for the duration of the block."""
        self._suppress_depth += 1
        try:
            yield
        finally:
            self._suppress_depth -= 1

    @property
    def notifications_suppressed(self) -> bool:
        return self._suppress_depth > 0

    def notify_changed(self, key: str, value: Any) -> None:
        """
        Record a new value for a field and re-evaluate rules.

        Notifications raised while another one is being processed are
        queued and applied in arrival order.
        """
        if self._suppress_depth:
            logger.debug(f"Ignoring change of '{key}' during session write")
            return
        if self._state is SessionState.COMPLETED:
            logger.warning(f"Ignoring change of '{key}': session already completed")
            return
        self._require_state(SessionState.INTERACTIVE, "accept field changes")
        self._field(key)

        self._pending.append((key, value))
        if self._draining:
            return

        self._draining = True
        try:
            while self._pending:
                next_key, next_value = self._pending.popleft()
                self._apply_change(next_key, next_value)
        finally:
            self._draining = False

    def _apply_change(self, key: str, value: Any) -> None:
        if self._state is not SessionState.INTERACTIVE:
            return
        self._model[key] = coerce_field_value(self._fields[key].type, value)
        logger.debug(f"Field '{key}' changed to {self._model[key]!r}")
        self._refresh()
        self.renderer.field_changed(key, self._model[key])

    def _refresh(self) -> None:
        """Re-run visibility, then option filters, and push the results."""
        view = self.evaluation_view()

        self._hidden = frozenset(self._visibility.evaluate(view))
        visible = set(self._fields) - self._hidden
        with self.suppress_notifications():
            self.renderer.apply_visibility(set(self._hidden), visible)

        self._refilter(view)

    def _refilter(self, view: Mapping[str, Any]) -> None:
        filtered = evaluate_option_filters(self.spec.visibility, view, self._original_options)

        for key, original in self._original_options.items():
            options = filtered.get(key, original)
            if options == self._options.get(key):
                continue

            field_spec = self._fields[key]
            current = self._model.get(key)
            if field_spec.type is FieldKind.RADIO:
                selection = current if current in {o.value for o in options} else None
            else:
                selection = reselect(options, current, multi=field_spec.is_multi)

            self._options[key] = options
            with self.suppress_notifications():
                self._model[key] = selection
                self.renderer.apply_options(key, list(options), selection)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def request_submit(self) -> ValidationReport:
        """
        Validate and, if everything passes, complete as submitted.

        A failed validation leaves the session interactive with the
        per-field messages available through ``errors``.
        """
        self._require_state(SessionState.INTERACTIVE, "submit")
        self._pull_from_getters()

        report = validate_all(self.spec, self._model, self.settings)
        self._errors = dict(report.errors)
        with self.suppress_notifications():
            self.renderer.show_errors(dict(report.errors))

        if not report.ok:
            logger.warning(
                f"Submission rejected, invalid fields: {', '.join(report.failed_fields)}"
            )
            return report

        self._complete(True)
        return report

    def request_dismiss(self) -> None:
        """Complete as not submitted, without validation."""
        self._require_state(SessionState.INTERACTIVE, "dismiss")
        self._pull_from_getters()
        self._complete(False)

    def trigger(self, action_id: str) -> Optional[ValidationReport]:
        """Run the action with the given id (the resolved submit or dismiss)."""
        kind = self.actions.kind_of(action_id)
        if kind == "submit":
            return self.request_submit()
        if kind == "dismiss":
            self.request_dismiss()
            return None
        raise SessionStateError(f"Unknown action '{action_id}'")

    def _pull_from_getters(self) -> None:
        """Refresh the model from registered widget getters."""
        changed = False
        for key, getter in self._getters.items():
            if getter is None:
                continue
            value = coerce_field_value(self._fields[key].type, getter())
            if self._model.get(key) != value:
                self._model[key] = value
                changed = True
        if changed:
            self._refresh()

    def _complete(self, submitted: bool) -> None:
        if self._state is SessionState.COMPLETED:
            raise SessionStateError("Form session already completed")

        snapshot = {
            key: list(value) if isinstance(value, list) else value
            for key, value in self._model.items()
        }
        self._result = FormResult(submitted=submitted, values=snapshot)
        self._state = SessionState.COMPLETED
        self._pending.clear()
        logger.info(f"Form '{self.spec.title}' completed (submitted={submitted})")

        with self.suppress_notifications():
            self.renderer.close(self._result)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _field(self, key: str) -> FieldSpec:
        field_spec = self._fields.get(key)
        if field_spec is None:
            raise SessionStateError(f"Unknown field '{key}'")
        return field_spec

    def _require_state(self, expected: SessionState, action: str) -> None:
        if self._state is not expected:
            raise SessionStateError(
                f"Cannot {action} while session is {self._state.value}"
            )


def open_session(
    schema: Union[str, bytes, Mapping[str, Any], FormSpec],
    data_overrides: Optional[Mapping[str, Any]] = None,
    context: Optional[Mapping[str, Any]] = None,
    renderer: Optional[FormRenderer] = None,
    settings: Optional[EngineSettings] = None,
) -> FormSession:
    """Parse a schema and return a started (interactive) session.

    Raises:
        SchemaLoadError: If the schema is invalid; no session is created
    """
    spec = parse_form_spec(schema)
    return FormSession(
        spec,
        data_overrides=data_overrides,
        context=context,
        renderer=renderer,
        settings=settings,
    ).start()
