"""Unit tests for the visibility evaluator."""

from dynaform.runtime.visibility import VisibilityEvaluator, controller_value, evaluate_visibility
from dynaform.schemas.form_spec import FieldSpec, VisibilityRule


def _fields(*keys, tags=None):
    tags = tags or {}
    return [FieldSpec(key=k, tags=tags.get(k, [])) for k in keys]


def _rule(**kwargs):
    return VisibilityRule.model_validate(kwargs)


class TestEvaluateVisibility:
    def test_no_rules_hides_nothing(self):
        assert evaluate_visibility([], {"a": "x"}, _fields("a", "b")) == set()

    def test_none_rules(self):
        assert evaluate_visibility(None, {}, _fields("a")) == set()

    def test_eq_match_hides(self):
        rules = [_rule(field="role", eq="Guest", hide=["quota"])]
        assert evaluate_visibility(rules, {"role": "Guest"}, _fields("role", "quota")) == {"quota"}

    def test_eq_mismatch_does_nothing(self):
        rules = [_rule(field="role", eq="Guest", hide=["quota"])]
        assert evaluate_visibility(rules, {"role": "Admin"}, _fields("role", "quota")) == set()

    def test_neq_matches_unset_controller(self):
        rules = [_rule(field="role", neq="Admin", hide=["quota"])]
        assert evaluate_visibility(rules, {}, _fields("role", "quota")) == {"quota"}

    def test_eq_never_matches_unset_controller(self):
        rules = [_rule(field="role", eq="", hide=["quota"])]
        assert evaluate_visibility(rules, {}, _fields("role", "quota")) == set()

    def test_comparison_is_case_sensitive(self):
        rules = [_rule(field="role", eq="admin", hide=["quota"])]
        assert evaluate_visibility(rules, {"role": "Admin"}, _fields("role", "quota")) == set()

    def test_hide_wins_over_show(self):
        rules = [
            _rule(field="role", eq="Admin", show=["x"]),
            _rule(field="plan", eq="pro", hide=["x"]),
        ]
        hidden = evaluate_visibility(rules, {"role": "Admin", "plan": "pro"}, _fields("role", "plan", "x"))
        assert hidden == {"x"}

    def test_hide_wins_regardless_of_rule_order(self):
        rules = [
            _rule(field="plan", eq="pro", hide=["x"]),
            _rule(field="role", eq="Admin", show=["x"]),
        ]
        hidden = evaluate_visibility(rules, {"role": "Admin", "plan": "pro"}, _fields("role", "plan", "x"))
        assert hidden == {"x"}

    def test_hide_tags(self):
        fields = _fields("a", "b", "c", tags={"a": ["adv"], "c": ["adv", "beta"]})
        rules = [_rule(field="mode", eq="simple", hide_tags=["adv"])]
        assert evaluate_visibility(rules, {"mode": "simple"}, fields) == {"a", "c"}

    def test_show_tags_do_not_override_hide(self):
        fields = _fields("a", "b", tags={"a": ["adv"]})
        rules = [
            _rule(field="mode", eq="x", show_tags=["adv"]),
            _rule(field="mode", eq="x", hide=["a"]),
        ]
        assert evaluate_visibility(rules, {"mode": "x"}, fields) == {"a"}

    def test_unknown_keys_dropped(self):
        rules = [_rule(field="m", eq="1", hide=["ghost", "a"])]
        assert evaluate_visibility(rules, {"m": "1"}, _fields("a")) == {"a"}

    def test_rule_without_condition_is_skipped(self):
        rules = [_rule(field="m", hide=["a"])]
        assert evaluate_visibility(rules, {"m": "1"}, _fields("a")) == set()

    def test_context_value_drives_rule(self):
        rules = [_rule(field="@roleScope", eq="admin", hide=["a"])]
        assert evaluate_visibility(rules, {"@roleScope": "admin"}, _fields("a")) == {"a"}

    def test_boolean_controller_compares_capitalized(self):
        rules = [_rule(field="agree", eq="True", hide=["why"])]
        assert evaluate_visibility(rules, {"agree": True}, _fields("agree", "why")) == {"why"}

    def test_lowercase_bool_string_does_not_match(self):
        rules = [_rule(field="agree", eq="true", hide=["why"])]
        assert evaluate_visibility(rules, {"agree": True}, _fields("agree", "why")) == set()

    def test_json_bool_eq_matches_checked_box(self):
        rules = [_rule(field="agree", eq=True, hide=["why"])]
        assert evaluate_visibility(rules, {"agree": True}, _fields("agree", "why")) == {"why"}

    def test_neq_false_matches_checked_box(self):
        rules = [_rule(field="agree", neq="False", hide=["why"])]
        assert evaluate_visibility(rules, {"agree": True}, _fields("agree", "why")) == {"why"}

    def test_idempotent(self):
        rules = [
            _rule(field="role", eq="Admin", show=["quota"]),
            _rule(field="role", neq="Admin", hide=["quota"]),
        ]
        fields = _fields("role", "quota")
        model = {"role": "Guest"}
        assert evaluate_visibility(rules, model, fields) == evaluate_visibility(rules, model, fields)


class TestControllerValue:
    def test_number_stringified(self):
        assert controller_value({"n": 5.0}, "n") == "5"

    def test_missing(self):
        assert controller_value({}, "n") is None


class TestVisibilityEvaluator:
    def test_visibility_map_in_field_order(self):
        evaluator = VisibilityEvaluator(
            [_rule(field="role", neq="Admin", hide=["quota"])], _fields("role", "quota", "name")
        )
        assert evaluator.visibility_map({"role": "User"}) == {"role": True, "quota": False, "name": True}

    def test_evaluate(self):
        evaluator = VisibilityEvaluator([], _fields("a"))
        assert evaluator.evaluate({}) == set()
