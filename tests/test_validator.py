"""Tests for the Validator evaluation engine."""

import logging

import pytest

from rulecheck.errors import ConfigurationError, UnknownRuleError
from rulecheck.record import FileUpload
from rulecheck.rules import Rule
from rulecheck.validate import Validator


def test_passes_and_fails_are_negations(translator):
    """Test fails() is always the negation of passes()."""
    for data in ({"name": "Alice"}, {}):
        v = Validator(translator, data, {"name": "required"})
        assert v.fails() == (not v.passes())


def test_failed_rules_keyed_by_attribute_and_rule(translator):
    """Test failed() records the rule key and its parameters."""
    v = Validator(
        translator,
        {"name": "ab", "age": "x"},
        {"name": "required|between:3,10", "age": "integer"},
    )

    assert v.failed() == {"name": {"between": ["3", "10"]}, "age": {"integer": []}}
    assert v.messages().keys() == ["name", "age"]


def test_rules_run_in_declaration_order(translator):
    """Test every failing rule of an attribute reports, in order."""
    v = Validator(translator, {"code": "a!"}, {"code": "alpha_num|min:3"})

    assert v.messages().get("code") == [
        "The code may only contain letters and numbers.",
        "The code must be at least 3 characters.",
    ]


def test_result_is_memoized(translator):
    """Test rules run once until revalidate() or a mutation."""
    calls = []

    def counting(attribute, value, parameters, validator):
        calls.append(value)
        return False

    v = Validator(translator, {"n": 1}, {"n": "counted"})
    v.add_extension("counted", counting)

    assert v.fails()
    assert v.fails()
    first = v.messages()
    assert v.messages() is first
    assert v.failed() is v.failed()
    assert calls == [1]

    v.revalidate()
    assert calls == [1, 1]

    v.set_data({"n": 2})
    assert v.fails()
    assert calls == [1, 1, 2]


def test_nested_attributes(translator):
    """Test dotted attributes resolve through nested data."""
    v = Validator(
        translator,
        {"user": {"email": "bad", "tags": ["x"]}},
        {"user.email": "email", "user.tags.0": "min:2", "user.name": "required"},
    )

    assert set(v.failed()) == {"user.email", "user.tags.0", "user.name"}
    assert v.messages().first("user.name") == "The user.name field is required."


def test_pydantic_model_input(translator, signup_model):
    """Test Pydantic models are validated by their fields."""
    record = signup_model(username="bob", email="not-an-email", age=12)
    v = Validator(translator, record, {"email": "email", "age": "integer|min:18"})

    assert set(v.failed()) == {"email", "age"}


def test_files_are_separated(translator, avatar):
    """Test uploads are reachable through files and values."""
    v = Validator(translator, {"name": "x", "avatar": avatar}, {"avatar": "required|image"})

    assert v.get_files() == {"avatar": avatar}
    assert "avatar" not in v.get_data()
    assert v.get_value("avatar") is avatar
    assert v.passes()


def test_set_files(translator):
    """Test files can be replaced after construction."""
    v = Validator(translator, {}, {"doc": "required|mimes:pdf"})
    assert v.fails()

    v.set_files({"doc": FileUpload(name="cv.pdf", size=100, tmp_name="/tmp/cv")})
    assert v.passes()


def test_each_expands_over_elements(translator):
    """Test each() fans rules out to every element."""
    v = Validator(translator, {"tags": ["a", "bb"]}, {"tags": "array"})
    v.each("tags", "min:2")

    assert v.get_rules()["tags.0"] == [Rule("Min", ("2",))]
    assert v.failed() == {"tags.0": {"min": ["2"]}}


def test_each_with_nested_rules(translator):
    """Test each() with a mapping targets keys inside each element."""
    v = Validator(
        translator,
        {"people": [{"name": "Ann"}, {"name": ""}]},
        {"people": "array"},
    )
    v.each("people", {"name": "required"})

    assert list(v.failed()) == ["people.1.name"]


def test_each_non_array(translator):
    """Test each() on a non-array is an error unless an array rule is declared."""
    v = Validator(translator, {"tags": "a"}, {"tags": "required"})
    with pytest.raises(ConfigurationError):
        v.each("tags", "min:2")

    v = Validator(translator, {"tags": "a"}, {"tags": "array"})
    v.each("tags", "min:2")
    assert v.get_rules() == {"tags": [Rule("Array", ())]}


def test_sometimes_rule_gates_on_key_presence(translator):
    """Test attributes with sometimes are skipped when the key is missing."""
    rules = {"email": "sometimes|required|email"}

    assert Validator(translator, {}, rules).passes()
    assert Validator(translator, {"email": ""}, rules).fails()
    assert Validator(translator, {"email": None}, rules).fails()
    assert Validator(translator, {"email": "a@gmail.com"}, rules).passes()


def test_sometimes_nested_key(translator):
    """Test sometimes sees nested keys."""
    rules = {"user.email": "sometimes|required"}

    assert Validator(translator, {"user": {}}, rules).passes()
    assert Validator(translator, {"user": {"email": ""}}, rules).fails()


def test_sometimes_method_adds_rules_conditionally(translator):
    """Test sometimes() merges rules when the predicate holds."""
    seen = []

    def needs_reason(payload):
        seen.append(payload)
        return payload["games"] >= 100

    v = Validator(translator, {"games": 150}, {"games": "integer"})
    v.sometimes(["reason", "cost"], "required", needs_reason)

    assert set(v.failed()) == {"reason", "cost"}
    assert seen == [{"games": 150}]

    v = Validator(translator, {"games": 5}, {"games": "integer"})
    v.sometimes("reason", "required", needs_reason)
    assert v.passes()


def test_merge_rules(translator):
    """Test rules can be appended to new and existing attributes."""
    v = Validator(translator, {"name": "abc"}, {"name": "required"})
    v.merge_rules("name", "min:5").merge_rules("age", ["required"])

    assert set(v.failed()) == {"name", "age"}


def test_after_hooks_run_even_when_failing(translator):
    """Test after hooks always run and can add failures."""
    calls = []

    def check_total(validator):
        calls.append(list(validator.failed()))
        if validator.get_value("a") + validator.get_value("b") != 10:
            validator.add_failure("total", "sums_to", ["10"])

    v = Validator(
        translator,
        {"a": 3, "b": 4, "c": ""},
        {"c": "required"},
        messages={"sums_to": "The values must add up to :total."},
    )
    v.add_replacer(
        "sums_to", lambda message, attribute, rule, parameters: message.replace(":total", parameters[0])
    )
    v.after(check_total)

    assert v.fails()
    assert calls == [["c"]]
    assert v.failed()["total"] == {"sums_to": ["10"]}
    assert v.messages().first("total") == "The values must add up to 10."


def test_registries_frozen_after_evaluation(translator):
    """Test registering after the first evaluation raises."""
    v = Validator(translator, {}, {})
    v.passes()

    with pytest.raises(ConfigurationError):
        v.add_extension("late", lambda *args: True)
    with pytest.raises(ConfigurationError):
        v.add_replacer("late", lambda *args: "")
    with pytest.raises(ConfigurationError):
        v.set_fallback_messages({"late": "x"})
    with pytest.raises(ConfigurationError):
        v.after(lambda validator: None)


def test_extension_cannot_shadow_builtin(translator):
    """Test extensions colliding with built-in rules are rejected."""
    v = Validator(translator, {}, {})

    with pytest.raises(ConfigurationError):
        v.add_extension("required", lambda *args: True)
    with pytest.raises(ConfigurationError):
        v.add_extension("RequiredWith", lambda *args: True)


def test_extension_receives_rule_context(translator):
    """Test extensions get the attribute, value, parameters and validator."""
    received = []

    def spy(attribute, value, parameters, validator):
        received.append((attribute, value, parameters, validator))
        return True

    v = Validator(translator, {"code": "x"}, {"code": "spy:a,b"})
    v.add_extensions({"spy": spy})

    assert v.passes()
    assert received == [("code", "x", ("a", "b"), v)]


def test_implicit_extension_runs_when_absent(translator):
    """Test implicit extensions run for missing attributes."""
    v = Validator(translator, {}, {"a": "always_fails", "b": "plain_fails"})
    v.add_implicit_extensions({"always_fails": lambda *args: False})
    v.add_extension("plain_fails", lambda *args: False)

    assert list(v.failed()) == ["a"]


def test_unknown_rule_raises_on_evaluation(translator):
    """Test unknown rules fail loudly when the rules run."""
    v = Validator(translator, {"a": "x"}, {"a": "nope"})

    with pytest.raises(UnknownRuleError):
        v.passes()


def test_has_rule_and_get_rule(translator):
    """Test rule lookups accept studly and snake names."""
    v = Validator(translator, {}, {"d": "date_format:Y-m-d|required"})

    assert v.has_rule("d", ["DateFormat"])
    assert v.has_rule("d", ["date_format"])
    assert not v.has_rule("d", ["Numeric"])
    assert v.get_rule("d", ["required"]) == Rule("Required", ())
    assert v.get_rule("missing", ["required"]) is None


def test_custom_messages_and_attributes_setters(translator):
    """Test setters for messages and display names invalidate the result."""
    v = Validator(translator, {}, {"dob": "required"})
    assert v.messages().first("dob") == "The dob field is required."

    v.add_custom_attributes({"dob": "date of birth"})
    assert v.messages().first("dob") == "The date of birth field is required."

    v.set_custom_messages({"dob.required": "When were you born?"})
    assert v.messages().first("dob") == "When were you born?"


def test_debug_logging(translator, caplog):
    """Test evaluation summaries are logged at debug level."""
    caplog.set_level(logging.DEBUG, logger="rulecheck.validate")
    v = Validator(translator, {"tags": ["a"]}, {"tags": "array"})
    v.each("tags", "min:2")
    v.passes()

    messages = [record.getMessage() for record in caplog.records]
    assert "Expanded each() rules over 1 elements of tags" in messages
    assert "Evaluated 2 attributes: 1 failed" in messages


def test_errors_alias(translator):
    """Test errors() returns the same bag as messages()."""
    v = Validator(translator, {}, {"a": "required"})

    assert v.errors() is v.messages()
    assert v.result().valid is False


def test_rule_set_cannot_change_while_running(translator):
    """Test extensions and after hooks cannot add rules mid-evaluation."""

    def greedy(attribute, value, parameters, validator):
        validator.merge_rules("b", "required")
        return True

    v = Validator(translator, {"a": "x"}, {"a": "greedy"})
    v.add_extension("greedy", greedy)
    with pytest.raises(ConfigurationError):
        v.passes()

    v = Validator(translator, {"tags": ["a"]}, {"tags": "array"})
    v.after(lambda validator: validator.each("tags", "min:2"))
    with pytest.raises(ConfigurationError):
        v.passes()

    v = Validator(translator, {}, {})
    v.after(lambda validator: validator.set_rules({"a": "required"}))
    with pytest.raises(ConfigurationError):
        v.passes()
    assert v.get_rules() == {}
