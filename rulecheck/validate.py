import logging
import typing as _typing

from . import attributes as _attributes
from . import catalog as _catalog
from . import errors as _errors
from . import hooks as _hooks
from . import messages as _messages
from . import options as _options
from . import record as _record
from . import resolver as _resolver
from . import result as _result
from . import rules as _rules
from . import transform as _transform
from . import translation as _translation

if _typing.TYPE_CHECKING:
    from .factory import Factory
    from .verifier import PresenceVerifier

logger = logging.getLogger(__name__)

Extension = _catalog.RuleHandler
"""Custom rule: (attribute, value, parameters, validator) -> bool."""

AfterHook = _typing.Callable[["Validator"], None]

# Type alias for progress callbacks
ProgressCallback = _typing.Callable[
    [int, int | None, _result.RecordValidationResult], None
]

Transforms = dict[str, _transform.Transform] | list[_transform.Transform] | None


def _rule_name(rule: str) -> str:
    return _rules.studly_case(rule.strip())


class Validator:
    """Evaluates a rule set against one record.

    Rules run in declaration order. A rule only runs when its attribute is
    present, unless it is implicit (``required``, ``required_if``, ...).
    Attributes that carry ``sometimes`` are skipped entirely when their key
    is missing from the record. After every rule has run, the after hooks
    run regardless of the outcome.

    The outcome is computed once, on the first call to ``passes()``,
    ``fails()``, ``failed()``, ``messages()`` or ``result()``, and reused
    until the data or rules change or ``revalidate()`` is called.
    Extensions, replacers, fallback messages and after hooks must be
    registered before that first evaluation.

    Attributes:
        translator: Catalog used to look up messages
        resolver: Builds the message for each failed rule
    """

    def __init__(
        self,
        translator: _translation.StringTranslator,
        data: _record.Record,
        rules: _record.RuleSetInput,
        messages: _typing.Mapping[str, str] | None = None,
        attributes: _typing.Mapping[str, str] | None = None,
    ) -> None:
        """Initialize Validator.

        Args:
            translator: Catalog used to look up messages
            data: Record to validate; top-level FileUpload values become files
            rules: Mapping of attribute path to its rules
            messages: Custom messages keyed ``"{attribute}.{rule}"`` or ``"{rule}"``
            attributes: Display names keyed by attribute path
        """
        self.translator = translator
        self.resolver = _resolver.MessageResolver(self)
        self._data, self._files = _attributes.split_files(_record.to_dict(data))
        self._rules = _rules.explode_rules(rules)
        self._custom_messages: dict[str, str] = dict(messages or {})
        self._custom_attributes: dict[str, str] = dict(attributes or {})
        self._custom_values: dict[str, dict[str, str]] = {}
        self._fallback_messages: dict[str, str] = {}

        self._extensions: dict[str, Extension] = {}
        self._implicit_extensions: set[str] = set()
        self._replacers: dict[str, _resolver.Replacer] = {}
        self._after_hooks: list[AfterHook] = []
        self._presence_verifier: "PresenceVerifier | None" = None

        self._frozen = False
        self._running = False
        self._result: _result.ValidationResult | None = None
        self._failed_rules: _result.FailedRules = {}
        self._messages = _messages.MessageBag()

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def passes(self) -> bool:
        """Check whether the data passes every rule."""
        return self.result().valid

    def fails(self) -> bool:
        return not self.passes()

    def result(self) -> _result.ValidationResult:
        """Get the outcome, evaluating the rules on first use.

        Called from an after hook or an extension, returns the failures
        recorded so far.
        """
        if self._running:
            return _result.ValidationResult(self._failed_rules, self._messages)
        if self._result is None:
            self._result = self._evaluate()
        return self._result

    def revalidate(self) -> _result.ValidationResult:
        """Discard the stored outcome and run every rule again."""
        self._result = None
        return self.result()

    def failed(self) -> _result.FailedRules:
        """Failed rules and their parameters, keyed by attribute and rule key."""
        return self.result().failed_rules

    def messages(self) -> _messages.MessageBag:
        return self.result().messages

    def errors(self) -> _messages.MessageBag:
        """Alias of ``messages()``."""
        return self.messages()

    def _evaluate(self) -> _result.ValidationResult:
        self._frozen = True
        self._failed_rules = {}
        self._messages = _messages.MessageBag()

        self._running = True
        try:
            for attribute, rules in self._rules.items():
                for rule in rules:
                    self._validate_attribute(attribute, rule)

            for hook in self._after_hooks:
                hook(self)
        finally:
            self._running = False

        logger.debug(
            "Evaluated %d attributes: %d failed",
            len(self._rules),
            len(self._failed_rules),
        )
        return _result.ValidationResult(self._failed_rules, self._messages)

    def _validate_attribute(self, attribute: str, rule: _rules.Rule) -> None:
        value = self.get_value(attribute)
        if not self._is_validatable(rule, attribute, value):
            return

        handler = self._handler(rule.name)
        if not handler(attribute, value, rule.parameters, self):
            self.add_failure(attribute, rule)

    def _is_validatable(self, rule: _rules.Rule, attribute: str, value: _typing.Any) -> bool:
        present = _catalog.validate_required(attribute, value, (), self)
        return (present or self._is_implicit(rule.name)) and self._passes_optional_check(
            attribute
        )

    def _is_implicit(self, name: str) -> bool:
        return name in _catalog.IMPLICIT_RULES or name in self._implicit_extensions

    def _passes_optional_check(self, attribute: str) -> bool:
        if not self.has_rule(attribute, ["Sometimes"]):
            return True
        return (
            _attributes.has_key(self._data, attribute)
            or attribute in _attributes.flatten(self._data)
            or _attributes.has_key(self._files, attribute)
        )

    def _handler(self, name: str) -> Extension:
        handler = _catalog.BUILTIN_RULES.get(name)
        if handler is not None:
            return handler
        extension = self._extensions.get(name)
        if extension is not None:
            logger.debug("Dispatching rule %s to extension", name)
            return extension
        raise _errors.UnknownRuleError(_rules.snake_case(name))

    def add_failure(
        self,
        attribute: str,
        rule: str | _rules.Rule,
        parameters: _typing.Sequence[str] | None = None,
    ) -> None:
        """Record a failed rule and its message.

        Meant for after hooks and extensions that report extra failures.

        Args:
            attribute: Attribute that failed
            rule: Rule name (``"required_with"``) or a parsed Rule
            parameters: Parameters when rule is given by name
        """
        if not isinstance(rule, _rules.Rule):
            rule = _rules.Rule(_rule_name(rule), tuple(parameters or ()))
        self._messages.add(attribute, self.resolver.resolve(attribute, rule))
        self._failed_rules.setdefault(attribute, {})[rule.key] = list(rule.parameters)

    def after(self, hook: AfterHook) -> "Validator":
        """Register a callback run with the validator once all rules ran."""
        self._check_not_frozen("after hook")
        self._after_hooks.append(hook)
        return self

    # ------------------------------------------------------------------
    # Rule set expansion
    # ------------------------------------------------------------------

    def each(
        self,
        attribute: str,
        rules: str | list[_typing.Any] | _typing.Mapping[str, _typing.Any],
    ) -> "Validator":
        """Apply rules to every element of an array attribute.

        Given ``{"tags": ["a", "bb"]}``, ``each("tags", "min:2")`` adds
        ``min:2`` to ``tags.0`` and ``tags.1``. A mapping of rules targets
        a key inside each element: ``each("people", {"name": "required"})``
        adds ``required`` to ``people.0.name`` and so on.

        Raises:
            ConfigurationError: If the attribute is not an array and has no
                ``array`` rule, or if called while rules are running
        """
        self._check_not_running("each()")
        value = self.get_value(attribute)
        if not isinstance(value, (list, tuple, dict)):
            if self.has_rule(attribute, ["Array"]):
                return self
            raise _errors.ConfigurationError(
                f"Attribute for each() must be an array: {attribute}"
            )

        keys = value.keys() if isinstance(value, dict) else range(len(value))
        for key in keys:
            if isinstance(rules, _typing.Mapping):
                for sub_attribute, sub_rules in rules.items():
                    self.merge_rules(f"{attribute}.{key}.{sub_attribute}", sub_rules)
            else:
                self.merge_rules(f"{attribute}.{key}", rules)

        logger.debug("Expanded each() rules over %d elements of %s", len(keys), attribute)
        return self

    def sometimes(
        self,
        attribute: str | _typing.Iterable[str],
        rules: str | list[_typing.Any],
        predicate: _typing.Callable[[dict[str, _typing.Any]], bool],
    ) -> "Validator":
        """Add rules to attributes when a predicate over the record holds.

        The predicate is called once with the record, files included.
        """
        self._check_not_running("sometimes()")
        payload = {**self._data, **self._files}
        if not predicate(payload):
            return self

        targets = [attribute] if isinstance(attribute, str) else list(attribute)
        for target in targets:
            self.merge_rules(target, rules)
        logger.debug("Conditional rules added to %s", ", ".join(targets))
        return self

    def merge_rules(
        self, attribute: str, rules: str | _typing.Sequence[_typing.Any]
    ) -> "Validator":
        """Append rules to an attribute, creating its entry if needed."""
        self._check_not_running("merge_rules()")
        self._rules.setdefault(attribute, []).extend(_rules.parse_rules(rules))
        self._invalidate()
        return self

    def has_rule(self, attribute: str, rules: _typing.Iterable[str]) -> bool:
        """Check whether an attribute declares any of the given rules."""
        return self.get_rule(attribute, rules) is not None

    def get_rule(
        self, attribute: str, rules: _typing.Iterable[str]
    ) -> _rules.Rule | None:
        """Get the first rule of an attribute whose name is one of the given names.

        Args:
            attribute: Attribute path
            rules: Rule names, studly (``DateFormat``) or snake (``date_format``)
        """
        wanted = {_rule_name(rule) for rule in rules}
        for rule in self._rules.get(attribute, []):
            if rule.name in wanted:
                return rule
        return None

    # ------------------------------------------------------------------
    # Data and rules
    # ------------------------------------------------------------------

    def get_value(self, attribute: str) -> _typing.Any:
        """Resolve an attribute against the data, then the files."""
        value = _attributes.get_value(self._data, attribute)
        if value is None:
            value = _attributes.get_value(self._files, attribute)
        return value

    def get_data(self) -> dict[str, _typing.Any]:
        return self._data

    def set_data(self, data: _record.Record) -> "Validator":
        self._data, self._files = _attributes.split_files(_record.to_dict(data))
        self._invalidate()
        return self

    def get_files(self) -> dict[str, _typing.Any]:
        return self._files

    def set_files(self, files: _typing.Mapping[str, _typing.Any]) -> "Validator":
        self._files = dict(files)
        self._invalidate()
        return self

    def get_rules(self) -> dict[str, list[_rules.Rule]]:
        return self._rules

    def set_rules(self, rules: _record.RuleSetInput) -> "Validator":
        self._check_not_running("set_rules()")
        self._rules = _rules.explode_rules(rules)
        self._invalidate()
        return self

    def _invalidate(self) -> None:
        self._result = None

    # ------------------------------------------------------------------
    # Messages and display names
    # ------------------------------------------------------------------

    def get_custom_messages(self) -> dict[str, str]:
        return self._custom_messages

    def set_custom_messages(self, messages: _typing.Mapping[str, str]) -> "Validator":
        self._custom_messages = dict(messages)
        self._invalidate()
        return self

    def add_custom_messages(self, messages: _typing.Mapping[str, str]) -> "Validator":
        self._custom_messages.update(messages)
        self._invalidate()
        return self

    def get_custom_attributes(self) -> dict[str, str]:
        return self._custom_attributes

    def set_attribute_names(self, attributes: _typing.Mapping[str, str]) -> "Validator":
        self._custom_attributes = dict(attributes)
        self._invalidate()
        return self

    def add_custom_attributes(self, attributes: _typing.Mapping[str, str]) -> "Validator":
        self._custom_attributes.update(attributes)
        self._invalidate()
        return self

    def get_custom_values(self) -> dict[str, dict[str, str]]:
        return self._custom_values

    def set_value_names(
        self, values: _typing.Mapping[str, _typing.Mapping[str, str]]
    ) -> "Validator":
        """Replace displayable values, given as attribute -> value -> label."""
        self._custom_values = {attr: dict(labels) for attr, labels in values.items()}
        self._invalidate()
        return self

    def add_custom_values(
        self, values: _typing.Mapping[str, _typing.Mapping[str, str]]
    ) -> "Validator":
        for attribute, labels in values.items():
            self._custom_values.setdefault(attribute, {}).update(labels)
        self._invalidate()
        return self

    def get_fallback_messages(self) -> dict[str, str]:
        return self._fallback_messages

    def set_fallback_messages(self, messages: _typing.Mapping[str, str]) -> "Validator":
        """Set messages used when the catalog has none for an extension rule."""
        self._check_not_frozen("fallback messages")
        self._fallback_messages = dict(messages)
        return self

    def get_translator(self) -> _translation.StringTranslator:
        return self.translator

    def set_translator(self, translator: _translation.StringTranslator) -> "Validator":
        self.translator = translator
        self._invalidate()
        return self

    # ------------------------------------------------------------------
    # Registries
    # ------------------------------------------------------------------

    def _check_not_frozen(self, what: str) -> None:
        if self._frozen:
            raise _errors.ConfigurationError(
                f"Cannot register {what} after validation has run"
            )

    def _check_not_running(self, what: str) -> None:
        if self._running:
            raise _errors.ConfigurationError(f"Cannot call {what} while rules are running")

    def add_extension(self, rule: str, extension: Extension) -> "Validator":
        """Register a custom rule.

        Args:
            rule: Rule name as written in rule strings, e.g. ``"foo_bar"``
            extension: Callable(attribute, value, parameters, validator) -> bool

        Raises:
            ConfigurationError: If validation already ran or the name is built in
        """
        self._check_not_frozen(f"extension {rule!r}")
        name = _rule_name(rule)
        if name in _catalog.BUILTIN_RULES:
            raise _errors.ConfigurationError(
                f"Extension {rule!r} collides with a built-in rule"
            )
        self._extensions[name] = extension
        return self

    def add_extensions(self, extensions: _typing.Mapping[str, Extension]) -> "Validator":
        for rule, extension in extensions.items():
            self.add_extension(rule, extension)
        return self

    def add_implicit_extension(self, rule: str, extension: Extension) -> "Validator":
        """Register a custom rule that also runs when the attribute is absent."""
        self.add_extension(rule, extension)
        self._implicit_extensions.add(_rule_name(rule))
        return self

    def add_implicit_extensions(
        self, extensions: _typing.Mapping[str, Extension]
    ) -> "Validator":
        for rule, extension in extensions.items():
            self.add_implicit_extension(rule, extension)
        return self

    def get_extensions(self) -> dict[str, Extension]:
        return dict(self._extensions)

    def add_replacer(self, rule: str, replacer: _resolver.Replacer) -> "Validator":
        """Register a placeholder replacer for a rule.

        Args:
            rule: Rule name
            replacer: Callable(message, attribute, rule, parameters) -> message
        """
        self._check_not_frozen(f"replacer {rule!r}")
        self._replacers[_rules.snake_case(_rule_name(rule))] = replacer
        return self

    def add_replacers(
        self, replacers: _typing.Mapping[str, _resolver.Replacer]
    ) -> "Validator":
        for rule, replacer in replacers.items():
            self.add_replacer(rule, replacer)
        return self

    def get_replacers(self) -> dict[str, _resolver.Replacer]:
        return self._replacers

    def get_presence_verifier(self) -> "PresenceVerifier":
        """Get the verifier used by ``unique`` and ``exists``.

        Raises:
            ConfigurationError: If no verifier has been set
        """
        if self._presence_verifier is None:
            raise _errors.ConfigurationError("Presence verifier has not been set.")
        return self._presence_verifier

    def set_presence_verifier(self, verifier: "PresenceVerifier") -> "Validator":
        self._presence_verifier = verifier
        self._invalidate()
        return self

    def __repr__(self) -> str:
        state = "pending" if self._result is None else (
            "passed" if self._result.valid else "failed"
        )
        return f"Validator(attributes={list(self._rules)!r}, {state})"


def _make_validator(
    data: _record.Record,
    rules: _record.RuleSetInput,
    messages: _typing.Mapping[str, str] | None,
    attributes: _typing.Mapping[str, str] | None,
    translator: _translation.StringTranslator | None,
    factory: "Factory | None",
) -> Validator:
    if factory is not None:
        return factory.make(data, rules, messages, attributes)
    return Validator(
        translator or _translation.DefaultTranslator(), data, rules, messages, attributes
    )


def validate(
    data: _record.Record,
    rules: _record.RuleSetInput,
    messages: _typing.Mapping[str, str] | None = None,
    attributes: _typing.Mapping[str, str] | None = None,
    *,
    translator: _translation.StringTranslator | None = None,
    factory: "Factory | None" = None,
    error_option: _options.ErrorOption = _options.ErrorOption.RETURN,
    transforms: Transforms = None,
) -> _result.ValidationResult:
    """Validate a single record against a rule set.

    Args:
        data: Dictionary or Pydantic model to validate
        rules: Mapping of attribute path to its rules
        messages: Custom messages keyed ``"{attribute}.{rule}"`` or ``"{rule}"``
        attributes: Display names keyed by attribute path
        translator: Message catalog (English when None)
        factory: Factory that builds the validator, carrying its extensions
            and presence verifier; overrides translator
        error_option: RAISE to raise on failure; RETURN and SKIP return the result
        transforms: Transformations to apply before validation

    Returns:
        ValidationResult with failed rules and messages

    Raises:
        ValidationError: If error_option=RAISE and validation fails
    """
    record = _record.to_dict(data)
    if transforms is not None:
        record = _transform.apply_transforms(record, transforms)

    result = _make_validator(record, rules, messages, attributes, translator, factory).result()
    if not result.valid and error_option == _options.ErrorOption.RAISE:
        raise _errors.ValidationError(result)
    return result


def validate_records(
    records: _typing.Iterable[_record.Record],
    rules: _record.RuleSetInput,
    messages: _typing.Mapping[str, str] | None = None,
    attributes: _typing.Mapping[str, str] | None = None,
    *,
    translator: _translation.StringTranslator | None = None,
    factory: "Factory | None" = None,
    error_option: _options.ErrorOption = _options.ErrorOption.RETURN,
    on_progress: ProgressCallback | None = None,
    hooks: _hooks.ValidationHooks | None = None,
    transforms: Transforms = None,
) -> _typing.Generator[_result.RecordValidationResult, None, None]:
    """Validate an iterable of records against one rule set.

    Args:
        records: Iterable of dictionaries or Pydantic models
        rules: Mapping of attribute path to its rules
        messages: Custom messages keyed ``"{attribute}.{rule}"`` or ``"{rule}"``
        attributes: Display names keyed by attribute path
        translator: Message catalog (English when None)
        factory: Factory that builds each validator; overrides translator
        error_option: How to handle failures (RETURN, RAISE, or SKIP)
        on_progress: Optional callback(index, total, result) called after each record
        hooks: Optional ValidationHooks instance for event callbacks. When
            should_continue returns False the batch ends after that record.
        transforms: Transformations to apply before validation

    Yields:
        RecordValidationResult for each record (failing records are left out
        when error_option=SKIP)

    Raises:
        ValidationError: If error_option=RAISE and a record fails
    """
    total: int | None = len(records) if isinstance(records, _typing.Sized) else None

    for index, record in enumerate(records):
        if hooks is not None:
            hooks.call_before_validate(record)

        data = _record.to_dict(record)
        if transforms is not None:
            data = _transform.apply_transforms(data, transforms)
        result = _make_validator(data, rules, messages, attributes, translator, factory).result()

        error = None if result.valid else _errors.ValidationError(result)
        record_result = _result.RecordValidationResult(error, result, record)

        if hooks is not None:
            hooks.call_after_validate(record_result)
            hooks.call_on_success(record_result)
            hooks.call_on_error(record_result)

        if on_progress is not None:
            try:
                on_progress(index, total, record_result)
            except Exception:
                logger.warning("Progress callback raised; ignoring", exc_info=True)

        if error is not None and error_option == _options.ErrorOption.RAISE:
            raise error
        if error is None or error_option != _options.ErrorOption.SKIP:
            yield record_result

        if hooks is not None and not hooks.check_should_continue(record_result):
            logger.debug("Batch validation stopped after record %d", index)
            break
