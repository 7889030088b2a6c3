"""Rule-based validation of records.

Declare rules per attribute as strings such as ``"required|email"`` or
``"numeric|between:1,10"``, validate dictionaries or Pydantic models
against them and get back per-attribute, translatable failure messages.
"""

__version__ = "0.1.0"

from rulecheck.validate import Validator, validate, validate_records
from rulecheck.factory import Factory
from rulecheck.errors import (
    RulecheckError,
    ValidationError,
    ConfigurationError,
    MissingParameterError,
    UnknownRuleError,
)
from rulecheck.options import ErrorOption, AttributeType, Locale
from rulecheck.record import FileUpload
from rulecheck.rules import Rule, parse_rule, parse_rules, explode_rules
from rulecheck.messages import MessageBag
from rulecheck.result import ValidationResult, RecordValidationResult
from rulecheck.translation import (
    StringTranslator,
    CatalogTranslator,
    DefaultTranslator,
    EsEsTranslator,
    translator_for,
)
from rulecheck.verifier import PresenceVerifier
from rulecheck.stats import ValidationStats, get_stats
from rulecheck.export import export_results
from rulecheck.hooks import ValidationHooks
from rulecheck.transform import Transform
from rulecheck.schema import (
    RuleSetDiff,
    RuleChange,
    ruleset_diff,
    detect_drift,
    DriftReport,
)

__all__ = [
    "Validator",
    "validate",
    "validate_records",
    "Factory",
    "RulecheckError",
    "ValidationError",
    "ConfigurationError",
    "MissingParameterError",
    "UnknownRuleError",
    "ErrorOption",
    "AttributeType",
    "Locale",
    "FileUpload",
    "Rule",
    "parse_rule",
    "parse_rules",
    "explode_rules",
    "MessageBag",
    "ValidationResult",
    "RecordValidationResult",
    "StringTranslator",
    "CatalogTranslator",
    "DefaultTranslator",
    "EsEsTranslator",
    "translator_for",
    "PresenceVerifier",
    "ValidationStats",
    "get_stats",
    "export_results",
    "ValidationHooks",
    "Transform",
    "RuleSetDiff",
    "RuleChange",
    "ruleset_diff",
    "detect_drift",
    "DriftReport",
]
