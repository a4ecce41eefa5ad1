"""Tests for swank.models -- rule parsing and small model behaviours."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from swank.models import (
    GlobalConfig,
    Options,
    OrderPaths,
    SchemaViolation,
    ValidationRule,
    ValidatorMode,
)


# ---------------------------------------------------------------------------
# ValidationRule
# ---------------------------------------------------------------------------


class TestValidationRule:
    def test_camel_case_aliases(self) -> None:
        rule = ValidationRule.model_validate(
            {"path": "info.contact.url", "isType": "URL", "requiredIf": ["info.contact"]}
        )
        assert rule.is_type == "url"
        assert rule.required_if == ("info.contact", "exists", None)
        assert rule.dependency == "info.contact"
        assert rule.condition == "exists"

    def test_snake_case_names(self) -> None:
        rule = ValidationRule(path="host", is_type="string")
        assert rule.is_type == "string"

    def test_unknown_keys_ignored(self) -> None:
        rule = ValidationRule.model_validate({"path": "x", "severity": "high"})
        assert rule.path == "x"

    def test_required_if_matches(self) -> None:
        rule = ValidationRule.model_validate(
            {"path": "a", "requiredIf": ["b", "matches", [1, 2]]}
        )
        assert rule.condition == "matches"
        assert rule.expected == [1, 2]

    @pytest.mark.parametrize(
        "required_if",
        ["info", [], [3, "exists"], ["info", "contains", "x"]],
    )
    def test_bad_required_if(self, required_if) -> None:
        with pytest.raises(ValidationError):
            ValidationRule.model_validate({"path": "a", "requiredIf": required_if})

    def test_unknown_type_tag(self) -> None:
        with pytest.raises(ValidationError, match="Unknown 'isType'"):
            ValidationRule.model_validate({"path": "a", "isType": "date"})

    def test_empty_path(self) -> None:
        with pytest.raises(ValidationError):
            ValidationRule(path="")

    def test_frozen(self) -> None:
        rule = ValidationRule(path="a")
        with pytest.raises(ValidationError):
            rule.path = "b"  # type: ignore[misc]

    def test_declares_matches_only_when_given(self) -> None:
        assert ValidationRule(path="a").declares_matches is False
        assert ValidationRule.model_validate({"path": "a", "matches": None}).declares_matches

    def test_error_message(self) -> None:
        assert ValidationRule(path="a").error_message == "The path 'a' is invalid."
        assert ValidationRule(path="a", error="Nope.").error_message == "Nope."


# ---------------------------------------------------------------------------
# SchemaViolation
# ---------------------------------------------------------------------------


class TestSchemaViolation:
    def test_str_rewrites_root(self) -> None:
        violation = SchemaViolation(
            code="required", message="'version' is a required property", path="#/info"
        )
        assert str(violation) == "{ROOT}/info: 'version' is a required property (required)"

    def test_document_root(self) -> None:
        violation = SchemaViolation(code="type", message="bad")
        assert violation.display_path == "{ROOT}/"

    def test_foreign_path_kept(self) -> None:
        assert SchemaViolation(code="x", message="m", path="info").display_path == "info"


# ---------------------------------------------------------------------------
# Options / GlobalConfig
# ---------------------------------------------------------------------------


class TestOptions:
    def test_defaults(self) -> None:
        options = Options()
        assert options.order_paths == OrderPaths.TAG
        assert options.validator == ValidatorMode.RULES

    def test_alias_and_field_name(self) -> None:
        assert Options.model_validate({"orderPaths": "method"}).order_paths == OrderPaths.METHOD
        assert Options(order_paths="route").order_paths == OrderPaths.ROUTE

    def test_unknown_order_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Options(order_paths="size")

    def test_global_config_defaults_match_options(self) -> None:
        assert GlobalConfig().to_options() == Options()
