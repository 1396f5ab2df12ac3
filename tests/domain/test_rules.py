"""Tests for per-shape rule checks."""

from __future__ import annotations

import textwrap
from datetime import date
from pathlib import Path
from types import MappingProxyType

import pytest

from modelctl.domain.diagnostics import DiagnosticsSink, ValidationResult
from modelctl.domain.models import AttributeTypeDefinition
from modelctl.domain.rules import RuleContext, check_file
from modelctl.domain.types import Severity
from modelctl.infrastructure.registry import SharedTypeRegistry

TODAY = date(2024, 6, 1)


def _registry(*names: str, available: bool = True) -> SharedTypeRegistry:
    types = {name: AttributeTypeDefinition(name=name, type="string") for name in names}
    folders = (Path("models/Shared"),) if available else ()
    return SharedTypeRegistry(types=MappingProxyType(types), shared_folders=folders)


def _check(
    name: str,
    content: str,
    *,
    registry: SharedTypeRegistry | None = None,
    today: date = TODAY,
) -> list[ValidationResult]:
    if registry is None:
        registry = _registry("primaryKey", "baseString")
    ctx = RuleContext(registry=registry, today=today)
    sink = DiagnosticsSink()
    check_file(Path(name), textwrap.dedent(content), ctx, sink)
    return list(sink)


def _of(results: list[ValidationResult], severity: Severity) -> list[str]:
    return [r.message for r in results if r.severity is severity]


# ── Parse-level behaviour ────────────────────────────────────────────


class TestParsing:
    def test_malformed_yaml_is_one_error(self) -> None:
        results = _check("Customer.Type.yaml", "model: Customer\nattributeUsages: [\n")
        assert len(results) == 1
        assert results[0].severity is Severity.ERROR
        assert results[0].message.startswith("YAML parsing error:")

    def test_empty_file_warns(self) -> None:
        results = _check("Customer.Type.yaml", "   \n")
        assert _of(results, Severity.WARNING) == ["File is empty"]

    def test_comment_only_file(self) -> None:
        results = _check("Customer.Type.yaml", "# nothing here\n")
        assert _of(results, Severity.WARNING) == ["Empty YAML document"]

    def test_unknown_shape_warns(self) -> None:
        results = _check("Notes.yaml", "title: Scratch\n")
        assert _of(results, Severity.WARNING) == ["Unable to determine file type"]
        assert _of(results, Severity.ERROR) == []

    def test_documentation_is_info_only(self) -> None:
        results = _check("README.md", "# Customers\nSee the TODO LIST\n")
        assert [r.severity for r in results] == [Severity.INFO]
        assert "documentation" in results[0].message

    def test_instructions_are_info_only(self) -> None:
        results = _check("copilot-instructions.md", "Use the models\n")
        assert _of(results, Severity.INFO) == ["Copilot instructions file detected."]

    def test_wrong_field_type_is_error(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: Customer
            attributeUsages: not-a-list
            """,
        )
        errors = _of(results, Severity.ERROR)
        assert len(errors) == 1
        assert errors[0].startswith("Entity model validation error")

    def test_entity_model_is_returned(self) -> None:
        ctx = RuleContext(registry=_registry("primaryKey"), today=TODAY)
        content = textwrap.dedent(
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: customerId
                type: primaryKey
                summary: Identifier
            """
        )
        model = check_file(Path("Customer.Type.yaml"), content, ctx, DiagnosticsSink())
        assert model is not None
        assert model.model == "Customer"
        assert model.attribute_usages[0].type == "primaryKey"


# ── Entity documents ─────────────────────────────────────────────────


class TestEntityRules:
    def test_unresolved_type_is_exactly_one_error(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: status
                type: CustomerStatus
                required: true
                summary: Lifecycle state
            """,
        )
        errors = _of(results, Severity.ERROR)
        assert len(errors) == 1
        assert "'status'" in errors[0]
        assert "'CustomerStatus'" in errors[0]

    def test_unresolved_type_ignored_without_shared_folder(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: status
                type: CustomerStatus
                summary: Lifecycle state
            """,
            registry=_registry(available=False),
        )
        assert _of(results, Severity.ERROR) == []

    def test_unique_but_not_required_is_info(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: customerId
                type: primaryKey
                unique: true
                required: false
                summary: Identifier
            """,
        )
        assert _of(results, Severity.ERROR) == []
        infos = _of(results, Severity.INFO)
        assert len(infos) == 1
        assert "unique but not required" in infos[0]

    def test_missing_fields_are_errors(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - required: true
            """,
        )
        errors = _of(results, Severity.ERROR)
        assert "Model 'Customer': Attribute usage (unnamed attribute) type is required" in errors
        assert "Model 'Customer': Attribute usage (unnamed attribute) name is required" in errors
        assert "Model 'Customer': Attribute usage (unnamed attribute) summary is required" in errors

    def test_attribute_name_casing_warns(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: CustomerId
                type: primaryKey
                summary: Identifier
            """,
        )
        assert _of(results, Severity.WARNING) == [
            "Model 'Customer': Attribute name 'CustomerId' should be camelCase"
        ]

    def test_model_name_required(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: ""
            behaviours:
              - name: archive
                entities: [Customer]
            """,
        )
        assert "Model name is required" in _of(results, Severity.ERROR)

    def test_name_should_prefix_file_name(self) -> None:
        results = _check(
            "Client.Type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: customerId
                type: primaryKey
                summary: Identifier
            """,
        )
        assert "Model name 'Customer' should match start of file name" in _of(
            results, Severity.WARNING
        )

    def test_prefix_match_is_case_insensitive(self) -> None:
        results = _check(
            "customer.type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: customerId
                type: primaryKey
                summary: Identifier
            """,
        )
        assert results == []

    def test_empty_entity_is_error(self) -> None:
        results = _check("Customer.Type.yaml", "model: Customer\nsummary: x\nbehaviours: []\n")
        assert _of(results, Severity.ERROR) == [
            "Model 'Customer' must define at least one attribute usage or behaviour"
        ]

    def test_mixed_sections_warn(self) -> None:
        results = _check(
            "Customer.Type.yaml",
            """\
            model: Customer
            summary: A customer
            attributeUsages:
              - name: customerId
                type: primaryKey
                summary: Identifier
            behaviours:
              - name: archive
                entities: [Customer]
            """,
        )
        warnings = _of(results, Severity.WARNING)
        assert len(warnings) == 1
        assert "mixes attribute usages and behaviours" in warnings[0]


class TestBehaviourAndScenarioRules:
    def test_behaviour_checks(self) -> None:
        results = _check(
            "Customer.Behaviour.yaml",
            """\
            model: Customer
            summary: Customer behaviour
            behaviours:
              - name: Archive
                entities: []
              - summary: no name
                entities: [Customer]
            """,
        )
        assert "Behaviour name is required" in _of(results, Severity.ERROR)
        warnings = _of(results, Severity.WARNING)
        assert "Behaviour name 'Archive' should be camelCase" in warnings
        assert "Behaviour 'Archive' should specify at least one entity" in warnings

    def test_scenario_needs_every_clause(self) -> None:
        results = _check(
            "Customer.Behaviour.yaml",
            """\
            model: Customer
            summary: Customer behaviour
            behaviours:
              - name: archive
                entities: [Customer]
            scenarios:
              - name: Archive twice
                given: [an archived customer]
            """,
        )
        assert _of(results, Severity.WARNING) == [
            "Scenario 'Archive twice' should have at least one 'when' condition",
            "Scenario 'Archive twice' should have at least one 'then' condition",
        ]

    def test_each_scenario_reported_separately(self) -> None:
        results = _check(
            "Customer.Behaviour.yaml",
            """\
            model: Customer
            summary: Customer behaviour
            behaviours:
              - name: archive
                entities: [Customer]
            scenarios:
              - when: [the customer is archived]
                then: [the customer is hidden]
              - when: [the customer is archived]
                then: [the customer is hidden]
            """,
        )
        assert _of(results, Severity.ERROR) == ["Scenario name is required"] * 2
        assert _of(results, Severity.WARNING) == [
            "Scenario '' should have at least one 'given' condition"
        ] * 2


# ── Shared types ─────────────────────────────────────────────────────


class TestAttributeTypeRules:
    def test_required_fields_and_casing(self) -> None:
        results = _check(
            "Common.Type.yaml",
            """\
            attributeTypes:
              - name: PostalCode
                type: string
              - name: phoneNumber
              - type: string
            """,
        )
        errors = _of(results, Severity.ERROR)
        assert "Attribute type 'phoneNumber' must specify a type" in errors
        assert "Attribute type name is required" in errors
        assert "Attribute type name 'PostalCode' should be camelCase" in _of(
            results, Severity.WARNING
        )

    def test_extends_unknown_type_warns(self) -> None:
        results = _check(
            "Common.Type.yaml",
            """\
            attributeTypes:
              - name: emailAddress
                type: string
                extends: textValue
            """,
        )
        assert _of(results, Severity.WARNING) == [
            "Attribute type 'emailAddress' extends unknown type 'textValue'"
        ]

    def test_extends_cycle_warns(self) -> None:
        results = _check(
            "Common.Type.yaml",
            """\
            attributeTypes:
              - name: first
                type: string
                extends: second
              - name: second
                type: string
                extends: first
            """,
        )
        warnings = _of(results, Severity.WARNING)
        assert "Attribute type 'first' has a circular extends chain: first -> second -> first" in (
            warnings
        )
        assert len(warnings) == 2


class TestEnumRules:
    def test_duplicate_value_is_exactly_one_error(self) -> None:
        results = _check(
            "CustomerStatus.yaml",
            """\
            enum: CustomerStatus
            items:
              - name: Active
                display: Active
                value: 1
              - name: Inactive
                display: Inactive
                value: 1
            """,
        )
        errors = _of(results, Severity.ERROR)
        assert errors == ["Enum has duplicate value: 1"]

    def test_requires_items(self) -> None:
        results = _check("CustomerStatus.yaml", "enum: CustomerStatus\nitems: []\n")
        assert _of(results, Severity.ERROR) == ["Enum must have at least one item"]

    def test_requires_name_and_item_fields(self) -> None:
        results = _check(
            "Status.yaml",
            """\
            enum: ""
            items:
              - name: Active
            """,
        )
        errors = _of(results, Severity.ERROR)
        assert "Enum name is required" in errors
        assert "Enum '': item 'Active' display is required" in errors
        assert "Enum '': item 'Active' value is required" in errors

    def test_name_casing_warns(self) -> None:
        results = _check(
            "customerStatus.yaml",
            """\
            enum: customerStatus
            items:
              - name: Active
                display: Active
                value: 1
            """,
        )
        assert _of(results, Severity.WARNING) == ["Enum name 'customerStatus' should be PascalCase"]


class TestValidationProfileRules:
    def test_profile_checks(self) -> None:
        results = _check(
            "Profiles.yaml",
            """\
            validationProfiles:
              - name: readOnly
                claims: []
              - claims:
                  - action: read
            """,
        )
        assert "Validation profile 'readOnly' should have at least one claim" in _of(
            results, Severity.WARNING
        )
        errors = _of(results, Severity.ERROR)
        assert "Validation profile name is required" in errors
        assert "Validation profile '': claim 1 must specify an action and a resource" in errors


# ── Metadata ─────────────────────────────────────────────────────────


class TestMetadataRules:
    def test_stale_review_is_exactly_one_warning(self) -> None:
        results = _check(
            "_meta.yaml",
            """\
            name: CustomerManagement
            version: 1.0.0
            lastReviewed: 2024-01-01
            """,
        )
        warnings = _of(results, Severity.WARNING)
        assert warnings == [
            "Metadata has not been reviewed for 152 days (threshold: 90 days)"
        ]

    def test_recent_review_is_clean(self) -> None:
        results = _check("_meta.yaml", "name: Sales\nlastReviewed: 2024-05-01\n")
        assert results == []

    def test_threshold_is_configurable(self) -> None:
        ctx = RuleContext(registry=_registry(), today=TODAY, staleness_days=30)
        sink = DiagnosticsSink()
        check_file(Path("_meta.yaml"), "name: Sales\nlastReviewed: 2024-04-01\n", ctx, sink)
        assert [r.message for r in sink] == [
            "Metadata has not been reviewed for 61 days (threshold: 30 days)"
        ]

    def test_name_required(self) -> None:
        results = _check("_meta.yaml", "summary: no name\n")
        assert _of(results, Severity.ERROR) == ["Metadata name is required"]

    @pytest.mark.parametrize("version", ["1.0", "v1.0.0", "one"])
    def test_version_should_be_semver(self, version: str) -> None:
        results = _check("_meta.yaml", f"name: Sales\nversion: '{version}'\n")
        warnings = _of(results, Severity.WARNING)
        assert len(warnings) == 1
        assert "semantic version" in warnings[0]

    def test_bad_review_date_warns(self) -> None:
        results = _check("_meta.yaml", "name: Sales\nlastReviewed: last spring\n")
        assert _of(results, Severity.WARNING) == [
            "Metadata lastReviewed 'last spring' is not a valid date"
        ]


# ── Heuristics ───────────────────────────────────────────────────────


class TestAbbreviationHeuristic:
    def test_reports_each_token_once(self) -> None:
        results = _check(
            "Product.Type.yaml",
            """\
            model: Product
            summary: Product with a SKU and VAT rate; the SKU is printed
            attributeUsages:
              - name: productId
                type: primaryKey
                summary: Product ID
            """,
        )
        infos = _of(results, Severity.INFO)
        assert infos == [
            "Potential abbreviation 'SKU' found - consider using full words unless domain-specific",
            "Potential abbreviation 'VAT' found - consider using full words unless domain-specific",
        ]
