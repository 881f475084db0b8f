"""Payload validation in front of the generator.

Turns a raw request payload (camelCase keys, as delivered by the wizard UI or
a JSON file) into a :class:`~govgen.models.GovernanceConfig`, or raises a
:class:`~govgen.errors.ConfigurationError` listing *every* problem found.
Fields that belong to an inactive branch of an axis are dropped before
validation, so they are never reported.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from .config import GeneratorOptions
from .errors import ConfigurationError, ValidationIssue
from .models import (
    CURRENT_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
    ClockMode,
    ExistingToken,
    GovernanceConfig,
    TimelockType,
    conditional_issues,
    normalise_axis_value,
)

_ADDRESS_FIELDS = {"tokenAddress", "treasuryAddress", "adminAddress"}


def validate_config(
    payload: Mapping[str, Any],
    options: GeneratorOptions | None = None,
) -> GovernanceConfig:
    """Validate *payload* and return an immutable ``GovernanceConfig``.

    Args:
        payload: Raw configuration mapping. Keys may be camelCase (wire
            format) or snake_case.
        options: Generator options; used for limits such as the maximum
            timelock delay.

    Raises:
        ConfigurationError: With the aggregated list of issues.
    """
    options = options or GeneratorOptions()
    data = drop_inactive_fields(payload)
    issues: list[ValidationIssue] = []

    version = str(data.get("schemaVersion", CURRENT_SCHEMA_VERSION))
    if version == LEGACY_SCHEMA_VERSION:
        issues.append(ValidationIssue(
            field="schemaVersion",
            message=(
                "Schema version 1 (free-text governance/voting) is no longer "
                f"supported; submit schema version {CURRENT_SCHEMA_VERSION}"
            ),
        ))
    elif version != CURRENT_SCHEMA_VERSION:
        issues.append(ValidationIssue(
            field="schemaVersion",
            message=f"Unknown schema version {version!r}",
        ))

    config: GovernanceConfig | None = None
    try:
        config = GovernanceConfig.model_validate(data)
    except ValidationError as exc:
        issues.extend(_translate_errors(exc))

    # Run the cross-field rules on the raw data as well, so they are reported
    # even when field-level validation already failed.
    for field, message in conditional_issues(data):
        issues.append(ValidationIssue(field=field, message=message))

    if _timelock_active(data):
        delay = data.get("minTimelockDelay")
        if isinstance(delay, int) and delay > options.maximum_delay:
            issues.append(ValidationIssue(
                field="minTimelockDelay",
                message=(
                    f"Minimum timelock delay must not exceed {options.maximum_delay} seconds"
                ),
            ))

    issues = _dedupe(issues)
    if issues or config is None:
        raise ConfigurationError(issues)
    return config


def drop_inactive_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a camelCase copy of *payload* without inactive-branch fields."""
    fields = GovernanceConfig.model_fields
    data = {(to_camel(k) if k in fields else k): v for k, v in payload.items()}

    if data.get("hasExistingToken") == ExistingToken.YES.value:
        data.pop("tokenDecimals", None)
    else:
        data.pop("tokenAddress", None)

    if data.get("tokenClockMode") == ClockMode.TIMESTAMP.value:
        data.pop("blockTimeSeconds", None)

    if not _timelock_active(data):
        data.pop("minTimelockDelay", None)

    # Optional addresses sent as empty strings by form clients mean "absent".
    for key in _ADDRESS_FIELDS:
        if data.get(key) == "":
            data.pop(key)

    return data


def _timelock_active(data: Mapping[str, Any]) -> bool:
    value = normalise_axis_value(data.get("timelockType", TimelockType.NONE.value))
    return value != TimelockType.NONE.value


def _translate_errors(exc: ValidationError) -> list[ValidationIssue]:
    """Convert pydantic errors into ``{field, message}`` issues."""
    issues: list[ValidationIssue] = []
    for err in exc.errors():
        loc = err.get("loc", ())
        if not loc:
            # Model-level errors come from conditional_issues(), reported separately.
            continue
        raw = str(loc[0])
        field = to_camel(raw) if raw in GovernanceConfig.model_fields else raw
        message = err.get("msg", "Invalid value")
        if field in _ADDRESS_FIELDS and err.get("type") == "string_pattern_mismatch":
            message = "Invalid Ethereum address format"
        elif err.get("type") == "missing":
            message = f"{field} is required"
        issues.append(ValidationIssue(field=field, message=message))
    return issues


def _dedupe(issues: list[ValidationIssue]) -> list[ValidationIssue]:
    seen: set[tuple[str, str]] = set()
    unique: list[ValidationIssue] = []
    for issue in issues:
        key = (issue.field, issue.message)
        if key not in seen:
            seen.add(key)
            unique.append(issue)
    return unique
