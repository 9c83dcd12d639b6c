"""Configuration validation utilities."""

import math
from dataclasses import dataclass, fields
from typing import Any

from ..catalog.instruments import QuoteCategory
from .defaults import SettingsDefaults, SizingParams, StoreParams


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_settings(params: dict[str, Any]) -> list[ValidationError]:
        """Validate account settings (capital, risk percentage, leverage)."""
        errors = []

        if "initial_capital" in params:
            value = params["initial_capital"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="initial_capital",
                    message="Must be a positive number",
                    value=value
                ))

        if "stop_loss_percentage" in params:
            value = params["stop_loss_percentage"]
            if not _is_number(value) or value <= 0 or value > 100:
                errors.append(ValidationError(
                    field="stop_loss_percentage",
                    message="Must be a number greater than 0 and at most 100",
                    value=value
                ))

        if "leverage" in params:
            value = params["leverage"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="leverage",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_sizing_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate lot quantization parameters."""
        errors = []

        if "lot_step" in params:
            value = params["lot_step"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="lot_step",
                    message="Must be a positive number",
                    value=value
                ))

        if "display_decimals" in params:
            value = params["display_decimals"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="display_decimals",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_instrument_overrides(params: Any) -> list[ValidationError]:
        """Validate a per-symbol override block from instruments.yaml."""
        if not isinstance(params, dict):
            return [ValidationError(field="instrument", message="Must be a mapping", value=params)]

        errors = []

        if "default_contract_size" in params:
            value = params["default_contract_size"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="default_contract_size",
                    message="Must be a positive number",
                    value=value
                ))

        if "quote_currency" in params:
            value = params["quote_currency"]
            if not isinstance(value, str) or len(value) != 3 or not value.isalpha():
                errors.append(ValidationError(
                    field="quote_currency",
                    message="Must be a 3-letter currency code",
                    value=value
                ))

        if "category" in params:
            value = params["category"]
            if value not in {c.value for c in QuoteCategory}:
                errors.append(ValidationError(
                    field="category",
                    message="Must be one of " + ", ".join(c.value for c in QuoteCategory),
                    value=value
                ))

        return errors
    @staticmethod
    def validate_store_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate settings database parameters."""
        errors = []

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="db_path",
                    message="Must be a non-empty path",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_section(section: str, params: Any) -> list[ValidationError]:
        """
        Validate one top-level section of the global configuration.

        Unknown sections, non-mapping sections and unknown keys are errors
        as well as out-of-range values.
        """
        if section not in SECTION_FIELDS:
            return [ValidationError(field=section, message="Unknown section", value=params)]

        if not isinstance(params, dict):
            return [ValidationError(field=section, message="Must be a mapping", value=params)]

        errors = [
            ValidationError(field=key, message=f"Unknown {section} parameter", value=value)
            for key, value in params.items()
            if key not in SECTION_FIELDS[section]
        ]
        errors.extend(SECTION_VALIDATORS[section](params))
        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "settings" in config:
            errors.extend(ConfigValidator.validate_settings(config["settings"]))

        if "sizing" in config:
            errors.extend(ConfigValidator.validate_sizing_params(config["sizing"]))

        if "store" in config:
            errors.extend(ConfigValidator.validate_store_params(config["store"]))

        if "instrument" in config:
            errors.extend(ConfigValidator.validate_instrument_overrides(config["instrument"]))

        return errors


SECTION_FIELDS = {
    "settings": {f.name for f in fields(SettingsDefaults)},
    "sizing": {f.name for f in fields(SizingParams)},
    "store": {f.name for f in fields(StoreParams)},
}

SECTION_VALIDATORS = {
    "settings": ConfigValidator.validate_settings,
    "sizing": ConfigValidator.validate_sizing_params,
    "store": ConfigValidator.validate_store_params,
}
