# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import os
from collections.abc import Mapping
from typing import Any, ClassVar, Literal

SOURCE_CONSTRUCTOR = "constructor"
SOURCE_ENVIRONMENT = "environment"
SOURCE_DEFAULT = "default"
SOURCE_IN_CODE_UPDATE = "in_code_update"

SourceType = Literal[
    "constructor",
    "environment",
    "default",
    "in_code_update",
]

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


class ConfigValue:
    """Configuration value with metadata about its source"""

    def __init__(self, value: Any, source: SourceType):
        self.value = value
        self.source = source

    def __repr__(self) -> str:
        return f"ConfigValue(value={self.value!r}, source={self.source!r})"


class SignerConfig:
    """
    Signer configuration with precedence-based resolution.

    Values are taken from, in order: explicit constructor arguments, environment
    variables, then defaults. The sentinel value (...) distinguishes "not provided"
    from an explicit value.

    HOW TO ADD A NEW CONFIG FIELD:

    1. Add the parameter to the __init__ method with sentinel default.
    2. Add it to CONFIG_FIELDS with "default", optional "env_var" and optional
       "parser" (the name of a method converting the raw environment string).
    3. Add property getter and setter.
    """

    CONFIG_FIELDS: ClassVar[dict[str, dict[str, Any]]] = {
        "wire_logging_enabled": {
            "env_var": "SNDA_WIRE_LOGGING",
            "default": False,
            "parser": "_parse_bool",
        },
    }

    def __init__(
        self,
        *,
        wire_logging_enabled: bool = ...,  # type: ignore[assignment]
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._environ = environ
        constructor_values: dict[str, Any] = {
            "wire_logging_enabled": wire_logging_enabled,
        }
        for name, field_config in self.CONFIG_FIELDS.items():
            resolved = self._resolve(name, field_config, constructor_values)
            setattr(self, f"_{name}", resolved)

    @property
    def wire_logging_enabled(self) -> bool:
        """Whether the string to sign and signature go to the signature wire."""
        return self._wire_logging_enabled.value

    @wire_logging_enabled.setter
    def wire_logging_enabled(self, value: bool) -> None:
        self._wire_logging_enabled = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    def get_source(self, name: str) -> SourceType:
        """Where the current value of a config field came from."""
        if name not in self.CONFIG_FIELDS:
            raise KeyError(f"Unknown config field: {name}")
        return getattr(self, f"_{name}").source

    def _get_environ(self) -> Mapping[str, str]:
        if self._environ is not None:
            return self._environ
        return os.environ

    def _resolve(
        self,
        name: str,
        field_config: dict[str, Any],
        constructor_values: dict[str, Any],
    ) -> ConfigValue:
        value = constructor_values.get(name, ...)
        if value is not ...:
            return ConfigValue(value, SOURCE_CONSTRUCTOR)

        env_var = field_config.get("env_var")
        if env_var is not None:
            raw = self._get_environ().get(env_var)
            if raw is not None:
                parser = getattr(self, field_config.get("parser", "_parse_str"))
                return ConfigValue(parser(raw, env_var), SOURCE_ENVIRONMENT)

        return ConfigValue(field_config["default"], SOURCE_DEFAULT)

    def _parse_str(self, raw: str, env_var: str) -> str:
        return raw

    def _parse_bool(self, raw: str, env_var: str) -> bool:
        normalized = raw.strip().lower()
        if normalized in _TRUTHY:
            return True
        if normalized in _FALSY:
            return False
        raise ValueError(
            f"Invalid boolean value for {env_var}: {raw!r}. Expected one of "
            f"{', '.join(_TRUTHY + _FALSY[:-1])}."
        )
