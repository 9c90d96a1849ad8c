"""
stateless_lint/config.py
════════════════════════

The read-only configuration record handed to every classification call.

Two sources are understood:

  • ESLint-style option objects::

        {"ignorePureComponents": true,
         "settings": {"react": {"version": "15.4.0", "pragma": "React"}}}

  • snake_case keys matching the dataclass fields::

        {"ignore_pure_components": true, "react_version": "15.4.0"}

Unknown keys are ignored.  Values of the wrong type raise
:class:`~stateless_lint.errors.ConfigurationError`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from stateless_lint.errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)


GENERIC_BASE_NAME = "Component"
RESTRICTED_BASE_NAME = "PureComponent"


@dataclass(frozen=True)
class Configuration:
    """
    Attributes
    ----------
    ignore_pure_components : accepted for ESLint config compatibility; a
                             ``PureComponent`` base never disqualifies on
                             its own whichever way it is set
    react_version          : configured framework version (None = latest)
    pragma                 : namespace the framework is imported under
    create_class           : name of the factory-style definition call
    """
    ignore_pure_components: bool = False
    react_version: Optional[str] = None
    pragma: str = "React"
    create_class: str = "createReactClass"

    @classmethod
    def from_options(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        settings: Optional[Mapping[str, Any]] = None,
    ) -> Configuration:
        """Build a configuration from ESLint-style or snake_case mappings."""
        options = dict(options or {})
        if settings is None:
            settings = options.get("settings", {})
        if not isinstance(settings, Mapping):
            raise ConfigurationError("'settings' must be an object")
        react = settings.get("react", {})
        if not isinstance(react, Mapping):
            raise ConfigurationError("'settings.react' must be an object")

        ignore = _first(options, "ignore_pure_components", "ignorePureComponents")
        version = _first(options, "react_version") or react.get("version")
        pragma = _first(options, "pragma") or react.get("pragma")
        create_class = _first(options, "create_class") or react.get("createClass")

        if ignore is not None and not isinstance(ignore, bool):
            raise ConfigurationError(
                f"ignorePureComponents must be a boolean, got {ignore!r}"
            )
        for key, value in (
            ("version", version),
            ("pragma", pragma),
            ("createClass", create_class),
        ):
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"{key} must be a string, got {value!r}")

        config = cls(
            ignore_pure_components=bool(ignore),
            react_version=version or None,
            pragma=pragma or cls.pragma,
            create_class=create_class or cls.create_class,
        )
        logger.debug("Loaded configuration %s", config)
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> Configuration:
        """Load a JSON configuration file."""
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(
                f"cannot read configuration file {path}: {exc}",
                code=ErrorCode.UNREADABLE_CONFIG,
            ) from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"invalid JSON in configuration file {path}: {exc}",
                code=ErrorCode.UNREADABLE_CONFIG,
            ) from exc
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"configuration file {path} must contain a JSON object",
                code=ErrorCode.UNREADABLE_CONFIG,
            )
        return cls.from_options(data)

    def replace(self, **changes: Any) -> Configuration:
        """Return a copy with ``changes`` applied (CLI overrides)."""
        values = {
            "ignore_pure_components": self.ignore_pure_components,
            "react_version": self.react_version,
            "pragma": self.pragma,
            "create_class": self.create_class,
        }
        values.update({k: v for k, v in changes.items() if v is not None})
        return Configuration(**values)


def _first(options: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in options:
            return options[key]
    return None


__all__ = [
    "Configuration",
    "GENERIC_BASE_NAME",
    "RESTRICTED_BASE_NAME",
]
