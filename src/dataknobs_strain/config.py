"""Settings and scheme files.

A configuration has two optional sections:

    ```yaml
    settings:
      default_force: sanitize
      builtin_filters: true
      freeze_registry: true

    schemes:
      username:
        - string
        - length: [3, 20]
        - regexp: "^[A-Za-z0-9_-]+$"
      user:
        name: username
        age: ["null", integer]
        tags:
          - array_of: string
    ```

Schemes use the same shapes as in Python: a string names another scheme, a
list is a chain, a mapping in scheme position is an object schema and a
mapping inside a chain lists named filters with their options. Note that
``null`` must be quoted in YAML to name the ``null`` filter.

Settings can be overridden from the environment with ``DATAKNOBS_STRAIN_``
variables, e.g. ``DATAKNOBS_STRAIN_DEFAULT_FORCE=truncate``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigurationError, StrainError
from .modes import ForceMode

if TYPE_CHECKING:
    from .engine import Strainer

logger = logging.getLogger(__name__)

ENV_PREFIX = "DATAKNOBS_STRAIN_"


def _parse_env_value(value: str) -> Any:
    """Parse an environment variable value to appropriate type."""
    if value.lower() in ["true", "yes"]:
        return True
    elif value.lower() in ["false", "no"]:
        return False

    try:
        return int(value)
    except ValueError:
        pass

    return value


@dataclass
class StrainSettings:
    """Settings for building a strainer.

    Attributes:
        default_force: Force mode used by ``Strainer.run`` when none is given
        builtin_filters: Register the built-in filters
        freeze_registry: Freeze the registry once the schemes are loaded
    """

    default_force: ForceMode = ForceMode.SANITIZE
    builtin_filters: bool = True
    freeze_registry: bool = False

    def __post_init__(self) -> None:
        self.default_force = ForceMode.parse(self.default_force)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> StrainSettings:
        """Create settings from a dictionary, rejecting unknown keys.

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown strain settings: {', '.join(unknown)}",
                context={"unknown": unknown, "allowed": sorted(known)},
            )
        return cls(**data)

    def with_env_overrides(self, environ: Dict[str, str] | None = None, prefix: str = ENV_PREFIX) -> StrainSettings:
        """Return a copy with ``<prefix><SETTING>`` environment values applied."""
        environ = os.environ if environ is None else environ
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for name in values:
            key = f"{prefix}{name.upper()}"
            if key in environ:
                values[name] = _parse_env_value(environ[key])
                logger.debug(f"Setting '{name}' overridden by {key}")
        return type(self)(**values)


@dataclass
class StrainConfig:
    """Loaded configuration: settings plus named schemes in file order."""

    settings: StrainSettings = field(default_factory=StrainSettings)
    schemes: Dict[str, Any] = field(default_factory=dict)


def _read_file(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path).resolve()
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}", context={"path": str(path)})

    suffix = path.suffix.lower()
    with open(path) as f:
        if suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ConfigurationError(f"Unsupported file format: {suffix}", context={"path": str(path)})

    logger.info(f"Loaded strain configuration from {path}")
    return data or {}


def load_config(source: Union[str, Path, dict, None] = None, use_env: bool = True) -> StrainConfig:
    """Load settings and schemes from a file or dictionary.

    Args:
        source: YAML/JSON file path or configuration dictionary
        use_env: Apply ``DATAKNOBS_STRAIN_*`` environment overrides

    Returns:
        StrainConfig

    Raises:
        ConfigurationError: If the source or any of its sections is invalid
    """
    if source is None:
        data: Dict[str, Any] = {}
    elif isinstance(source, dict):
        data = source
    elif isinstance(source, (str, Path)):
        data = _read_file(source)
    else:
        raise ConfigurationError(f"Invalid source type: {type(source)}")

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping", context={"type": type(data).__name__})

    unknown = sorted(set(data) - {"settings", "schemes"})
    for section in unknown:
        logger.warning(f"Ignoring unknown configuration section: {section}")

    try:
        settings = StrainSettings.from_dict(data.get("settings"))
        if use_env:
            settings = settings.with_env_overrides()
    except ConfigurationError:
        raise
    except (TypeError, StrainError) as e:
        raise ConfigurationError(f"Invalid strain settings: {e}") from e

    schemes = data.get("schemes") or {}
    if not isinstance(schemes, dict):
        raise ConfigurationError("'schemes' must be a mapping of name to scheme")

    return StrainConfig(settings=settings, schemes=dict(schemes))


def build_strainer(config: StrainConfig) -> Strainer:
    """Create a strainer with its own registry from a loaded configuration.

    Raises:
        ConfigurationError: If a scheme cannot be registered
    """
    from .engine import Strainer
    from .filters import register_builtin_filters

    strainer = Strainer(default_force=config.settings.default_force)
    if config.settings.builtin_filters:
        register_builtin_filters(strainer)

    for name, scheme in config.schemes.items():
        if not strainer.register(name, scheme):
            raise ConfigurationError(
                f"Invalid scheme definition: {name}",
                context={"name": name, "scheme": scheme},
            )
    logger.info(f"Registered {len(config.schemes)} configured schemes")

    if config.settings.freeze_registry:
        strainer.registry.freeze()
    return strainer
