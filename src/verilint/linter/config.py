"""Rule configuration parsing.

Two layers live here:

* the per-rule parameter syntax, a flat ``name:value;name:value`` string
  that a rule turns into typed option values through ``parse_name_values``
  with one setter per recognised key, and
* the per-run rule selection, either a command-line flag
  (``"explicit-begin=if_enable:false,-some-rule"``) or a YAML rules file,
  both producing ``{rule_name: RuleSetting}``.

Every malformed input raises ``ConfigurationError`` before any scanning
starts; nothing is silently dropped.

YAML rules file layout::

    rules:
      explicit-begin:
        enabled: true
        options:
          if_enable: false
      other-rule: false
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import yaml

logger = logging.getLogger(__name__)

ValueSetter = Callable[[str], None]

# Either the flat ``name:value`` text or an already split mapping.
RuleConfiguration = Union[str, Mapping[str, object]]

_TRUE_WORDS = frozenset({"true", "t", "yes", "y", "on", "1"})
_FALSE_WORDS = frozenset({"false", "f", "no", "n", "off", "0"})


class ConfigurationError(ValueError):
    """Raised for an unknown option, a malformed value, or a bad rules file.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    rule_name:
        The rule being configured, when known.
    option:
        The offending option key, when known.
    value:
        The offending raw value, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        rule_name: str | None = None,
        option: str | None = None,
        value: str | None = None,
    ) -> None:
        prefix = f"{rule_name}: " if rule_name else ""
        super().__init__(f"{prefix}{message}")
        self.rule_name = rule_name
        self.option = option
        self.value = value


def parse_bool(value: str) -> bool:
    """Parse a boolean option value.

    An empty value means ``True`` so that a bare ``if_enable`` switches the
    option on.

    Raises
    ------
    ValueError
        If ``value`` is not a recognised boolean word.
    """
    word = value.strip().lower()
    if not word or word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(
        f"Boolean value should be one of 'true', 'false', 'yes', 'no', 'on', 'off', '1', '0'; "
        f"got {value!r}"
    )


def parse_name_values(
    configuration: str,
    setters: Mapping[str, ValueSetter],
    rule_name: str | None = None,
) -> None:
    """Apply a ``name:value;name:value`` configuration string.

    Items are separated by ``;``; whitespace around names and values is
    ignored and empty items are skipped.  Each value is passed to the setter
    registered for its name.

    Parameters
    ----------
    configuration:
        The raw configuration text.
    setters:
        Mapping of accepted option name to a callable that stores its value
        and raises ``ValueError`` on malformed input.
    rule_name:
        Used to prefix error messages.

    Raises
    ------
    ConfigurationError
        On an unknown option name or a value its setter rejects.
    """
    for item in configuration.split(";"):
        item = item.strip()
        if not item:
            continue
        name, _, value = item.partition(":")
        name = name.strip()
        value = value.strip()
        setter = setters.get(name)
        if setter is None:
            supported = ", ".join(sorted(setters)) or "none"
            raise ConfigurationError(
                f"{name!r}: unknown parameter; supported parameters are {supported}",
                rule_name=rule_name,
                option=name,
                value=value,
            )
        try:
            setter(value)
        except ValueError as exc:
            raise ConfigurationError(
                f"{name!r}: {exc}", rule_name=rule_name, option=name, value=value
            ) from exc
        logger.debug("Configured %s.%s = %r", rule_name or "<rule>", name, value)


def configuration_to_text(configuration: RuleConfiguration) -> str:
    """Normalise a rule configuration to the flat ``name:value`` form.

    ``bool`` values in a mapping are written as ``true``/``false``; other
    values are converted with ``str``.
    """
    if isinstance(configuration, str):
        return configuration
    items: list[str] = []
    for name, value in configuration.items():
        if isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        if ";" in text or ";" in str(name):
            raise ConfigurationError(
                f"{name!r}: values must not contain ';'", option=str(name), value=text
            )
        items.append(f"{name}:{text}")
    return ";".join(items)


# ---------------------------------------------------------------------------
# Rule selection
# ---------------------------------------------------------------------------


@dataclass
class RuleSetting:
    """Whether a rule runs and with which parameters.

    Parameters
    ----------
    enabled:
        ``False`` turns the rule off for the run.
    configuration:
        Parameters in ``name:value;name:value`` form.
    """

    enabled: bool = True
    configuration: str = field(default="")


def parse_rules_flag(text: str) -> dict[str, RuleSetting]:
    """Parse a comma-separated rules flag.

    Each item is ``[+|-]rule-name[=name:value;name:value]``.  A leading
    ``-`` disables the rule; ``+`` or no prefix enables it.

    Raises
    ------
    ConfigurationError
        If an item has an empty rule name, or configures a disabled rule.
    """
    settings: dict[str, RuleSetting] = {}
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        name, has_config, configuration = item.partition("=")
        name = name.strip()
        enabled = True
        if name.startswith("-"):
            enabled = False
            name = name[1:].strip()
        elif name.startswith("+"):
            name = name[1:].strip()
        if not name:
            raise ConfigurationError(f"missing rule name in {item!r}")
        if not enabled and has_config:
            raise ConfigurationError(
                f"cannot configure disabled rule in {item!r}", rule_name=name
            )
        settings[name] = RuleSetting(enabled=enabled, configuration=configuration.strip())
    return settings


def load_rules_file(path: str | Path) -> dict[str, RuleSetting]:
    """Load rule selection and parameters from a YAML rules file.

    A rule entry may be a bare boolean (enable/disable), or a mapping with
    optional ``enabled`` and ``options`` keys where ``options`` is either a
    mapping or a ``name:value;name:value`` string.

    Raises
    ------
    ConfigurationError
        If the file cannot be read, is not valid YAML, or has the wrong shape.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read rules file {str(path)!r}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML in rules file {str(path)!r}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict) or not isinstance(data.get("rules", {}), dict):
        raise ConfigurationError(
            f"rules file {str(path)!r} must contain a 'rules' mapping"
        )

    settings: dict[str, RuleSetting] = {}
    for name, entry in (data.get("rules") or {}).items():
        settings[str(name)] = _setting_from_yaml(str(name), entry)
    logger.debug("Loaded %d rule setting(s) from %s", len(settings), path)
    return settings


def _setting_from_yaml(name: str, entry: object) -> RuleSetting:
    if entry is None:
        return RuleSetting()
    if isinstance(entry, bool):
        return RuleSetting(enabled=entry)
    if not isinstance(entry, dict):
        raise ConfigurationError(
            "rule entry must be a boolean or a mapping", rule_name=name
        )
    unknown = set(entry) - {"enabled", "options"}
    if unknown:
        raise ConfigurationError(
            f"unknown key(s) {', '.join(sorted(map(str, unknown)))} in rule entry",
            rule_name=name,
        )
    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigurationError("'enabled' must be a boolean", rule_name=name)
    options = entry.get("options") or ""
    if not isinstance(options, (str, dict)):
        raise ConfigurationError(
            "'options' must be a mapping or a 'name:value;...' string", rule_name=name
        )
    return RuleSetting(enabled=enabled, configuration=configuration_to_text(options))


def merge_settings(
    base: Mapping[str, RuleSetting], override: Mapping[str, RuleSetting]
) -> dict[str, RuleSetting]:
    """Return ``base`` updated with ``override``; later entries win per rule."""
    merged = dict(base)
    merged.update(override)
    return merged
