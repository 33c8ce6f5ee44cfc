"""
Configuration provider for tfmerge.

ConfigProvider is the lookup contract the workflow depends on. ConfigManager
is the in-memory implementation the CLI fills from its options; values are
coerced to the type of the key on the way in, so get_value() always returns a
value of the documented type.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from tfmerge.models import BranchLatestSelection, CheckInCommentMode

from .config_keys import ConfigKey

DEFAULT_COMMENT_TEMPLATE = "Merge {0} --> {1}"
DEFAULT_EXCLUDED_WORK_ITEM_TYPES: Tuple[str, ...] = (
    "Code Review Request",
    "Code Review Response",
)


class ConfigProvider(ABC):
    """Typed key-value lookup for workflow toggles and templates."""

    @abstractmethod
    def get_value(self, key: ConfigKey) -> Any:
        """Return the current value for key."""


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off", ""):
            return False
    if isinstance(value, int):
        return bool(value)
    raise ValueError(f"Cannot interpret {value!r} as a boolean")


def _to_branch_selection(value: Any) -> BranchLatestSelection:
    if isinstance(value, BranchLatestSelection):
        return value
    try:
        return BranchLatestSelection(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(s.value for s in BranchLatestSelection)
        raise ValueError(f"Unknown branch selection {value!r} (expected one of: {choices})") from None


def _to_comment_mode(value: Any) -> CheckInCommentMode:
    if isinstance(value, CheckInCommentMode):
        return value
    try:
        return CheckInCommentMode(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(m.value for m in CheckInCommentMode)
        raise ValueError(f"Unknown comment mode {value!r} (expected one of: {choices})") from None


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"Expected a string, got {value!r}")
    return value


def _to_type_list(value: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        parts = value.split(",")
    else:
        try:
            parts = list(value)
        except TypeError:
            raise ValueError(f"Expected a list of work item types, got {value!r}") from None
    for part in parts:
        if not isinstance(part, str):
            raise ValueError(f"Work item types must be strings, got {part!r}")
    return tuple(p.strip() for p in parts if p.strip())


_COERCERS: Dict[ConfigKey, Callable[[Any], Any]] = {
    ConfigKey.WARN_ON_PENDING_CHANGES: _to_bool,
    ConfigKey.LATEST_VERSION_FOR_BRANCH: _to_branch_selection,
    ConfigKey.RESOLVE_CONFLICTS: _to_bool,
    ConfigKey.SHOW_LATEST_VERSION_IN_COMMENT: _to_bool,
    ConfigKey.CHECK_IN_COMMENT_MODE: _to_comment_mode,
    ConfigKey.COMMENT_TEMPLATE: _to_str,
    ConfigKey.EXCLUDE_WORK_ITEMS_FOR_MERGE: _to_bool,
    ConfigKey.WORK_ITEM_TYPES_TO_EXCLUDE: _to_type_list,
}

DEFAULTS: Mapping[ConfigKey, Any] = {
    ConfigKey.WARN_ON_PENDING_CHANGES: True,
    ConfigKey.LATEST_VERSION_FOR_BRANCH: BranchLatestSelection.NONE,
    ConfigKey.RESOLVE_CONFLICTS: False,
    ConfigKey.SHOW_LATEST_VERSION_IN_COMMENT: False,
    ConfigKey.CHECK_IN_COMMENT_MODE: CheckInCommentMode.MERGE_DIRECTION,
    ConfigKey.COMMENT_TEMPLATE: DEFAULT_COMMENT_TEMPLATE,
    ConfigKey.EXCLUDE_WORK_ITEMS_FOR_MERGE: False,
    ConfigKey.WORK_ITEM_TYPES_TO_EXCLUDE: DEFAULT_EXCLUDED_WORK_ITEM_TYPES,
}


class ConfigManager(ConfigProvider):
    """In-memory configuration with typed defaults.

    Example:
        config = ConfigManager({ConfigKey.RESOLVE_CONFLICTS: True})
        config.add_value(ConfigKey.LATEST_VERSION_FOR_BRANCH, "source")
        config.get_value(ConfigKey.LATEST_VERSION_FOR_BRANCH)
        # BranchLatestSelection.SOURCE
    """

    def __init__(self, values: Optional[Mapping[ConfigKey, Any]] = None) -> None:
        """Initialize with defaults, overridden by values.

        Raises:
            ValueError: If a value cannot be coerced to the key's type.
        """
        self._values: Dict[ConfigKey, Any] = dict(DEFAULTS)
        for key, value in (values or {}).items():
            self.add_value(key, value)

    def add_value(self, key: ConfigKey, value: Any) -> None:
        """Set key to value after coercing it to the key's type.

        Raises:
            ValueError: If value cannot be coerced.
        """
        if not isinstance(key, ConfigKey):
            raise ValueError(f"Unknown configuration key: {key!r}")
        self._values[key] = _COERCERS[key](value)

    def get_value(self, key: ConfigKey) -> Any:
        if not isinstance(key, ConfigKey):
            raise ValueError(f"Unknown configuration key: {key!r}")
        return self._values[key]
