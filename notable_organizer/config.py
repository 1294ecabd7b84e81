"""Configuration for Notable Organizer.

Settings can be given in code or loaded from a YAML file:

    document_extensions: [.md]
    default_tag: untagged
    untagged_to_root: true
    preview_length: 500
    emit_url_shortcuts: false
    preserve_header: false
    duplicate_policy: overwrite
    required_tags: []
    excluded_tags: [draft]
    compress_level: 6
    archive_prefix: notable-notes-organized
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from notable_organizer.archive import DEFAULT_ARCHIVE_PREFIX, DEFAULT_COMPRESS_LEVEL
from notable_organizer.core.models import ConfigError
from notable_organizer.core.organizer import DEFAULT_PREVIEW_LENGTH, DUPLICATE_POLICIES
from notable_organizer.core.parser import DEFAULT_TAG


@dataclass
class OrganizerConfig:
    """Settings for an organize run."""
    document_extensions: List[str] = field(default_factory=lambda: ['.md'])
    default_tag: str = DEFAULT_TAG
    untagged_to_root: bool = True
    preview_length: int = DEFAULT_PREVIEW_LENGTH
    emit_url_shortcuts: bool = False
    preserve_header: bool = False
    duplicate_policy: str = 'overwrite'
    required_tags: List[str] = field(default_factory=list)
    excluded_tags: List[str] = field(default_factory=list)
    compress_level: int = DEFAULT_COMPRESS_LEVEL
    archive_prefix: str = DEFAULT_ARCHIVE_PREFIX

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: A setting is out of range
        """
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            choices = ', '.join(DUPLICATE_POLICIES)
            raise ConfigError(f"duplicate_policy must be one of: {choices}")
        if self.preview_length < 0:
            raise ConfigError("preview_length must not be negative")
        if not 0 <= self.compress_level <= 9:
            raise ConfigError("compress_level must be between 0 and 9")
        if not self.document_extensions:
            raise ConfigError("document_extensions must not be empty")
        if not self.default_tag:
            raise ConfigError("default_tag must not be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrganizerConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        for key in ('document_extensions', 'required_tags', 'excluded_tags'):
            if key in values:
                values[key] = _as_list(values[key])
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def merged(self, **overrides: Any) -> "OrganizerConfig":
        """Return a copy with the non-None `overrides` applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).from_dict(values)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def load_config(path: Union[Path, str]) -> OrganizerConfig:
    """Load an OrganizerConfig from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        OrganizerConfig with file values over defaults

    Raises:
        ConfigError: The file is missing, unparsable or has invalid values
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return OrganizerConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return OrganizerConfig.from_dict(data)
