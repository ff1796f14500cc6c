"""Read a routing configuration document from disk.

Documents may be YAML or JSON (JSON is a subset of YAML), so both go
through PyYAML's safe loader before validation.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from aka._config import ConfigurationInvalid, parse_configuration

if TYPE_CHECKING:
    import os

    from aka._config import RoutingConfiguration


def parse_configuration_text(text: str, *, source: str = "<string>") -> RoutingConfiguration:
    """Parse and validate a YAML/JSON configuration document.

    Raises:
        ConfigurationInvalid: If the text is not a well-formed document or
            fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"cannot parse configuration {source}: {e}"
        raise ConfigurationInvalid(msg) from e
    return parse_configuration(data)


def load_configuration(path: str | os.PathLike[str]) -> RoutingConfiguration:
    """Load and validate a configuration file.

    Raises:
        OSError: If the file cannot be read.
        ConfigurationInvalid: If the file is not UTF-8, or the document
            is malformed or invalid.
    """
    file = Path(path)
    try:
        text = file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        msg = f"cannot parse configuration {file}: not valid UTF-8 ({e.reason})"
        raise ConfigurationInvalid(msg) from e
    return parse_configuration_text(text, source=str(file))
