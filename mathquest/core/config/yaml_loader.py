# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""YAML catalogue loading.

The curriculum ships as a YAML catalogue inside the package. A deployment
may layer one or more overlay files on top of it; each overlay only carries
the keys it changes, and a ``null`` value removes a key from the layers
below it (for example, to drop an activity from a chapter).

Example:
    >>> from mathquest.core.config.yaml_loader import load_layered
    >>> catalogue = load_layered(packaged_path, Path("/etc/mathquest/curriculum.yaml"))
"""

from pathlib import Path
from typing import Any

import yaml


class YAMLLoadError(Exception):
    """Raised when a YAML catalogue cannot be read or is not a mapping.

    Attributes:
        path: File that failed to load.
        reason: What went wrong.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load YAML file '{path}': {reason}")


def load_yaml(path: Path | str) -> dict[str, Any]:
    """Read a YAML file whose root is a mapping.

    An empty or comment-only file yields an empty dict.

    Raises:
        YAMLLoadError: If the path is missing, is not a regular file,
            cannot be read, is not valid YAML, or has a non-mapping root.
    """
    path = Path(path)
    if not path.exists():
        raise YAMLLoadError(path, "File does not exist")
    if not path.is_file():
        raise YAMLLoadError(path, "Path is not a file")

    try:
        with path.open(encoding="utf-8") as stream:
            document = yaml.safe_load(stream)
    except OSError as e:
        raise YAMLLoadError(path, f"Cannot read file: {e}") from e
    except yaml.YAMLError as e:
        raise YAMLLoadError(path, f"Invalid YAML syntax: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise YAMLLoadError(
            path, f"YAML root must be a mapping, got {type(document).__name__}"
        )
    return document


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` onto ``base`` without modifying either.

    Mappings present on both sides merge recursively. A ``None`` in
    ``override`` deletes the key; any other value replaces it.

    Example:
        >>> base = {"chapters": {"fractions": {"passing_score": 80, "order": 1}}}
        >>> deep_merge(base, {"chapters": {"fractions": {"passing_score": 90}}})
        {'chapters': {'fractions': {'passing_score': 90, 'order': 1}}}
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            merged.pop(key, None)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_layered(base_path: Path | str, *overlay_paths: Path | str) -> dict[str, Any]:
    """Load a base catalogue and merge each overlay onto it in order.

    Raises:
        YAMLLoadError: If any of the files fails to load.
    """
    document = load_yaml(base_path)
    for overlay_path in overlay_paths:
        document = deep_merge(document, load_yaml(overlay_path))
    return document
