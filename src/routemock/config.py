"""Load and validate routemock configuration documents.

A configuration document is a JSON or YAML object with ``globalDefaults``,
``globalCache`` and ``routes`` sections (see :class:`~routemock.models.MockConfig`).
It can come from a local file, an HTTP(S) URL, or stdin (``-``). The format
is detected from the file extension or content type, falling back to trying
JSON first and YAML second.

The two public functions are:

* :func:`load_config` -- Load, parse, and validate a document from any
  supported source.
* :func:`resolve_config_source` -- Decide which source to load, in
  precedence order: explicit argument (``--config``), the
  ``ROUTEMOCK_CONFIG`` environment variable, then a ``routemock.json`` /
  ``routemock.yaml`` / ``routemock.yml`` file in the working directory.

Every failure surfaces as :class:`~routemock.exceptions.ConfigLoadError`.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml
from pydantic import ValidationError

from routemock.exceptions import ConfigLoadError
from routemock.models import MockConfig

ENV_CONFIG = "ROUTEMOCK_CONFIG"
PROJECT_CONFIG_FILENAMES = ("routemock.json", "routemock.yaml", "routemock.yml")


def resolve_config_source(explicit: Optional[str] = None) -> str:
    """Return the configuration source to load.

    Args:
        explicit: Source given on the command line, if any.

    Raises:
        ConfigLoadError: If no source is given and none can be discovered.
    """
    if explicit:
        return explicit
    from_env = os.environ.get(ENV_CONFIG)
    if from_env:
        return from_env
    cwd = Path.cwd()
    for name in PROJECT_CONFIG_FILENAMES:
        candidate = cwd / name
        if candidate.is_file():
            return str(candidate)
    raise ConfigLoadError(
        f"No configuration found: pass --config, set {ENV_CONFIG}, "
        f"or create one of {', '.join(PROJECT_CONFIG_FILENAMES)}"
    )


def load_config(source: str) -> MockConfig:
    """Load a configuration from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The validated configuration.

    Raises:
        ConfigLoadError: If the source cannot be read, parsed, or validated.
    """
    if source == "-":
        raw = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        raw = _load_from_url(source)
    else:
        raw = _load_from_file(source)
    return parse_config(raw, origin=source)


def parse_config(raw: dict[str, Any], origin: str = "<memory>") -> MockConfig:
    """Validate an already-parsed document into a :class:`MockConfig`."""
    try:
        return MockConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid configuration in {origin}: {exc}") from exc


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise ConfigLoadError(f"Failed to read configuration from stdin: {exc}") from exc

    if not content.strip():
        raise ConfigLoadError("No configuration received on stdin")

    return _parse_content(content)


def _load_from_url(url: str) -> dict[str, Any]:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ConfigLoadError(
            f"HTTP {exc.response.status_code} fetching configuration from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ConfigLoadError(f"Failed to fetch configuration from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigLoadError(f"Configuration file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Failed to read configuration file {path}: {exc}") from exc

    if not content.strip():
        raise ConfigLoadError(f"Configuration file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML into a dict.

    JSON is tried first unless the hint says YAML; a JSON hint disables the
    YAML fallback.

    Raises:
        ConfigLoadError: If the content is not a JSON/YAML object.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ConfigLoadError(f"Invalid JSON configuration: {exc}") from exc
            json_error = exc

    try:
        return _require_object(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        msg = "Failed to parse configuration as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ConfigLoadError(msg) from exc


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ConfigLoadError(f"Configuration must be a JSON/YAML object (got {kind})")
    return result
