"""Persistent JSON config helpers.

Stores the ignore-file name, source-module extensions, and the extension
preference order used when a lookup matches several files. All access is
defensive: malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .gitignore import DEFAULT_IGNORE_FILE

APP_NAME = "lazydocs"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_SOURCE_MODULE_EXTENSIONS: tuple[str, ...] = ("js", "jsx", "mjs", "cjs", "ts", "tsx", "mts", "cts")
DEFAULT_EXTENSION_PREFERENCE: tuple[str, ...] = (
    "ts",
    "tsx",
    "js",
    "jsx",
    "mts",
    "cts",
    "mjs",
    "cjs",
    "mdx",
    "md",
    "json",
)


@dataclass(frozen=True)
class Settings:
    """Resolved settings used when a ``Directory`` is constructed."""

    ignore_file: str = DEFAULT_IGNORE_FILE
    source_module_extensions: tuple[str, ...] = DEFAULT_SOURCE_MODULE_EXTENSIONS
    extension_preference: tuple[str, ...] = DEFAULT_EXTENSION_PREFERENCE


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored so a read-only config
    directory never breaks callers.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _coerce_extensions(value: object) -> tuple[str, ...] | None:
    """Normalize a JSON list of extensions; ``None`` when invalid or empty.

    Leading dots are dropped and values lower-cased, so ``".TS"`` becomes
    ``"ts"``.
    """
    if not isinstance(value, list):
        return None
    extensions: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        stripped = item.strip().lstrip(".").lower()
        if stripped and stripped not in extensions:
            extensions.append(stripped)
    return tuple(extensions) or None


def load_ignore_file() -> str:
    value = load_config().get("ignore_file")
    if not isinstance(value, str):
        return DEFAULT_IGNORE_FILE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_IGNORE_FILE


def save_ignore_file(name: str) -> None:
    stripped = str(name).strip()
    if not stripped:
        return
    config = load_config()
    config["ignore_file"] = stripped
    save_config(config)


def load_source_module_extensions() -> tuple[str, ...]:
    """Extensions whose files are treated as importable source modules."""
    return _coerce_extensions(load_config().get("source_module_extensions")) or DEFAULT_SOURCE_MODULE_EXTENSIONS


def load_extension_preference() -> tuple[str, ...]:
    """Preference order for ambiguous extension-less file lookups."""
    return _coerce_extensions(load_config().get("extension_preference")) or DEFAULT_EXTENSION_PREFERENCE


def save_extension_preference(extensions: list[str]) -> None:
    normalized = _coerce_extensions(list(extensions))
    if normalized is None:
        return
    config = load_config()
    config["extension_preference"] = list(normalized)
    save_config(config)


def load_settings() -> Settings:
    """Read every setting in one pass of the config file."""
    data = load_config()
    ignore_file = data.get("ignore_file")
    return Settings(
        ignore_file=ignore_file.strip() if isinstance(ignore_file, str) and ignore_file.strip() else DEFAULT_IGNORE_FILE,
        source_module_extensions=_coerce_extensions(data.get("source_module_extensions"))
        or DEFAULT_SOURCE_MODULE_EXTENSIONS,
        extension_preference=_coerce_extensions(data.get("extension_preference")) or DEFAULT_EXTENSION_PREFERENCE,
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_SOURCE_MODULE_EXTENSIONS",
    "DEFAULT_EXTENSION_PREFERENCE",
    "Settings",
    "load_config",
    "save_config",
    "load_ignore_file",
    "save_ignore_file",
    "load_source_module_extensions",
    "load_extension_preference",
    "save_extension_preference",
    "load_settings",
]
