"""Path alias ("shorthand") discovery and link resolution.

Aliases come from the ``compilerOptions.paths`` table of ``tsconfig*.json``
files. A config applies to every document below its own directory. When
several applicable configs define the same alias, the nearest one wins.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import PurePath
from urllib.parse import unquote, urlparse

from omt_analysis.config import Settings
from omt_analysis.core.ports.filesystem import FileSystemPort
from omt_analysis.errors import ConfigParseError

logger = logging.getLogger(__name__)

ShorthandMap = dict[str, str]

_WILDCARD_MARKERS = ("/*", "\\*")
_QUOTES = "\"'"


def uri_to_path(uri: str) -> str:
    """Turn a ``file://`` URI into a plain path; plain paths pass through."""
    if uri.startswith("file:"):
        return unquote(urlparse(uri).path)
    return uri


def _strip_link(raw_link: str) -> str:
    link = raw_link.strip()
    if len(link) >= 2 and link[0] in _QUOTES and link[-1] == link[0]:
        link = link[1:-1].strip()
    return link


def _wildcard_index(value: str) -> int:
    return max(value.rfind(marker) for marker in _WILDCARD_MARKERS)


def _substitute_alias(link: str, shorthands: ShorthandMap) -> str:
    for alias in sorted(shorthands, key=len, reverse=True):
        if not link.startswith(alias):
            continue
        remainder = link[len(alias) :]
        value = shorthands[alias]
        wildcard = _wildcard_index(value)
        if wildcard < 0:
            return value + remainder
        return os.path.join(value[:wildcard], "." + remainder)
    return link


def resolve_link(raw_link: str, document_uri: str, shorthands: ShorthandMap) -> str:
    """Resolve a link written in a document to an absolute, normalized path."""
    link = _substitute_alias(_strip_link(raw_link), shorthands)
    if os.path.isabs(link):
        return os.path.normpath(link)
    document_dir = os.path.dirname(uri_to_path(document_uri))
    return os.path.normpath(os.path.join(document_dir, link))


def parse_alias_config(config_path: str, text: str) -> list[tuple[str, str]]:
    """Return ``(alias, base)`` pairs from a tsconfig-style ``paths`` table.

    Raises ``ConfigParseError`` when the text is not valid JSON.
    """
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise ConfigParseError(config_path, str(exc)) from exc

    compiler_options = payload.get("compilerOptions") if isinstance(payload, dict) else None
    paths = compiler_options.get("paths") if isinstance(compiler_options, dict) else None
    if not isinstance(paths, dict):
        return []

    config_dir = os.path.dirname(config_path)
    entries: list[tuple[str, str]] = []
    for key, targets in paths.items():
        target = targets[0] if isinstance(targets, list) and targets else targets
        if not isinstance(target, str):
            continue
        wildcard = key.rfind("/*")
        alias = key[:wildcard] if wildcard >= 0 else key
        entries.append((alias, os.path.normpath(os.path.join(config_dir, target))))
    return entries


def _applies_to(config_path: str, document_path: str) -> bool:
    config_dir = os.path.dirname(config_path)
    return document_path.startswith(config_dir.rstrip(os.sep) + os.sep)


class AliasConfigProvider:
    """Discovers alias configuration files and builds per-document shorthand maps."""

    def __init__(self, fs: FileSystemPort, settings: Settings | None = None) -> None:
        self._fs = fs
        self._settings = settings or Settings()
        self._config_paths: list[str] = []

    @property
    def config_paths(self) -> list[str]:
        return list(self._config_paths)

    def is_config_file(self, path: str) -> bool:
        return PurePath(path).match(self._settings.config_glob.rsplit("/", 1)[-1])

    async def discover(self, roots: Iterable[str]) -> None:
        found: set[str] = set()
        for root in roots:
            for path in await self._fs.glob(uri_to_path(root), self._settings.config_glob):
                if not self._settings.is_excluded(path):
                    found.add(path)
        # nearest ancestor first
        self._config_paths = sorted(found, key=lambda p: (-len(PurePath(p).parent.parts), p))
        logger.debug("Discovered %d alias configuration file(s)", len(self._config_paths))

    async def shorthands_for(self, document_uri: str) -> ShorthandMap:
        document_path = uri_to_path(document_uri)
        shorthands: ShorthandMap = {}
        for config_path in self._config_paths:
            if not _applies_to(config_path, document_path):
                continue
            try:
                text = await self._fs.read_text(config_path)
                entries = parse_alias_config(config_path, text)
            except OSError as exc:
                logger.error("%s", ConfigParseError(config_path, str(exc)))
                continue
            except ConfigParseError as exc:
                logger.error("%s", exc)
                continue
            for alias, base in entries:
                shorthands.setdefault(alias, base)
        return shorthands
