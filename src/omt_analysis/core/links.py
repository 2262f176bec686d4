"""Navigable links inside the ``import:`` block of an OMT document.

Path links (relative, absolute or alias-prefixed ``*.omt`` paths) get their
target right away. Declared-module links (``module:Name:``) carry the module
name as link data; they are resolved later against the module registry, which
may still be scanning when the document is first opened.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from omt_analysis.core.aliases import ShorthandMap, resolve_link
from omt_analysis.core.extract import split_lines
from omt_analysis.models import DeclaredImportData, DocumentLink, LinkData, Range

_IMPORT_BLOCK_START = re.compile(r"^import:")
_TOP_LEVEL_KEY = re.compile(r"^[\w-]+:")
_PATH_LINK = re.compile(r"^(?P<lead>\s+[\"']?)(?P<link>.*\.omt)")
_DECLARED_IMPORT = re.compile(r"^(?P<lead>\s+)module:(?P<module>[^:#]*):")


@dataclass(frozen=True)
class UriMatch:
    start: int
    end: int
    url: str


@dataclass(frozen=True)
class DeclaredImportMatch:
    start: int
    end: int
    module: str


def get_uri_match(line: str, document_uri: str, shorthands: ShorthandMap) -> UriMatch | None:
    match = _PATH_LINK.match(line)
    if match is None:
        return None
    return UriMatch(
        start=match.end("lead"),
        end=match.end("link"),
        url=resolve_link(match.group("link"), document_uri, shorthands),
    )


def get_declared_import_match(line: str) -> DeclaredImportMatch | None:
    match = _DECLARED_IMPORT.match(line)
    if match is None:
        return None
    module = match.group("module").strip()
    if not module:
        return None
    return DeclaredImportMatch(start=match.end("lead"), end=match.end(), module=module)


def find_document_links(document_text: str, document_uri: str, shorthands: ShorthandMap) -> list[DocumentLink]:
    links: list[DocumentLink] = []
    in_import_block = False
    for line_number, line in enumerate(split_lines(document_text)):
        if _IMPORT_BLOCK_START.match(line):
            in_import_block = True
            continue
        if not in_import_block:
            continue
        if _TOP_LEVEL_KEY.match(line):
            in_import_block = False
            continue

        uri_match = get_uri_match(line, document_uri, shorthands)
        if uri_match is not None:
            links.append(
                DocumentLink(range=Range.on_line(line_number, uri_match.start, uri_match.end), target=uri_match.url)
            )
            continue

        declared = get_declared_import_match(line)
        if declared is not None:
            links.append(
                DocumentLink(
                    range=Range.on_line(line_number, declared.start, declared.end),
                    data=LinkData(declared_import=DeclaredImportData(module=declared.module)),
                )
            )
    return links
