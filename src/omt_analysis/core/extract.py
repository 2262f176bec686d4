"""Symbol extraction from OMT documents.

Declarations are found in the parsed YAML tree, then located in the raw text
line by line. The embedded ODT code is not parsed; usages are whole-token text
matches, which over-approximates (a name inside a parameter default still
counts).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from omt_analysis.core.aliases import ShorthandMap, resolve_link
from omt_analysis.core.yaml_tree import parse_tree
from omt_analysis.errors import RangeAmbiguous, RangeNotFound
from omt_analysis.models import DeclaredSymbol, ExtractionResult, Import, Range, Usage

logger = logging.getLogger(__name__)

LINE_SPLIT = re.compile(r"\r?\n")

_IDENT = "A-Za-z0-9_-"
_NOT_AFTER_IDENT = rf"(?<![{_IDENT}])"
_NOT_BEFORE_IDENT = rf"(?![{_IDENT}])"
_NOT_BEFORE_IDENT_OR_COLON = rf"(?![:{_IDENT}])"

_DECLARED_IMPORT_KEY = re.compile(r"^module:\s*(?P<name>[^\s:]+)\s*$")

QUERY = "QUERY"
COMMAND = "COMMAND"


def split_lines(text: str) -> list[str]:
    return LINE_SPLIT.split(text)


def _definition_header(kind: str) -> re.Pattern[str]:
    return re.compile(
        rf"{_NOT_AFTER_IDENT}DEFINE[ \t]+{kind}[ \t]+(?P<name>[{_IDENT}]+)"
        rf"(?:[ \t]*(?P<params>\([^)]*\))(?=\s*=>))?"
    )


def _definition_site(kind: str, name: str) -> re.Pattern[str]:
    return re.compile(rf"{_NOT_AFTER_IDENT}DEFINE[ \t]+{kind}[ \t]+(?P<name>{re.escape(name)}){_NOT_BEFORE_IDENT}")


def _model_entry_site(name: str) -> re.Pattern[str]:
    return re.compile(rf"{_NOT_AFTER_IDENT}(?P<name>{re.escape(name)})(?=:[ \t]*!)")


def token_pattern(name: str, allow_trailing_colon: bool = False) -> re.Pattern[str]:
    """Whole-token matcher for ``name``.

    A trailing colon normally disqualifies a match (it marks a YAML key); link
    targets relax that rule.
    """
    after = _NOT_BEFORE_IDENT if allow_trailing_colon else _NOT_BEFORE_IDENT_OR_COLON
    return re.compile(rf"{_NOT_AFTER_IDENT}{re.escape(name)}{after}")


def trim_and_split_parameters(parameters: str) -> list[str]:
    """``"( $a, $b)"`` -> ``["$a", "$b"]``."""
    inner = parameters.strip().removeprefix("(").removesuffix(")")
    return [part.strip() for part in inner.split(",") if part.strip()]


def find_unique_range(document_text: str, pattern: re.Pattern[str]) -> Range:
    """Locate the single occurrence of ``pattern``'s ``name`` group in the text.

    Raises ``RangeNotFound`` for zero matches and ``RangeAmbiguous`` for more
    than one.
    """
    ranges: list[Range] = []
    for line_number, line in enumerate(split_lines(document_text)):
        for match in pattern.finditer(line):
            ranges.append(Range.on_line(line_number, match.start("name"), match.end("name")))

    if not ranges:
        raise RangeNotFound(pattern.pattern, 0)
    if len(ranges) > 1:
        raise RangeAmbiguous(pattern.pattern, len(ranges))
    return ranges[0]


def _block_text(block: Any) -> str | None:
    if isinstance(block, str):
        return block
    if isinstance(block, list) and all(isinstance(item, str) for item in block):
        return "\n".join(block)
    return None


def find_defined_objects(block: Any, document_text: str, kind: str) -> list[DeclaredSymbol]:
    """Find ``DEFINE <kind> <name>`` declarations in a block of ODT code."""
    text = _block_text(block)
    if text is None:
        return []

    symbols: list[DeclaredSymbol] = []
    for match in _definition_header(kind).finditer(text):
        name = match.group("name")
        params = match.group("params")
        symbols.append(
            DeclaredSymbol(
                name=name,
                range=find_unique_range(document_text, _definition_site(kind, name)),
                parameters=trim_and_split_parameters(params) if params else [],
            )
        )
    return symbols


def instance_with_params(entry: Any) -> bool:
    return isinstance(entry, dict) and isinstance(entry.get("params"), list)


def find_model_entries(model: dict[Any, Any], document_text: str) -> list[DeclaredSymbol]:
    """Every key of the ``model`` section is a declared symbol."""
    symbols: list[DeclaredSymbol] = []
    for key, entry in model.items():
        name = str(key)
        parameters = [str(p) for p in entry["params"]] if instance_with_params(entry) else []
        symbols.append(
            DeclaredSymbol(
                name=name,
                range=find_unique_range(document_text, _model_entry_site(name)),
                parameters=parameters,
            )
        )
    return symbols


def _import_names(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return []


def declared_import_module(declared_url: str) -> str | None:
    match = _DECLARED_IMPORT_KEY.match(declared_url.strip())
    return match.group("name") if match else None


def extract_imports(section: Any, document_uri: str, shorthands: ShorthandMap) -> list[Import]:
    if not isinstance(section, dict):
        return []

    imports: list[Import] = []
    for key, value in section.items():
        declared_url = str(key)
        names = _import_names(value)
        if not names:
            continue
        module_name = declared_import_module(declared_url)
        resolved_url = None if module_name else resolve_link(declared_url, document_uri, shorthands)
        imports.extend(
            Import(name=name, declared_url=declared_url, resolved_url=resolved_url, module_name=module_name)
            for name in names
        )
    return imports


def find_declared_symbols(tree: dict[str, Any], document_text: str) -> list[DeclaredSymbol]:
    symbols: list[DeclaredSymbol] = []
    if tree.get("queries"):
        symbols.extend(find_defined_objects(tree["queries"], document_text, QUERY))
    if tree.get("commands"):
        symbols.extend(find_defined_objects(tree["commands"], document_text, COMMAND))

    model = tree.get("model")
    if isinstance(model, dict):
        symbols.extend(find_model_entries(model, document_text))
        for key, entry in model.items():
            if not isinstance(entry, dict):
                logger.debug("Model entry %s has no nested sections", key)
                continue
            if entry.get("commands"):
                symbols.extend(find_defined_objects(entry["commands"], document_text, COMMAND))
            if entry.get("queries"):
                symbols.extend(find_defined_objects(entry["queries"], document_text, QUERY))
    return symbols


def find_usages_in_line(
    names: Iterable[str],
    line_number: int,
    line: str,
    declaration_sites: frozenset[Range] = frozenset(),
) -> list[Usage]:
    """First whole-token occurrence per name that is not a declaration site."""
    usages: list[Usage] = []
    for name in names:
        for match in token_pattern(name).finditer(line):
            found = Range.on_line(line_number, match.start(), match.end())
            if found in declaration_sites:
                continue
            usages.append(Usage(name=name, range=found))
            break
    return usages


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


def extract_symbols(document_text: str, document_uri: str, shorthands: ShorthandMap) -> ExtractionResult:
    """Extract imports, declared symbols and usages from one document.

    Raises ``MalformedDocument`` when the YAML cannot be parsed and
    ``RangeNotFound``/``RangeAmbiguous`` when a declaration cannot be located
    exactly once in the text.
    """
    tree = parse_tree(document_text, document_uri)
    imports = extract_imports(tree.get("import"), document_uri, shorthands)
    declared = find_declared_symbols(tree, document_text)

    names = _unique([i.name for i in imports] + [s.name for s in declared])
    sites = frozenset(s.range for s in declared)
    usages: list[Usage] = []
    if names:
        for line_number, line in enumerate(split_lines(document_text)):
            usages.extend(find_usages_in_line(names, line_number, line, sites))

    return ExtractionResult(imports=imports, declared_symbols=declared, usages=usages)
