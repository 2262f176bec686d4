from typing import Any

import yaml

from omt_analysis.errors import MalformedDocument


class OmtLoader(yaml.SafeLoader):
    """Safe loader that accepts the model type tags (``!Activity``, ``!Procedure``, ...)."""


def _construct_tagged(loader: yaml.SafeLoader, _suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node, deep=True)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_scalar(node)  # type: ignore[arg-type]


OmtLoader.add_multi_constructor("!", _construct_tagged)


def parse_tree(text: str, uri: str) -> dict[str, Any]:
    """Parse document text into its top-level mapping.

    Raises ``MalformedDocument`` when the YAML cannot be parsed. A document whose
    root is not a mapping yields an empty dict.
    """
    try:
        tree = yaml.load(text, Loader=OmtLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        raise MalformedDocument(uri, str(exc)) from exc
    if not isinstance(tree, dict):
        return {}
    return tree
