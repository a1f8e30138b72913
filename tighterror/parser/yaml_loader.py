"""YAML front-end.

Uses PyYAML's safe loader with two changes: booleans are only ``true`` and
``false`` (``yes``, ``on`` and friends stay strings) and mappings and
sequences remember their source spans.
"""
from __future__ import annotations
import re

import yaml

from tighterror.internals.errors import ERR, fail
from tighterror.internals.report import Span
from tighterror.parser.common import LocatedDict, LocatedList, SpecBuilder
from tighterror.spec.model import Spec

_BOOL_TAG = "tag:yaml.org,2002:bool"


def _span(node: yaml.Node) -> Span:
    start, end = node.start_mark, node.end_mark
    return Span(start.line + 1, start.column + 1, end.line + 1, end.column + 1)


class SpecLoader(yaml.SafeLoader):
    """Safe loader producing located containers and strict booleans."""


SpecLoader.yaml_implicit_resolvers = {
    first: [(tag, rx) for tag, rx in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
SpecLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def _construct_mapping(loader: SpecLoader, node: yaml.MappingNode) -> LocatedDict:
    loader.flatten_mapping(node)
    mapping = LocatedDict()
    mapping.span = _span(node)
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=True)
        if isinstance(key, (dict, list)):
            fail(ERR.BAD_KEYWORD_TYPE, _span(key_node), kw=key)
        if key in mapping:
            fail(ERR.BAD_YAML, _span(key_node), reason=f"duplicate key {key!r}")
        mapping[key] = loader.construct_object(value_node, deep=True)
        mapping.key_spans[key] = _span(key_node)
    return mapping


def _construct_sequence(loader: SpecLoader, node: yaml.SequenceNode) -> LocatedList:
    seq = LocatedList(loader.construct_object(child, deep=True) for child in node.value)
    seq.span = _span(node)
    seq.item_spans = [_span(child) for child in node.value]
    return seq


SpecLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_mapping)
SpecLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_SEQUENCE_TAG, _construct_sequence)


def load_yaml(text: str):
    """Decode exactly one YAML document from `text`."""
    try:
        docs = list(yaml.load_all(text, Loader=SpecLoader))
    except yaml.MarkedYAMLError as e:
        span = None
        if e.problem_mark is not None:
            mark = e.problem_mark
            span = Span(mark.line + 1, mark.column + 1, mark.line + 1, mark.column + 1)
        fail(ERR.BAD_YAML, span, reason=e.problem or str(e))
    except yaml.YAMLError as e:
        fail(ERR.BAD_YAML, reason=str(e))

    if len(docs) != 1:
        fail(ERR.BAD_YAML, reason=f"expected exactly one document, found {len(docs)}")
    return docs[0]


def parse_yaml_str(text: str) -> Spec:
    spec = SpecBuilder().build(load_yaml(text))
    spec.source = text
    return spec
