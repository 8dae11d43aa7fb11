# websolve_leads/services/document_decoder.py
from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from websolve_leads.core.exceptions import MalformedResponseError

DecodedMapping = Dict[str, Union[str, "DecodedMapping"]]
Document = Union[str, bytes, ET.Element, Mapping[str, Any]]


@dataclass(frozen=True)
class Leaf:
    text: str


@dataclass(frozen=True)
class Branch:
    children: Tuple[Tuple[str, Any], ...]


Node = Union[Leaf, Branch]


def parse_document(document: Union[str, bytes]) -> ET.Element:
    # Bytes go to the parser as-is so the XML declaration picks the encoding
    if not isinstance(document, (str, bytes)) or not document.strip():
        raise MalformedResponseError("Response document is empty")
    try:
        return ET.fromstring(document)
    except ET.ParseError as exc:
        raise MalformedResponseError(
            "Response document is not well-formed XML",
            details={"error": str(exc)},
        ) from exc


def _element_node(element: ET.Element) -> Node:
    children = list(element)
    if children:
        return Branch(tuple((child.tag, child) for child in children))
    if element.text:
        return Leaf(element.text)
    # An empty element decodes to an empty mapping
    return Branch(())


def classify(node: Any) -> Optional[Node]:
    """Map an element or a decoded value onto Leaf / Branch; None for anything else."""
    if isinstance(node, ET.Element):
        return _element_node(node)
    if isinstance(node, str):
        return Leaf(node)
    if isinstance(node, Mapping):
        return Branch(tuple((str(key), value) for key, value in node.items()))
    return None


def _walk(branch: Branch) -> Iterator[Tuple[str, Union[str, DecodedMapping]]]:
    for key, child in branch.children:
        node = classify(child)
        if isinstance(node, Branch):
            yield key, dict(_walk(node))
        elif isinstance(node, Leaf):
            yield key, node.text
        # unrecognized node kind: dropped


def decode(document: Document) -> DecodedMapping:
    """
    Convert a response document into a nested mapping of strings.

    The root element itself is not part of the result; repeated child tags
    keep the last value.
    """
    if isinstance(document, (str, bytes)):
        document = parse_document(document)
    root = classify(document)
    if not isinstance(root, Branch):
        raise MalformedResponseError(
            "Response document has no nested structure",
            details={"type": type(document).__name__},
        )
    return dict(_walk(root))
