"""Generic tree-node abstraction and path selection over parsed report markup"""

from typing import Iterator, List, Optional, Protocol, Sequence, Union
from xml.etree import ElementTree as ET

from creditsea_gateway.domain.exceptions import ParseError


class TreeNode(Protocol):
    """Minimal interface the extraction engine needs from a document tree"""

    @property
    def tag(self) -> str: ...

    def children(self, tag: Optional[str] = None) -> List["TreeNode"]: ...

    def text(self) -> Optional[str]: ...


def _local_name(tag: str) -> str:
    # "{namespace}Name" -> "name"
    return tag.rsplit("}", 1)[-1].lower()


class ElementNode:
    """TreeNode backed by an ElementTree element. Tags match case-insensitively."""

    __slots__ = ("_element",)

    def __init__(self, element: ET.Element):
        self._element = element

    @property
    def tag(self) -> str:
        return _local_name(self._element.tag)

    def children(self, tag: Optional[str] = None) -> List["ElementNode"]:
        wanted = tag.lower() if tag is not None else None
        return [
            ElementNode(child)
            for child in self._element
            if isinstance(child.tag, str) and (wanted is None or _local_name(child.tag) == wanted)
        ]

    def text(self) -> Optional[str]:
        return self._element.text

    def __repr__(self) -> str:
        return f"ElementNode({self.tag!r})"


def parse_document(raw_markup: Union[str, bytes]) -> ElementNode:
    """
    Parse raw markup into a navigable tree.

    Raises:
        ParseError: If the markup is empty or not well-formed
    """
    if raw_markup is None or not raw_markup.strip():
        raise ParseError("Empty document: no root element found")

    try:
        # Leading whitespace before an XML declaration is not well-formed
        root = ET.fromstring(raw_markup.strip())
    except ET.ParseError as e:
        raise ParseError(f"Malformed XML: {e}") from e

    return ElementNode(root)


def _descendants(node: TreeNode) -> Iterator[TreeNode]:
    """Pre-order walk in document order, iterative so nesting depth is unbounded."""
    stack = list(reversed(node.children()))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def select(node: TreeNode, path: str) -> List[TreeNode]:
    """
    Select all nodes matching a slash-separated path, in document order.

    "A/B" walks children of `node` step by step. A leading "//" lets the
    first step match a descendant at any depth.
    """
    deep = path.startswith("//")
    steps = [step for step in path.strip("/").split("/") if step]
    if not steps:
        return [node]

    first, rest = steps[0].lower(), steps[1:]
    if deep:
        current = [d for d in _descendants(node) if d.tag.lower() == first]
    else:
        current = node.children(first)

    for step in rest:
        current = [child for parent in current for child in parent.children(step)]
    return current


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim surrounding whitespace; an empty result becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def first_text(node: TreeNode, paths: Sequence[str]) -> Optional[str]:
    """Return the first non-empty text found across candidate paths."""
    for path in paths:
        for match in select(node, path):
            text = clean_text(match.text())
            if text is not None:
                return text
    return None


def flattened_text(node: TreeNode, separator: str = ", ") -> Optional[str]:
    """Own text, or the non-empty texts of direct children joined when there is none."""
    own = clean_text(node.text())
    if own is not None:
        return own
    parts = [text for text in (clean_text(child.text()) for child in node.children()) if text]
    return separator.join(parts) or None
