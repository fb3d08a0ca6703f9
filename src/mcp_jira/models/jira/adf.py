"""
Atlassian Document Format (ADF) utilities.

Jira Cloud returns descriptions and comment bodies as ADF: a tree of nodes
where each node has a ``type`` tag and, depending on the tag, a ``text``
payload, an ``attrs`` map or a ``content`` list of child nodes.

Raw JSON is parsed once into a small tagged variant (text, inline card,
container) and every consumer walks it through ``AdfVisitor``. Malformed
input never raises: anything that is not a node list parses to no nodes.
"""

import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .mention import JiraMention, MentionIndex, MentionOrigin

ISSUE_KEY_PATTERN = re.compile(r"[A-Z]+-\d+")
BROWSE_URL_PATTERN = re.compile(r"/browse/([A-Z]+-\d+)")

R = TypeVar("R")


@dataclass(frozen=True)
class AdfNode:
    """Base node: a type tag plus ordered children (possibly none)."""

    type: str
    content: tuple["AdfNode", ...] = ()

    def accept(self, visitor: "AdfVisitor[R]") -> R:
        raise NotImplementedError


@dataclass(frozen=True)
class AdfTextNode(AdfNode):
    text: str = ""

    def accept(self, visitor: "AdfVisitor[R]") -> R:
        return visitor.visit_text(self)


@dataclass(frozen=True)
class AdfInlineCardNode(AdfNode):
    url: str | None = None

    def accept(self, visitor: "AdfVisitor[R]") -> R:
        return visitor.visit_inline_card(self)


@dataclass(frozen=True)
class AdfContainerNode(AdfNode):
    """Any other node type (paragraph, list, table, mention, ...)."""

    def accept(self, visitor: "AdfVisitor[R]") -> R:
        return visitor.visit_container(self)


class AdfVisitor(Generic[R]):
    """Double-dispatch visitor over parsed ADF nodes."""

    def visit_text(self, node: AdfTextNode) -> R:
        raise NotImplementedError

    def visit_inline_card(self, node: AdfInlineCardNode) -> R:
        raise NotImplementedError

    def visit_container(self, node: AdfContainerNode) -> R:
        raise NotImplementedError


def parse_adf_node(raw: dict[str, Any]) -> AdfNode:
    """Parse one raw ADF node (and its subtree)."""
    node_type = raw.get("type")
    node_type = node_type if isinstance(node_type, str) else ""
    children = tuple(parse_adf_nodes(raw.get("content")))

    if node_type == "text":
        text = raw.get("text")
        return AdfTextNode(
            type=node_type,
            content=children,
            text=text if isinstance(text, str) else "",
        )

    if node_type == "inlineCard":
        attrs = raw.get("attrs")
        url = attrs.get("url") if isinstance(attrs, dict) else None
        return AdfInlineCardNode(
            type=node_type,
            content=children,
            url=url if isinstance(url, str) else None,
        )

    return AdfContainerNode(type=node_type, content=children)


def parse_adf_nodes(content: Any) -> list[AdfNode]:
    """Parse a raw ADF ``content`` list; non-list input yields no nodes."""
    if not isinstance(content, list):
        return []
    return [parse_adf_node(item) for item in content if isinstance(item, dict)]


class _TextExtractor(AdfVisitor[str]):
    def visit_text(self, node: AdfTextNode) -> str:
        return node.text

    def visit_inline_card(self, node: AdfInlineCardNode) -> str:
        return self._join(node.content)

    def visit_container(self, node: AdfContainerNode) -> str:
        return self._join(node.content)

    def _join(self, nodes: tuple[AdfNode, ...] | list[AdfNode]) -> str:
        return "".join(child.accept(self) for child in nodes)


class _MentionCollector(AdfVisitor[None]):
    def __init__(self, origin: MentionOrigin, comment_id: str | None) -> None:
        self.origin = origin
        self.comment_id = comment_id
        self.index = MentionIndex()

    def _add(self, key: str) -> None:
        self.index.add(
            JiraMention(
                key=key,
                kind="mention",
                origin=self.origin,
                comment_id=self.comment_id,
            )
        )

    def _descend(self, node: AdfNode) -> None:
        for child in node.content:
            child.accept(self)

    def visit_text(self, node: AdfTextNode) -> None:
        for key in ISSUE_KEY_PATTERN.findall(node.text):
            self._add(key)
        self._descend(node)

    def visit_inline_card(self, node: AdfInlineCardNode) -> None:
        if node.url:
            match = BROWSE_URL_PATTERN.search(node.url)
            if match:
                self._add(match.group(1))
        self._descend(node)

    def visit_container(self, node: AdfContainerNode) -> None:
        self._descend(node)


def extract_text(content: Any) -> str:
    """
    Flatten an ADF node list to plain text.

    Text leaves are concatenated depth-first in document order with no
    separators between siblings or across block boundaries.

    Args:
        content: ADF ``content`` list (anything else yields "")

    Returns:
        The concatenated text
    """
    return _TextExtractor()._join(parse_adf_nodes(content))


def extract_mentions(
    content: Any,
    origin: MentionOrigin,
    comment_id: str | None = None,
) -> list[JiraMention]:
    """
    Find issue keys referenced in an ADF node list.

    Inline cards pointing at ``/browse/KEY`` and every ``KEY-123`` pattern in
    text leaves are collected, then deduplicated by key via ``MentionIndex``.

    Args:
        content: ADF ``content`` list
        origin: Where the document came from ("description" or "comment")
        comment_id: Owning comment id, for comment bodies

    Returns:
        Mentions in order of first appearance
    """
    collector = _MentionCollector(origin, comment_id)
    for node in parse_adf_nodes(content):
        node.accept(collector)
    return collector.index.values()


def text_to_adf(text: str) -> dict[str, Any]:
    """Wrap plain text in a single-paragraph ADF document."""
    return {
        "version": 1,
        "type": "doc",
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}],
            }
        ],
    }
