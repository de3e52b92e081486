"""Atlassian Document Format (ADF) to plain text.

Jira delivers descriptions and comment bodies as a JSON tree of typed nodes.
Only layout survives rendering (newlines, list markers, indentation, quote
prefixes); marks such as bold or links are dropped.

Reference: https://developer.atlassian.com/cloud/jira/platform/apis/document/structure/
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class NodeType(str, Enum):
    DOCUMENT = "doc"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    LIST_ITEM = "listItem"
    ORDERED_LIST = "orderedList"
    BULLET_LIST = "bulletList"
    CODE_BLOCK = "codeBlock"
    BLOCKQUOTE = "blockquote"
    RULE = "rule"
    MEDIA_SINGLE = "mediaSingle"
    MEDIA = "media"
    TEXT = "text"
    HARD_BREAK = "hardBreak"
    MENTION = "mention"
    EMOJI = "emoji"
    INLINE_CARD = "inlineCard"
    UNKNOWN = "unknown"


_KNOWN_TYPES = {t.value: t for t in NodeType if t is not NodeType.UNKNOWN}

_LIST_TYPES = (NodeType.ORDERED_LIST, NodeType.BULLET_LIST)
_BLOCK_TYPES = (NodeType.PARAGRAPH, NodeType.HEADING, NodeType.CODE_BLOCK)


class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: NodeType
    type: str = ""  # raw tag as received, kept for unknown nodes
    text: str | None = None
    attrs: dict[str, Any] = {}
    content: list["Node"] = []

    def attr(self, name: str) -> str | None:
        value = self.attrs.get(name)
        return value if isinstance(value, str) else None


def parse_node(raw: Any) -> Node | None:
    """Build a Node tree from decoded JSON. Never raises; junk degrades to empty fields."""
    if not isinstance(raw, Mapping):
        return None
    raw_type = raw.get("type")
    raw_type = raw_type if isinstance(raw_type, str) else ""
    text = raw.get("text")
    attrs = raw.get("attrs")
    content = raw.get("content")
    children = [parse_node(child) for child in content] if isinstance(content, list) else []
    return Node(
        kind=_KNOWN_TYPES.get(raw_type, NodeType.UNKNOWN),
        type=raw_type,
        text=text if isinstance(text, str) else None,
        attrs=dict(attrs) if isinstance(attrs, Mapping) else {},
        content=[child for child in children if child is not None],
    )


def render(node: Node | Mapping[str, Any] | None, list_depth: int = 0) -> str:
    """Render an ADF node (parsed or raw) to plain text."""
    if node is None:
        return ""
    if not isinstance(node, Node):
        node = parse_node(node)
        if node is None:
            return ""

    match node.kind:
        case NodeType.TEXT:
            return node.text or ""
        case NodeType.HARD_BREAK:
            return "\n"
        case NodeType.MENTION:
            return f"@{node.attr('text') or 'unknown'}"
        case NodeType.EMOJI:
            return node.attr("shortName") or ""
        case NodeType.INLINE_CARD:
            return node.attr("url") or ""
        case NodeType.RULE:
            return "---\n"
        case NodeType.MEDIA_SINGLE | NodeType.MEDIA:
            return "[media]\n"

    if node.kind in _LIST_TYPES:
        indent = "  " * list_depth
        items = []
        for i, child in enumerate(node.content):
            marker = f"{i + 1}. " if node.kind is NodeType.ORDERED_LIST else "• "
            items.append(indent + marker + render(child, list_depth + 1).lstrip())
        return "".join(items)

    joined = "".join(render(child, list_depth) for child in node.content)

    if node.kind is NodeType.DOCUMENT:
        return joined.rstrip()
    if node.kind in _BLOCK_TYPES:
        return joined + "\n"
    if node.kind is NodeType.BLOCKQUOTE:
        return "\n".join(f"> {line}" for line in joined.split("\n")) + "\n"
    # listItem and anything unrecognised pass their children through untouched
    return joined


def text_to_adf(text: str) -> dict[str, Any]:
    """Wrap plain text in the minimal ADF document Jira accepts: one paragraph, one text node."""
    return {
        "type": NodeType.DOCUMENT.value,
        "version": 1,
        "content": [
            {
                "type": NodeType.PARAGRAPH.value,
                "content": [{"type": NodeType.TEXT.value, "text": text}],
            }
        ],
    }
