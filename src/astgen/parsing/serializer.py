"""
Syntax tree to JSON conversion.

Turns a tree-sitter tree into the canonical JsonNode shape:

    {"kind": ..., "start_byte": N, "end_byte": N, "children": [...]?, "text": "..."?}

A node with children never carries text. A leaf carries text only when its
byte span is non-empty, so zero-width leaves (e.g. a missing token or an
empty root) carry neither. Offsets are tree-sitter's UTF-8 byte offsets,
copied unchanged.

Both directions use an explicit work stack; nesting depth is bounded by
memory, not by the interpreter's recursion limit.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generator, List, Optional, Protocol, Sequence, Union


class SyntaxNode(Protocol):
    """The subset of tree_sitter.Node the serializer reads."""

    @property
    def type(self) -> str: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...


@dataclass
class JsonNode:
    kind: str
    start_byte: int
    end_byte: int
    children: Optional[List["JsonNode"]] = None
    text: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Generator["JsonNode", None, None]:
        """Yield this node and every descendant, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dicts. Absent children/text keys are omitted."""
        root: Dict[str, Any] = {}
        stack = [(self, root)]
        while stack:
            node, out = stack.pop()
            out["kind"] = node.kind
            out["start_byte"] = node.start_byte
            out["end_byte"] = node.end_byte
            if node.children is not None:
                kids: List[Dict[str, Any]] = [{} for _ in node.children]
                out["children"] = kids
                stack.extend(zip(node.children, kids))
            if node.text is not None:
                out["text"] = node.text
        return root


def _shell(node: SyntaxNode) -> JsonNode:
    return JsonNode(kind=node.type, start_byte=node.start_byte, end_byte=node.end_byte)


def serialize(source: Union[str, bytes], root: SyntaxNode) -> JsonNode:
    """
    Convert a parsed tree into a JsonNode tree. Pure; performs no I/O.

    Args:
        source: The text that was parsed. A str is encoded to UTF-8 once so
            byte offsets line up with what tree-sitter reported.
        root: The tree's root node.
    """
    data = source.encode("utf-8") if isinstance(source, str) else bytes(source)

    result = _shell(root)
    stack = [(root, result)]
    while stack:
        node, out = stack.pop()
        children = node.children
        if children:
            out.children = [_shell(child) for child in children]
            stack.extend(zip(children, out.children))
        elif out.end_byte > out.start_byte:
            out.text = data[out.start_byte:out.end_byte].decode("utf-8", errors="replace")
    return result
