from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import InputFormatError


ORIGINAL_KEY = "original"
TRANSLATED_KEY = "translated"

PathPart = Union[str, int]
LeafPath = Tuple[PathPart, ...]


@dataclass(frozen=True)
class StringNode:
    value: str


@dataclass(frozen=True)
class NumberNode:
    value: Union[int, float]


@dataclass(frozen=True)
class BooleanNode:
    value: bool


@dataclass(frozen=True)
class NullNode:
    pass


@dataclass(frozen=True)
class PreservedNode:
    """Value stored under an ``"original"`` key: copied verbatim, never walked."""

    value: Any


@dataclass(frozen=True)
class TranslationLeaf:
    """String stored under a ``"translated"`` key: the only thing a run ever rewrites."""

    path: LeafPath
    text: str


@dataclass(frozen=True)
class MappingNode:
    entries: Dict[str, "Node"] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceNode:
    items: List["Node"] = field(default_factory=list)


Node = Union[
    StringNode,
    NumberNode,
    BooleanNode,
    NullNode,
    PreservedNode,
    TranslationLeaf,
    MappingNode,
    SequenceNode,
]


def format_path(path: LeafPath) -> str:
    """Human readable leaf address, e.g. ``menu.items[2].translated``."""
    out = ""
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else part
    return out or "$"


def _parse_scalar(value: Any, path: LeafPath) -> Node:
    if value is None:
        return NullNode()
    # bool is a subclass of int
    if isinstance(value, bool):
        return BooleanNode(value)
    if isinstance(value, (int, float)):
        return NumberNode(value)
    if isinstance(value, str):
        return StringNode(value)
    raise InputFormatError(f"Unsupported value of type {type(value).__name__} at {format_path(path)}")


# Parsing and rendering walk the tree with an explicit stack: json.loads accepts
# nesting deeper than the interpreter's recursion limit.
Attach = Callable[[Any], None]


def parse_document(value: Any) -> Node:
    """Classify a decoded JSON value into the node tree translated by a run."""
    root: List[Node] = []
    stack: List[Tuple[Any, LeafPath, Attach]] = [(value, (), root.append)]
    while stack:
        item, path, attach = stack.pop()
        if isinstance(item, Mapping):
            node = MappingNode()
            attach(node)
            for key, child in item.items():
                if not isinstance(key, str):
                    raise InputFormatError(f"Non-string key {key!r} at {format_path(path)}")
                child_path = path + (key,)
                if key == ORIGINAL_KEY:
                    node.entries[key] = PreservedNode(child)
                elif key == TRANSLATED_KEY and isinstance(child, str):
                    node.entries[key] = TranslationLeaf(child_path, child)
                else:
                    # reserve the slot so key order survives
                    node.entries[key] = None  # type: ignore[assignment]
                    stack.append((child, child_path, partial(node.entries.__setitem__, key)))
        elif isinstance(item, (list, tuple)):
            seq = SequenceNode([None] * len(item))  # type: ignore[list-item]
            attach(seq)
            for i, child in enumerate(item):
                stack.append((child, path + (i,), partial(seq.items.__setitem__, i)))
        else:
            attach(_parse_scalar(item, path))
    return root[0]


def iter_leaves(node: Node) -> Iterator[TranslationLeaf]:
    stack: List[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, TranslationLeaf):
            yield current
        elif isinstance(current, MappingNode):
            stack.extend(reversed(list(current.entries.values())))
        elif isinstance(current, SequenceNode):
            stack.extend(reversed(current.items))


def _copy_json(value: Any) -> Any:
    root: List[Any] = []
    stack: List[Tuple[Any, Attach]] = [(value, root.append)]
    while stack:
        item, attach = stack.pop()
        if isinstance(item, Mapping):
            out: Dict[Any, Any] = dict.fromkeys(item)
            attach(out)
            stack.extend((child, partial(out.__setitem__, key)) for key, child in item.items())
        elif isinstance(item, (list, tuple)):
            items: List[Any] = [None] * len(item)
            attach(items)
            stack.extend((child, partial(items.__setitem__, i)) for i, child in enumerate(item))
        else:
            attach(item)
    return root[0]


def render_document(node: Node, replacements: Optional[Dict[LeafPath, str]] = None) -> Any:
    """
    Turn a node tree back into plain JSON data.

    Each leaf takes ``replacements[leaf.path]`` when present and keeps its own text
    otherwise. The result shares no containers with the parsed input.
    """
    replacements = replacements or {}
    root: List[Any] = []
    stack: List[Tuple[Node, Attach]] = [(node, root.append)]
    while stack:
        current, attach = stack.pop()
        if isinstance(current, TranslationLeaf):
            attach(replacements.get(current.path, current.text))
        elif isinstance(current, PreservedNode):
            attach(_copy_json(current.value))
        elif isinstance(current, MappingNode):
            out: Dict[str, Any] = dict.fromkeys(current.entries)
            attach(out)
            stack.extend((child, partial(out.__setitem__, key)) for key, child in current.entries.items())
        elif isinstance(current, SequenceNode):
            items: List[Any] = [None] * len(current.items)
            attach(items)
            stack.extend((child, partial(items.__setitem__, i)) for i, child in enumerate(current.items))
        elif isinstance(current, NullNode):
            attach(None)
        elif isinstance(current, (StringNode, NumberNode, BooleanNode)):
            attach(current.value)
        else:
            raise TypeError(f"Unknown node type: {type(current).__name__}")
    return root[0]
