"""
Graphviz DOT diagram generator for questmark documents.

Converts a Document into Graphviz DOT format so authors can see the
shape of their story.

Supports two modes:
    - SIMPLE: Page flow only
    - DETAILED: Guard labels on edges, logic blocks on nodes
"""

from enum import Enum
from typing import Optional

from questmark.expressions import Logic
from questmark.model import END_PAGE, Document


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"      # Just page flow
    DETAILED = "detailed"  # Include guards and logic


# Page names are lowercased and "end" is reserved, so this id never collides.
_END_NODE = '"END"'
_DOT_KEYWORDS = {"node", "edge", "graph", "digraph", "subgraph", "strict"}


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _escape_dot_id(identifier: str) -> str:
    """Quote an identifier for DOT unless it is a plain word."""
    if identifier in _DOT_KEYWORDS or identifier[0].isdigit() or not identifier.replace('_', '').isalnum():
        return _escape_dot_string(identifier)
    return identifier


def _logic_to_dot_label(logic: Optional[Logic]) -> str:
    if logic is None:
        return ""
    return str(logic)


def _shorten(label: str, limit: int = 40) -> str:
    if len(label) > limit:
        return label[:limit - 3] + "..."
    return label


def generate_dot(document: Document, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a document.

    Args:
        document: Document to visualize
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines = []

    lines.append("digraph story {")
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box, style=filled, fillcolor=lightblue];")

    # =========================================================================
    # NODES
    # =========================================================================

    lines.append(f'  {_END_NODE} [shape=doublecircle, fillcolor=lightgrey, label="END"];')

    for name, page in document.pages.items():
        page_id = _escape_dot_id(name)
        label = name
        if mode == DotMode.DETAILED:
            if page.texts:
                label = f"{label}\n{_shorten(page.texts[0])}"
            if page.logics:
                label = f"{label}\n" + "\n".join(_logic_to_dot_label(l) for l in page.logics)

        attrs = f"label={_escape_dot_string(label)}"
        if name == document.entry:
            attrs += ", fillcolor=lightgreen"
        lines.append(f'  {page_id} [{attrs}];')

    # =========================================================================
    # EDGES (CHOICES)
    # =========================================================================

    for name, choice in document.iter_links():
        from_id = _escape_dot_id(name)
        to_id = _END_NODE if choice.link == END_PAGE else _escape_dot_id(choice.link)

        edge_attrs = []
        if mode == DotMode.DETAILED:
            label = choice.text or ""
            if choice.condition is not None:
                label = f"[{_logic_to_dot_label(choice.condition)}] {label}".strip()
            if label:
                edge_attrs.append(f"label={_escape_dot_string(_shorten(label))}")
        if choice.condition is not None:
            edge_attrs.append("style=dashed")

        edge_attr = f" [{', '.join(edge_attrs)}]" if edge_attrs else ""
        lines.append(f"  {from_id} -> {to_id}{edge_attr};")

    lines.append("}")

    return "\n".join(lines)


def save_dot_file(document: Document, filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        document: Document to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(document, mode=mode)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]
