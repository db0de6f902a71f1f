"""
Tests for DOT diagram generator.

These tests verify that documents are correctly converted to Graphviz DOT
format.

Tests cover:
    - Page nodes and choice edges
    - The END terminal node
    - Guard labels and logic in detailed mode
    - Special character escaping
"""

from questmark.backends.dot_generator import DotMode, generate_dot, save_dot_file
from questmark.markup_parser import parse_markup_string


STORY = """\
-> Start
{gold = 2}
A "quoted" beginning.
* {gold > 1} Pay -> Dark Cave
* Run -> end
-> Dark Cave
Inside.
* -> end
"""


class TestDotBasicStructure:
    """Test basic DOT graph structure."""

    def test_digraph_wrapper(self):
        dot = generate_dot(parse_markup_string(STORY))
        assert dot.startswith("digraph story {")
        assert dot.rstrip().endswith("}")

    def test_pages_become_nodes(self):
        dot = generate_dot(parse_markup_string(STORY))
        assert 'start [label="start", fillcolor=lightgreen];' in dot
        assert '"dark cave" [label="dark cave"];' in dot

    def test_end_node(self):
        dot = generate_dot(parse_markup_string(STORY))
        assert '"END" [shape=doublecircle' in dot
        assert 'start -> "END";' in dot

    def test_page_named_like_end_node(self):
        """A page whose name resembles the END node keeps its own node."""
        markup = "-> Start\nA\n* Go -> __end__\n* Stop -> end\n-> __end__\nB\n* -> end"
        dot = generate_dot(parse_markup_string(markup, validate=True))
        assert dot.count("__end__ [") == 1
        assert dot.count('"END" [') == 1
        assert "start -> __end__;" in dot
        assert '__end__ -> "END";' in dot

    def test_guarded_edge_dashed(self):
        dot = generate_dot(parse_markup_string(STORY), mode=DotMode.SIMPLE)
        assert 'start -> "dark cave" [style=dashed];' in dot

    def test_keyword_page_names_quoted(self):
        dot = generate_dot(parse_markup_string("-> Node\nA\n* -> end"))
        assert '"node" [label="node", fillcolor=lightgreen];' in dot


class TestDotDetailedMode:
    """Test detailed labels."""

    def test_guard_label(self):
        dot = generate_dot(parse_markup_string(STORY), mode=DotMode.DETAILED)
        assert 'start -> "dark cave" [label="[gold > 1] Pay", style=dashed];' in dot

    def test_logic_and_text_on_node(self):
        dot = generate_dot(parse_markup_string(STORY), mode=DotMode.DETAILED)
        assert 'label="start\\nA \\"quoted\\" beginning.\\ngold = 2"' in dot

    def test_long_labels_shortened(self):
        long_text = "x" * 80
        dot = generate_dot(
            parse_markup_string(f"-> Start\nA\n* {long_text} -> end"), mode=DotMode.DETAILED
        )
        assert "x" * 37 + "..." in dot
        assert "x" * 41 not in dot


def test_save_dot_file(tmp_path):
    path = tmp_path / "story.dot"
    doc = parse_markup_string(STORY)
    save_dot_file(doc, str(path), mode=DotMode.DETAILED)
    assert path.read_text(encoding="utf-8") == generate_dot(doc, mode=DotMode.DETAILED)
