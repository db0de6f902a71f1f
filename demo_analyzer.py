"""
Demo: Run analyzer on a story and output the report.

Usage:
    python demo_analyzer.py [story.qm] [--dot graph.dot] [--detailed]

With --dot the story graph is also written as Graphviz DOT
(render with: dot -Tpng graph.dot -o graph.png).
"""

import sys

from questmark.analyzer import analyze_document
from questmark.backends import DotMode, save_dot_file
from questmark.examples import EXAMPLE_MARKUP
from questmark.markup_parser import parse_markup_file, parse_markup_string


def print_report(report):
    """Pretty-print a DocumentReport."""
    print()
    print("=" * 70)
    print(f"STORY ANALYSIS REPORT (entry: {report.entry})")
    print("=" * 70)
    print()

    print("📊 BASIC METRICS")
    print(f"  Total Pages:           {report.total_pages}")
    print(f"  Total Choices:         {report.total_choices}")
    print(f"  Guarded Choices:       {report.guarded_choices}")
    print(f"  Logic Lines:           {report.total_logics}")
    print(f"  Auto Pages:            {report.auto_pages or 'None'}")
    print(f"  Ending Pages:          {report.ending_pages or 'None'}")
    print()

    print("📈 VARIABLE ANALYSIS")
    print(f"  Assigned:              {sorted(report.assigned_variables)}")
    print(f"  Tested:                {sorted(report.tested_variables)}")
    print(f"  Interpolated:          {sorted(report.interpolated_variables)}")
    print()

    print("🔗 GRAPH STRUCTURE")
    print(f"  Unresolved Links:      {report.unresolved_links or 'None'}")
    print(f"  Unreachable Pages:     {sorted(report.unreachable_pages) or 'None'}")
    print(f"  Has Cycles:            {'YES' if report.has_cycles else 'NO'}")
    if report.has_cycles and report.cycle_example:
        print(f"    Example: {' -> '.join(report.cycle_example)}")
    print(f"  Max Choices/Page:      {report.max_choices_per_page}")
    print(f"  Avg Choices/Page:      {report.avg_choices_per_page:.2f}")
    print()

    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("✨ NO WARNINGS - Story looks clean!")
    print()


def parse_args(args):
    """Split argv into (markup path, dot path, dot mode)."""
    markup_path = dot_path = None
    mode = DotMode.SIMPLE
    rest = list(args)
    while rest:
        arg = rest.pop(0)
        if arg == "--dot":
            if not rest:
                sys.exit("--dot needs an output path")
            dot_path = rest.pop(0)
        elif arg == "--detailed":
            mode = DotMode.DETAILED
        else:
            markup_path = arg
    return markup_path, dot_path, mode


if __name__ == "__main__":
    markup_path, dot_path, mode = parse_args(sys.argv[1:])
    if markup_path:
        document = parse_markup_file(markup_path)
    else:
        document = parse_markup_string(EXAMPLE_MARKUP)

    report = analyze_document(document)
    print_report(report)

    if dot_path:
        if report.unresolved_links:
            print("Note: unresolved links are drawn as plain nodes.")
        save_dot_file(document, dot_path, mode=mode)
        print(f"{mode.value.upper()} diagram saved to: {dot_path}")
