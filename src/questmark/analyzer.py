"""
Document Analyzer: authoring diagnostics and inventory of parsed stories.

This module provides lightweight analysis of Document objects:
    - Page and choice inventory
    - Variable usage (assigned, tested, interpolated)
    - Graph reachability, dead links and cycles
    - Warning flags for likely authoring mistakes

IMPORTANT: Unlike validation, this never raises for graph problems.
It does NOT modify the document. It only produces read-only reports.
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from questmark.model import END_PAGE, Document
from questmark.validation import reachable_pages


_INTERPOLATION_RE = re.compile(r"\{\s*(\w+)\s*\}")


def _find_cycles_dfs(graph: Dict[str, List[str]], start: str, visited: Set[str],
                     rec_stack: Set[str], path: List[str]) -> Optional[List[str]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in graph.get(start, []):
        if neighbor not in visited:
            cycle = _find_cycles_dfs(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


@dataclass
class DocumentReport:
    """Analysis report for a document."""

    entry: str
    total_pages: int = 0
    total_choices: int = 0
    guarded_choices: int = 0
    total_logics: int = 0

    # Page kinds
    auto_pages: List[str] = field(default_factory=list)    # single textless choice
    ending_pages: List[str] = field(default_factory=list)  # at least one choice to "end"

    # Graph properties
    unresolved_links: Dict[str, List[str]] = field(default_factory=dict)
    unreachable_pages: Set[str] = field(default_factory=set)
    has_cycles: bool = False
    cycle_example: Optional[List[str]] = None

    # Variable usage
    assigned_variables: Set[str] = field(default_factory=set)
    tested_variables: Set[str] = field(default_factory=set)
    interpolated_variables: Set[str] = field(default_factory=set)
    never_assigned: Set[str] = field(default_factory=set)
    never_read: Set[str] = field(default_factory=set)

    # Per-page metrics
    max_choices_per_page: int = 0
    avg_choices_per_page: float = 0.0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_document(document: Document) -> DocumentReport:
    """
    Perform a full read-only analysis of a Document.

    Returns a DocumentReport with metrics and warnings.
    """
    report = DocumentReport(entry=document.entry)
    report.total_pages = len(document.pages)

    outgoing: Dict[str, List[str]] = defaultdict(list)
    unresolved: Dict[str, List[str]] = defaultdict(list)

    # =========================================================================
    # 1. PAGES AND CHOICES
    # =========================================================================

    for name, page in document.pages.items():
        report.total_choices += len(page.choices)
        report.total_logics += len(page.logics)
        if page.has_auto_choice:
            report.auto_pages.append(name)

        for logic in page.logics:
            report.assigned_variables.add(logic.lhs)
        for text in page.texts:
            report.interpolated_variables.update(m.lower() for m in _INTERPOLATION_RE.findall(text))

        for choice in page.choices:
            if choice.condition is not None:
                report.guarded_choices += 1
                report.tested_variables.add(choice.condition.lhs)
            if choice.text:
                report.interpolated_variables.update(m.lower() for m in _INTERPOLATION_RE.findall(choice.text))

            if choice.link == END_PAGE:
                if name not in report.ending_pages:
                    report.ending_pages.append(name)
            elif choice.link in document.pages:
                outgoing[name].append(choice.link)
            elif choice.link not in unresolved[name]:
                unresolved[name].append(choice.link)

    report.unresolved_links = dict(unresolved)

    if report.total_pages:
        per_page = [len(page.choices) for page in document.pages.values()]
        report.max_choices_per_page = max(per_page)
        report.avg_choices_per_page = sum(per_page) / len(per_page)

    # =========================================================================
    # 2. VARIABLE USAGE
    # =========================================================================

    read = report.tested_variables | report.interpolated_variables
    report.never_assigned = read - report.assigned_variables
    report.never_read = report.assigned_variables - read

    # =========================================================================
    # 3. GRAPH STRUCTURE
    # =========================================================================

    reachable = reachable_pages(document)
    report.unreachable_pages = set(document.pages) - reachable

    visited: Set[str] = set()
    for name in list(outgoing.keys()):
        if name not in visited:
            cycle = _find_cycles_dfs(outgoing, name, visited, set(), [])
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    # =========================================================================
    # 4. WARNING FLAGS
    # =========================================================================

    if document.entry not in document.pages:
        report.add_warning(f"Entry page is not declared: {document.entry}")

    for name, links in report.unresolved_links.items():
        report.add_warning(f"Unresolved links from {name}: {', '.join(links)}")

    if report.unreachable_pages:
        report.add_warning(
            f"Unreachable pages: {', '.join(sorted(report.unreachable_pages))}"
        )

    if report.never_assigned:
        report.add_warning(
            f"Variables read but never assigned: {', '.join(sorted(report.never_assigned))}"
        )

    if report.never_read:
        report.add_warning(
            f"Variables assigned but never read: {', '.join(sorted(report.never_read))}"
        )

    if report.total_pages and not report.ending_pages:
        report.add_warning("No page links to end")

    return report


__all__ = ["analyze_document", "DocumentReport"]
