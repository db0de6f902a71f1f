"""
Core Story Model Objects

Defines the data structures produced by the markup loader:
    - Choices (edges between pages)
    - Pages (named nodes with text, logic and choices)
    - Documents (root container, entry page + page map)
    - Progress (the mutable state of one playthrough)

ARCHITECTURAL RULE:
    Choice, Page and Document are immutable after loading and may be
    shared by any number of interpreters.
    Progress is the only mutable object; each interpreter owns its own.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .expressions import Logic


END_PAGE = "end"
"""Reserved link target that terminates the narrative. Never a real page."""


def canonical_name(name: str) -> str:
    """
    Canonical form of a page or variable identifier.

    Identifiers are case-insensitive; every boundary that accepts a name
    passes it through here exactly once.
    """
    return name.strip().lower()


@dataclass(frozen=True)
class Choice:
    """
    A directed edge from a page to another page (or to END_PAGE).

    Properties:
        link:
            Canonical target page name, or "end"
        text:
            Display label. None for an auto choice.
        condition:
            Optional conditional Logic guarding visibility

    An auto choice has no text and no condition; it is only legal as the
    sole choice of its page.
    """

    link: str
    text: Optional[str] = None
    condition: Optional[Logic] = None

    @property
    def is_auto(self) -> bool:
        return not self.text and self.condition is None

    @property
    def is_terminal(self) -> bool:
        return self.link == END_PAGE


@dataclass(frozen=True)
class Page:
    """
    A named node of the narrative graph.

    Properties:
        texts:
            Ordered display fragments (body split on the line-break marker)
        choices:
            Ordered outgoing choices
        logics:
            Ordered mutating Logic applied when the page is entered
        line:
            1-based line number of the page header (0 if built in code)
    """

    texts: Tuple[str, ...]
    choices: Tuple[Choice, ...]
    logics: Tuple[Logic, ...] = ()
    line: int = 0

    def __post_init__(self):
        object.__setattr__(self, "texts", tuple(self.texts))
        object.__setattr__(self, "choices", tuple(self.choices))
        object.__setattr__(self, "logics", tuple(self.logics))

    @property
    def has_auto_choice(self) -> bool:
        """True when the page needs no user input to advance."""
        return len(self.choices) == 1 and self.choices[0].is_auto


@dataclass(frozen=True)
class Document:
    """
    Root container of a parsed story.

    Properties:
        entry:
            Canonical name of the entry page (first page declared)
        pages:
            Read-only mapping of canonical page name -> Page, in
            declaration order

    INVARIANTS (checked by validation.validate_document):
        - Every non-"end" link resolves to a declared page
        - Every page is reachable from the entry page
        - Page names are unique after canonicalization (ValueError otherwise)
    """

    entry: str
    pages: Mapping[str, Page] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "entry", canonical_name(self.entry))
        pages = {}
        for name, page in dict(self.pages).items():
            key = canonical_name(name)
            if key in pages:
                raise ValueError(f'Duplicate page name: "{key}"')
            pages[key] = page
        object.__setattr__(self, "pages", MappingProxyType(pages))

    def get_page(self, name: str) -> Optional[Page]:
        """
        Retrieve a page by name (case-insensitive).

        Returns:
            Page object or None if not found (always None for "end")
        """
        return self.pages.get(canonical_name(name))

    def __contains__(self, name: str) -> bool:
        return canonical_name(name) in self.pages

    def __len__(self) -> int:
        return len(self.pages)

    def iter_links(self) -> Iterator[Tuple[str, Choice]]:
        """Yield (page name, choice) for every choice in declaration order."""
        for name, page in self.pages.items():
            for choice in page.choices:
                yield name, choice


@dataclass
class Progress:
    """
    Mutable state of one playthrough.

    Properties:
        current_page: Canonical name of the current page (may be "end")
        vars: Variable bindings. A missing name reads as 0 and a zero
              value is never stored.
    """

    current_page: str = ""
    vars: Dict[str, int] = field(default_factory=dict)

    def copy(self) -> "Progress":
        return Progress(current_page=self.current_page, vars=dict(self.vars))
