"""
Document Graph Validation.

Checks the structural invariants of a parsed Document:
    - every page has texts and choices
    - every choice link other than "end" resolves to a declared page
    - every page is reachable from the entry page

Validation never mutates the Document and may be re-run at any time.
For a non-raising inventory of the same problems, see analyzer.
"""

import logging
from typing import List, Optional, Set

from questmark.model import END_PAGE, Document


logger = logging.getLogger(__name__)


class DocumentValidationError(Exception):
    """Raised when a Document violates a structural invariant."""

    def __init__(self, message: str, page: Optional[str] = None, link: Optional[str] = None):
        super().__init__(message)
        self.page = page
        self.link = link


def reachable_pages(document: Document) -> Set[str]:
    """
    Names of all declared pages reachable from the entry page.

    Links to undeclared pages are ignored; "end" is never included.
    """
    reachable: Set[str] = set()
    stack: List[str] = [document.entry]
    while stack:
        name = stack.pop()
        if name in reachable:
            continue
        page = document.pages.get(name)
        if page is None:
            continue
        reachable.add(name)
        for choice in page.choices:
            if choice.link not in reachable:
                stack.append(choice.link)
    return reachable


def validate_document(document: Document) -> None:
    """
    Validate a Document. Raises on the first violation found.

    Raises:
        DocumentValidationError: On an empty page, an unresolved link or
            a page unreachable from the entry page
    """
    if document.entry not in document.pages:
        raise DocumentValidationError(f'Entry page "{document.entry}" is not declared', page=document.entry)

    for name, page in document.pages.items():
        if not page.texts:
            raise DocumentValidationError(f'Page "{name}": no texts', page=name)
        if not page.choices:
            raise DocumentValidationError(f'Page "{name}": no choices', page=name)
        for choice in page.choices:
            if choice.link != END_PAGE and choice.link not in document.pages:
                raise DocumentValidationError(
                    f'Unresolved link from page "{name}" to unknown "{choice.link}"',
                    page=name,
                    link=choice.link,
                )

    reachable = reachable_pages(document)
    for name in document.pages:
        if name not in reachable:
            raise DocumentValidationError(f'Page without references: "{name}"', page=name)

    logger.debug(f"document valid | entry={document.entry} pages={len(document)}")


__all__ = ["validate_document", "reachable_pages", "DocumentValidationError"]
