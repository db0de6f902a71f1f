"""
Story Interpreter: drives one playthrough over a shared Document.

The interpreter owns a Progress (current page + variable bindings) and is
the only thing that mutates it. The Document itself is never modified, so
one parsed Document can back any number of interpreters at once.

Navigation outcomes are return values, not exceptions:
    - an unknown choice index is a no-op
    - a choice whose guard is false is a no-op
    - the "end" page (or any undeclared page) has no page data

Operator semantics (process_logic):
    =    set variable to rhs                         -> False
    +=   add rhs to variable                         -> False
    ==   variable == rhs
    !=   variable != rhs
    <    variable <  rhs
    >    variable >  rhs
"""

import logging
import re
import warnings
from typing import Any, List, Mapping, Optional, Tuple, Union

from questmark.expressions import Logic, LogicOperator
from questmark.model import END_PAGE, Choice, Document, Page, Progress, canonical_name


logger = logging.getLogger(__name__)

_INTERPOLATION_RE = re.compile(r"\{\s*(\w+)\s*\}")


class ProgressError(Exception):
    """Raised when a progress snapshot can't be installed."""
    pass


class Interpreter:
    """
    Mutable playthrough state over an immutable Document.

    Args:
        document: Parsed (ideally validated) Document
        apply_logic_on_enter: Apply a page's logic block whenever it is
            entered (on reset and after each successful choice). When off,
            the host calls apply_page_logic itself.
    """

    def __init__(self, document: Document, apply_logic_on_enter: bool = True):
        self.document = document
        self.apply_logic_on_enter = apply_logic_on_enter
        self._progress = Progress()
        self.reset()

    # =========================================================================
    # PROGRESS
    # =========================================================================

    @property
    def current_page_name(self) -> str:
        return self._progress.current_page

    def get_current_page(self) -> Optional[Page]:
        """Page data of the current page, or None ("end" or undeclared)."""
        return self.document.pages.get(self._progress.current_page)

    def is_finished(self) -> bool:
        return self._progress.current_page == END_PAGE

    def set_current_page(self, name: str) -> None:
        """Jump to a page without evaluating guards or applying logic."""
        self._progress.current_page = canonical_name(name)

    def reset(self) -> None:
        """Return to the entry page with no variables set."""
        self._progress = Progress(current_page=self.document.entry)
        if self.apply_logic_on_enter:
            self.apply_page_logic()

    def get_progress(self) -> Progress:
        """Snapshot of the current progress (a copy, safe to keep)."""
        return self._progress.copy()

    def set_progress(self, progress: Union[Progress, Mapping[str, Any]]) -> None:
        """
        Install a progress snapshot wholesale.

        Accepts a Progress or a mapping with "currentPage" (or
        "current_page") and "vars". Page and variable names are
        canonicalized and zero values are dropped. A page the Document
        does not declare is accepted with a warning.

        Raises:
            ProgressError: If the variable mapping is missing or invalid
        """
        if isinstance(progress, Progress):
            page, variables = progress.current_page, progress.vars
        elif isinstance(progress, Mapping):
            page = progress.get("currentPage", progress.get("current_page"))
            variables = progress.get("vars")
        else:
            raise ProgressError(f"Unsupported progress type: {type(progress).__name__}")

        if variables is None or not isinstance(variables, Mapping):
            raise ProgressError("Progress has no variable mapping")
        if not isinstance(page, str):
            raise ProgressError("Progress has no current page")

        installed = Progress(current_page=canonical_name(page))
        for name, value in variables.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ProgressError(f'Variable "{name}" is not an integer: {value!r}')
            if value:
                installed.vars[canonical_name(name)] = value

        if installed.current_page != END_PAGE and installed.current_page not in self.document.pages:
            warnings.warn(f"Progress points to unknown page: {installed.current_page}", UserWarning)

        self._progress = installed
        logger.debug(f"progress installed | page={installed.current_page} vars={len(installed.vars)}")

    def save_state(self) -> str:
        """Current progress as a JSON string."""
        from questmark.serialization import progress_to_json
        return progress_to_json(self._progress)

    def load_state(self, json_state: str) -> None:
        """Install progress from a JSON string produced by save_state."""
        from questmark.serialization import progress_from_json
        self.set_progress(progress_from_json(json_state))

    # =========================================================================
    # VARIABLES AND LOGIC
    # =========================================================================

    def get_variable(self, name: str) -> int:
        """Variable value, 0 if never set."""
        return self._progress.vars.get(canonical_name(name), 0)

    def set_variable(self, name: str, value: int) -> None:
        """Set a variable. Setting 0 removes the binding."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Variable values must be integers, got {type(value).__name__}")
        name = canonical_name(name)
        if value:
            self._progress.vars[name] = value
        else:
            self._progress.vars.pop(name, None)

    def process_logic(self, logic: Logic) -> bool:
        """
        Evaluate a Logic against the current variables.

        Returns:
            The condition result, or False for mutating logic
        """
        value = self.get_variable(logic.lhs)
        op = logic.operator
        if op is LogicOperator.ASSIGN:
            self.set_variable(logic.lhs, logic.rhs)
            return False
        if op is LogicOperator.INCREMENT:
            self.set_variable(logic.lhs, value + logic.rhs)
            return False
        if op is LogicOperator.EQUALS:
            return value == logic.rhs
        if op is LogicOperator.NOT_EQUALS:
            return value != logic.rhs
        if op is LogicOperator.LESS_THAN:
            return value < logic.rhs
        if op is LogicOperator.GREATER_THAN:
            return value > logic.rhs
        return False

    def apply_page_logic(self, page: Optional[Page] = None) -> None:
        """Apply a page's logic block in order (defaults to the current page)."""
        if page is None:
            page = self.get_current_page()
        if page is None:
            return
        for logic in page.logics:
            self.process_logic(logic)

    # =========================================================================
    # CHOICES
    # =========================================================================

    def is_choice_visible(self, choice: Choice) -> bool:
        """Evaluate a choice's guard without side effects."""
        if choice.condition is None:
            return True
        if not choice.condition.is_condition:
            return False
        return self.process_logic(choice.condition)

    def visible_choices(self) -> List[Tuple[int, Choice]]:
        """(index, choice) pairs of the current page whose guard passes."""
        page = self.get_current_page()
        if page is None:
            return []
        return [(i, c) for i, c in enumerate(page.choices) if self.is_choice_visible(c)]

    def _resolve_choice(self, choice: Union[int, Choice]) -> Optional[Choice]:
        page = self.get_current_page()
        if page is None:
            return None
        if isinstance(choice, Choice):
            return choice if choice in page.choices else None
        if isinstance(choice, int) and not isinstance(choice, bool) and 0 <= choice < len(page.choices):
            return page.choices[choice]
        return None

    def make_choice(self, choice: Union[int, Choice]) -> bool:
        """
        Take a choice of the current page by index or by object.

        Returns:
            True if the current page changed, False for a no-op (unknown
            choice, no current page data, or guard evaluating false)
        """
        resolved = self._resolve_choice(choice)
        if resolved is None or not self.is_choice_visible(resolved):
            return False
        logger.debug(f"choice taken | from={self._progress.current_page} to={resolved.link}")
        self.set_current_page(resolved.link)
        if self.apply_logic_on_enter:
            self.apply_page_logic()
        return True

    def has_auto_choice(self) -> bool:
        """True when the current page has a single textless choice."""
        page = self.get_current_page()
        return page is not None and page.has_auto_choice

    def apply_auto_choice(self) -> bool:
        """Take the current page's auto choice, if it has one."""
        if not self.has_auto_choice():
            return False
        return self.make_choice(0)

    # =========================================================================
    # TEXT
    # =========================================================================

    def process_text(self, text: str) -> str:
        """Replace every {name} in text with the variable's current value."""
        return _INTERPOLATION_RE.sub(lambda m: str(self.get_variable(m.group(1))), text)


__all__ = ["Interpreter", "ProgressError"]
