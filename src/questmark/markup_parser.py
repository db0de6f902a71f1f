"""
Markup Parser for questmark (Raw Markup → Document).

Converts line-oriented story markup into an immutable Document.

Markup Format:
    -> PageName                     page header (text before "->" is ignored)
    {gold = 5}                      optional logic lines (mutating)
    Body text, any number of        body lines, joined with spaces;
    lines. [br] Next fragment.      [br] splits display fragments
    * Go north -> north             choice
    * {gold > 10} Buy -> shop       guarded choice
    * -> next                       auto choice (must be the only one)
    // comment                      ignored

Syntax Notes:
    - Page and variable names are case-insensitive
    - "end" is a reserved choice target and can't be declared as a page
    - The first declared page is the entry page
    - Parsing stops on the first error; no partial Document is returned
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from questmark.expressions import Logic, LogicContext, LogicOperator
from questmark.model import END_PAGE, Choice, Document, Page, canonical_name


logger = logging.getLogger(__name__)

COMMENT_MARKER = "//"
CHOICE_MARKER = "*"
LOGIC_MARKER = "{"
LINE_BREAK_MARKER = "[br]"

_TEXT_STOP_MARKERS = (CHOICE_MARKER, "-")

_HEADER_RE = re.compile(r"->\s*(\w.*?)\s*$")
_LOGIC_LINE_RE = re.compile(r"^\{([^{}]*)\}$")
_CHOICE_RE = re.compile(r"^\*(.*?)->\s*(\w.*?)\s*$")
_GUARDED_LABEL_RE = re.compile(r"^\s*\{([^{}]*)\}(.*)$")
_LINE_BREAK_RE = re.compile(r"\s?" + re.escape(LINE_BREAK_MARKER) + r"\s?")

_LOGIC_TOKEN_RE = re.compile(
    r"\s*(?:(?P<number>[-+]?\d+)|(?P<name>[A-Za-z_]\w*)|(?P<op>\+=|==|!=|=|<|>)|(?P<bad>\S+))"
)


class MarkupParseError(Exception):
    """Raised when markup parsing fails."""

    def __init__(self, reason: str, line: int):
        super().__init__(f"Error at line {line}: {reason}")
        self.reason = reason
        self.line = line


class MarkupStream:
    """
    Cursor over the significant lines of a markup string.

    Lines are trimmed; blank lines and comment lines are never observable.
    Each line keeps its 1-based physical line number for error reporting.
    """

    def __init__(self, markup: str):
        self.lines: List[Tuple[int, str]] = []
        for number, raw in enumerate(markup.lstrip("\ufeff").splitlines(), start=1):
            line = raw.strip()
            if line and not line.startswith(COMMENT_MARKER):
                self.lines.append((number, line))
        self.pointer = 0

    def eof(self) -> bool:
        return self.pointer >= len(self.lines)

    def next(self) -> str:
        if self.eof():
            return ""
        line = self.lines[self.pointer][1]
        self.pointer += 1
        return line

    def previous(self) -> None:
        if self.pointer > 0:
            self.pointer -= 1

    @property
    def line_number(self) -> int:
        """Physical line number of the line most recently returned by next()."""
        if not self.lines:
            return 0
        index = min(max(self.pointer - 1, 0), len(self.lines) - 1)
        return self.lines[index][0]


def _tokenize_logic(code: str, line: int) -> List[Tuple[str, str]]:
    """Tokenize logic code into (kind, text) pairs."""
    tokens = []
    pos = 0
    code = code.rstrip()
    while pos < len(code):
        match = _LOGIC_TOKEN_RE.match(code, pos)
        kind = match.lastgroup
        if kind == "bad":
            raise MarkupParseError(f"Unexpected '{match.group(kind)}' in logic", line)
        tokens.append((kind, match.group(kind)))
        pos = match.end()
    return tokens


def parse_logic(code: str, context: LogicContext, line: int = 0) -> Logic:
    """
    Parse a logic expression: identifier [ operator value ].

    Omitting operator and value means "> 0" and is only legal as a
    condition.

    Args:
        code: Expression text without surrounding braces
        context: Where the expression appears (logic block or choice guard)
        line: Line number used in error messages

    Returns:
        Logic AST node

    Raises:
        MarkupParseError: If syntax is invalid or the operator does not
            belong to the given context
    """
    tokens = _tokenize_logic(code, line)
    if not tokens or tokens[0][0] != "name":
        raise MarkupParseError("Invalid logic syntax", line)

    lhs = canonical_name(tokens[0][1])
    if len(tokens) == 1:
        operator, rhs = LogicOperator.GREATER_THAN, 0
    else:
        kind, text = tokens[1]
        if kind != "op":
            raise MarkupParseError(f"Invalid logic operation '{text}'", line)
        operator = LogicOperator(text)
        if len(tokens) == 2:
            raise MarkupParseError(f"Missing value after '{text}'", line)
        kind, text = tokens[2]
        if kind != "number":
            raise MarkupParseError("Invalid expression, only numbers supported on right side", line)
        rhs = int(text)
        if len(tokens) > 3:
            raise MarkupParseError(f"Unexpected '{tokens[3][1]}' after expression", line)

    if operator.context is not context:
        if context is LogicContext.CONDITION:
            raise MarkupParseError("Should be conditional expression", line)
        raise MarkupParseError("Should be non conditional expression", line)

    return Logic(operator=operator, lhs=lhs, rhs=rhs)


def _parse_page_header(stream: MarkupStream) -> str:
    match = _HEADER_RE.search(stream.next())
    if match is None:
        raise MarkupParseError('Invalid page header, should be in "-> PageName" form', stream.line_number)
    name = canonical_name(match.group(1))
    if name == END_PAGE:
        raise MarkupParseError(f'Invalid page name, "{END_PAGE}" is reserved', stream.line_number)
    return name


def _parse_page_logics(stream: MarkupStream) -> List[Logic]:
    logics = []
    while not stream.eof():
        line = stream.next()
        if not line.startswith(LOGIC_MARKER):
            stream.previous()
            break
        match = _LOGIC_LINE_RE.match(line)
        if match is None or not match.group(1).strip():
            raise MarkupParseError("Invalid logic", stream.line_number)
        logics.append(parse_logic(match.group(1), LogicContext.STATE, stream.line_number))
    return logics


def _parse_page_texts(stream: MarkupStream) -> List[str]:
    buf = []
    while not stream.eof():
        line = stream.next()
        if line.startswith(_TEXT_STOP_MARKERS):
            stream.previous()
            break
        buf.append(line)
    texts = [text for text in _LINE_BREAK_RE.split(" ".join(buf)) if text]
    if not texts:
        raise MarkupParseError("Invalid page texts, every page needs text", stream.line_number)
    return texts


def _parse_choice(line: str, line_number: int) -> Choice:
    match = _CHOICE_RE.match(line)
    if match is None:
        raise MarkupParseError('Invalid choice syntax, should be in "* Text -> PageName" form', line_number)
    link = canonical_name(match.group(2))
    label = match.group(1).strip()
    if not label:
        return Choice(link=link)

    guarded = _GUARDED_LABEL_RE.match(label)
    if guarded is None:
        return Choice(link=link, text=label)

    condition = parse_logic(guarded.group(1), LogicContext.CONDITION, line_number)
    text = guarded.group(2).strip()
    if not text:
        raise MarkupParseError("Conditional choice needs text", line_number)
    return Choice(link=link, text=text, condition=condition)


def _parse_page_choices(stream: MarkupStream) -> List[Choice]:
    choices = []
    while not stream.eof():
        line = stream.next()
        if not line.startswith(CHOICE_MARKER):
            stream.previous()
            break
        choices.append(_parse_choice(line, stream.line_number))

    if not choices:
        raise MarkupParseError("No choices", stream.line_number)
    if len(choices) == 1 and choices[0].condition is not None:
        raise MarkupParseError("Auto choice cant use condition", stream.line_number)
    if len(choices) > 1 and any(not choice.text for choice in choices):
        raise MarkupParseError("Choice without text must be the only choice of its page", stream.line_number)
    return choices


def _parse_page(stream: MarkupStream) -> Tuple[str, Page]:
    """Parse one page: header, logic block, body texts, choices."""
    name = _parse_page_header(stream)
    header_line = stream.line_number
    logics = _parse_page_logics(stream)
    texts = _parse_page_texts(stream)
    choices = _parse_page_choices(stream)
    return name, Page(texts=texts, choices=choices, logics=logics, line=header_line)


def parse_markup_string(markup: str, validate: bool = False) -> Document:
    """
    Parse markup into a Document.

    Args:
        markup: Full markup source
        validate: Also run validation.validate_document before returning

    Returns:
        Document with the first declared page as entry

    Raises:
        MarkupParseError: If parsing fails
        DocumentValidationError: If validate is set and the graph is invalid
    """
    if not markup or not markup.strip():
        raise MarkupParseError("Invalid markup data", 0)

    stream = MarkupStream(markup)
    pages: Dict[str, Page] = {}
    entry: Optional[str] = None

    while not stream.eof():
        name, page = _parse_page(stream)
        if name in pages:
            raise MarkupParseError(f'Page with name "{name}" already declared before', page.line)
        pages[name] = page
        if entry is None:
            entry = name
        logger.debug(f"parsed page | name={name} line={page.line} choices={len(page.choices)}")

    if entry is None:
        raise MarkupParseError("Invalid markup data", 0)

    document = Document(entry=entry, pages=pages)
    logger.debug(f"markup loaded | entry={entry} pages={len(pages)}")

    if validate:
        from questmark.validation import validate_document
        validate_document(document)

    return document


def parse_markup_file(filepath: str, validate: bool = False, encoding: str = "utf-8") -> Document:
    """
    Parse a markup file into a Document.

    Args:
        filepath: Path to markup file
        validate: Also run validation.validate_document before returning
        encoding: File encoding

    Returns:
        Document

    Raises:
        FileNotFoundError: If file doesn't exist
        MarkupParseError: If parsing fails
    """
    try:
        with open(filepath, 'r', encoding=encoding) as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Markup file not found: {filepath}")

    return parse_markup_string(content, validate=validate)


__all__ = [
    "parse_markup_string",
    "parse_markup_file",
    "parse_logic",
    "MarkupParseError",
    "MarkupStream",
]
