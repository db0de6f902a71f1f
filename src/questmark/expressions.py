"""
Logic Expressions for questmark

Every piece of logic embedded in markup (page-entry mutations and choice
guards) is represented as a small immutable AST node, never as a string.

The logic language is intentionally tiny:

    identifier [ operator value ]

ARCHITECTURAL RULE:
    This module holds structure only.
    Parsing lives in markup_parser, evaluation lives in interpreter.
"""

from dataclasses import dataclass
from enum import Enum


class LogicContext(Enum):
    """
    Syntactic position a logic expression was parsed in.

    STATE:
        Inside a page's logic block. Only mutating operators are legal.
    CONDITION:
        Inside a choice guard. Only conditional operators are legal.
    """

    STATE = "state"
    CONDITION = "condition"


class LogicOperator(Enum):
    """
    Operators supported by the logic language.

    The set partitions into two disjoint classes, see `is_mutating`.
    """

    # Mutating operators
    ASSIGN = "="
    INCREMENT = "+="

    # Conditional operators
    EQUALS = "=="
    NOT_EQUALS = "!="
    LESS_THAN = "<"
    GREATER_THAN = ">"

    @property
    def is_mutating(self) -> bool:
        return self in (LogicOperator.ASSIGN, LogicOperator.INCREMENT)

    @property
    def context(self) -> LogicContext:
        """The only context this operator may appear in."""
        return LogicContext.STATE if self.is_mutating else LogicContext.CONDITION


@dataclass(frozen=True)
class Logic:
    """
    A single parsed logic expression.

    Examples:
        {gold = 5}       -> Logic(ASSIGN, "gold", 5)
        {gold += -1}     -> Logic(INCREMENT, "gold", -1)
        {gold > 10}      -> Logic(GREATER_THAN, "gold", 10)
        {has_key}        -> Logic(GREATER_THAN, "has_key", 0)

    Properties:
        operator: LogicOperator
        lhs: Canonical (lowercased) variable name
        rhs: Integer right-hand side, 0 when omitted

    IMPORTANT:
        This object is immutable (frozen=True).
        It does NOT evaluate itself.
    """

    operator: LogicOperator
    lhs: str
    rhs: int = 0

    @property
    def context(self) -> LogicContext:
        return self.operator.context

    @property
    def is_condition(self) -> bool:
        return self.context is LogicContext.CONDITION

    def __str__(self) -> str:
        return f"{self.lhs} {self.operator.value} {self.rhs}"
