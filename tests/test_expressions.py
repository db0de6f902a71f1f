"""
Tests for the questmark Expression System.

These tests verify:
    - Logic objects can be created
    - Operators partition into mutating and conditional classes
    - Logic immutability
"""

import pytest
from questmark.expressions import Logic, LogicContext, LogicOperator


class TestLogicOperator:
    """Test operator classes."""

    @pytest.mark.parametrize("op", [LogicOperator.ASSIGN, LogicOperator.INCREMENT])
    def test_mutating_operators(self, op):
        """= and += belong to logic blocks."""
        assert op.is_mutating
        assert op.context is LogicContext.STATE

    @pytest.mark.parametrize("op", [
        LogicOperator.EQUALS,
        LogicOperator.NOT_EQUALS,
        LogicOperator.LESS_THAN,
        LogicOperator.GREATER_THAN,
    ])
    def test_conditional_operators(self, op):
        """Comparisons belong to choice guards."""
        assert not op.is_mutating
        assert op.context is LogicContext.CONDITION

    def test_operator_from_symbol(self):
        """Operators should be constructible from their markup symbol."""
        assert LogicOperator("+=") is LogicOperator.INCREMENT
        assert LogicOperator("!=") is LogicOperator.NOT_EQUALS


class TestLogic:
    """Test Logic objects."""

    def test_rhs_defaults_to_zero(self):
        """Omitted right-hand side should be 0."""
        logic = Logic(LogicOperator.GREATER_THAN, "gold")
        assert logic.rhs == 0

    def test_context_follows_operator(self):
        """A Logic is tagged for exactly one context."""
        assert Logic(LogicOperator.ASSIGN, "gold", 5).context is LogicContext.STATE
        assert Logic(LogicOperator.EQUALS, "gold", 5).is_condition

    def test_logic_immutable(self):
        """Logic should be frozen."""
        logic = Logic(LogicOperator.ASSIGN, "gold", 5)
        with pytest.raises(AttributeError):
            logic.rhs = 6

    def test_logic_equality(self):
        """Structurally equal logic should compare equal."""
        assert Logic(LogicOperator.LESS_THAN, "hp", 3) == Logic(LogicOperator.LESS_THAN, "hp", 3)

    def test_str(self):
        """str() should read like markup."""
        assert str(Logic(LogicOperator.INCREMENT, "gold", -2)) == "gold += -2"
