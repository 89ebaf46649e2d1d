"""
tests/test_blocks_exceptions.py

Tests for the planner exception hierarchy and its helpers.
"""

import pytest

from blocks_exceptions import (
    BlocksPlannerException,
    InvalidConfigError,
    MalformedWorldError,
    NoSolutionError,
    PlanningException,
    ResourceExhaustedError,
    UnknownEntityError,
    WorldDefinitionException,
    get_user_friendly_message,
    wrap_exception,
)


class TestExceptionHierarchy:
    """Tests for the exception classes"""

    def test_hierarchy(self):
        """Test 1: Specific errors derive from their category and the base"""
        assert issubclass(UnknownEntityError, WorldDefinitionException)
        assert issubclass(MalformedWorldError, WorldDefinitionException)
        assert issubclass(ResourceExhaustedError, PlanningException)
        assert issubclass(NoSolutionError, BlocksPlannerException)
        assert issubclass(InvalidConfigError, BlocksPlannerException)

    def test_context_in_str(self):
        """Test 2: Context and cause appear in the string form"""
        cause = ValueError("bad")
        exc = BlocksPlannerException("Failed", context={"k": 1}, original_exception=cause)

        assert str(exc) == "Failed | Context: k=1 | Caused by: ValueError: bad"

    def test_specific_context(self):
        """Test 3: Specific errors record their keyword arguments as context"""
        exc = ResourceExhaustedError("Out", expansions=5, elapsed_seconds=0.5)
        assert exc.context == {"expansions": 5, "elapsed_seconds": 0.5}

        malformed = MalformedWorldError("Bad", violations=["x"])
        assert malformed.context["violations"] == ["x"]

    def test_wrap_exception(self):
        """Test 4: wrap_exception keeps the original exception"""
        original = ValueError("not a number")
        wrapped = wrap_exception(original, InvalidConfigError, "Bad value", raw="x")

        assert isinstance(wrapped, InvalidConfigError)
        assert wrapped.original_exception is original
        assert wrapped.context == {"raw": "x"}


class TestUserFriendlyMessage:
    """Tests for get_user_friendly_message"""

    def test_unknown_entity(self):
        """Test 1: Unknown entities are named"""
        exc = UnknownEntityError("Nope", entity_name="Q", entity_type="block")
        assert get_user_friendly_message(exc) == "[ERROR] Unknown block 'Q'."

    def test_resource_exhausted(self):
        """Test 2: Budget errors report the expansion count"""
        exc = ResourceExhaustedError("Out", expansions=42)
        assert get_user_friendly_message(exc) == (
            "[ERROR] The search budget ran out after 42 expansions."
        )

    def test_details(self):
        """Test 3: Details append the technical message"""
        message = get_user_friendly_message(NoSolutionError("Exhausted"), include_details=True)
        assert "Technical details: Exhausted" in message

    @pytest.mark.parametrize("exc", [RuntimeError("boom"), KeyError("x")])
    def test_unknown_exception(self, exc):
        """Test 4: Foreign exceptions get the generic message"""
        assert get_user_friendly_message(exc) == "[ERROR] An unexpected error occurred."
