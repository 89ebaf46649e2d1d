"""
blocks_exceptions.py

Central exception hierarchy for the blocks world planner.

Exception hierarchy:
    BlocksPlannerException (base)
    ├── WorldDefinitionException
    │   ├── UnknownEntityError
    │   └── MalformedWorldError
    ├── PlanningException
    │   ├── NoSolutionError
    │   ├── ResourceExhaustedError
    │   └── PlanValidationError
    └── ConfigurationException
        └── InvalidConfigError

Usage:
    from blocks_exceptions import ResourceExhaustedError

    try:
        plan = engine.solve(start, goal)
    except ResourceExhaustedError as e:
        logger.warning(f"Search budget exceeded: {e}")
        logger.warning(f"Context: {e.context}")
"""

from typing import Any, Dict, Optional


class BlocksPlannerException(Exception):
    """
    Base exception for all planner-specific errors.

    Every planner exception carries:
    - a readable message
    - contextual information (dict)
    - the original exception, if it wraps one
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# ============================================================================
# WORLD DEFINITION EXCEPTIONS
# ============================================================================


class WorldDefinitionException(BlocksPlannerException):
    """Base exception for errors while building a world description."""


class UnknownEntityError(WorldDefinitionException):
    """
    A block or location name is not part of the registry.

    Causes:
    - Typo in a layout definition
    - Layout built against a different registry
    """

    def __init__(
        self,
        message: str,
        entity_name: Optional[str] = None,
        entity_type: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["entity_name"] = entity_name
        context["entity_type"] = entity_type
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class MalformedWorldError(WorldDefinitionException):
    """
    A world description violates the blocks world invariants.

    Causes:
    - A block with two supports
    - A location that is both occupied and clear
    - More than one block held at once
    """

    def __init__(self, message: str, violations: Optional[list] = None, **kwargs):
        context = kwargs.get("context", {})
        context["violations"] = violations or []
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# PLANNING EXCEPTIONS
# ============================================================================


class PlanningException(BlocksPlannerException):
    """Base exception for search and plan errors."""


class NoSolutionError(PlanningException):
    """
    The open frontier was exhausted before the goal was reached.

    The engine itself reports this as an empty plan; callers that prefer
    an exception get it from PlanResult.unwrap().
    """


class ResourceExhaustedError(PlanningException):
    """
    The search exceeded its configured expansion or time budget.
    """

    def __init__(
        self,
        message: str,
        expansions: Optional[int] = None,
        elapsed_seconds: Optional[float] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["expansions"] = expansions
        context["elapsed_seconds"] = elapsed_seconds
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class PlanValidationError(PlanningException):
    """
    A plan does not replay from the start world to the goal world.
    """

    def __init__(self, message: str, step_index: Optional[int] = None, **kwargs):
        context = kwargs.get("context", {})
        context["step_index"] = step_index
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================


class ConfigurationException(BlocksPlannerException):
    """Base exception for configuration errors."""


class InvalidConfigError(ConfigurationException):
    """
    Invalid configuration.

    Causes:
    - Unknown priority policy or dedup strategy
    - Negative or zero budgets
    - Duplicate entity names in a registry
    """


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def wrap_exception(
    exc: Exception,
    planner_exception_class: type[BlocksPlannerException],
    message: str,
    **context,
) -> BlocksPlannerException:
    """
    Wrap a generic exception into a planner-specific exception.

    Example:
        try:
            limit = int(raw)
        except ValueError as e:
            raise wrap_exception(e, InvalidConfigError, "Bad expansion limit", raw=raw)
    """
    return planner_exception_class(
        message=message, context=context, original_exception=exc
    )


def get_user_friendly_message(exc: Exception, include_details: bool = False) -> str:
    """
    Build a user-facing error message from an exception.

    Args:
        exc: Exception object
        include_details: Append the technical message and context (debug mode)

    Returns:
        Message suitable for a console or dialog
    """
    friendly_messages = {
        UnknownEntityError: "[ERROR] Unknown block or location in the world definition.",
        MalformedWorldError: "[ERROR] The world definition is inconsistent.",
        NoSolutionError: "[ERROR] No plan exists that reaches the goal configuration.",
        ResourceExhaustedError: "[ERROR] The search budget ran out before a plan was found.",
        PlanValidationError: "[ERROR] The plan does not reach the goal configuration.",
        InvalidConfigError: "[ERROR] Invalid planner configuration. Please check the settings.",
    }

    default_message = "[ERROR] An unexpected error occurred."

    user_message = friendly_messages.get(type(exc), default_message)

    if isinstance(exc, UnknownEntityError) and exc.context.get("entity_name"):
        entity_type = exc.context.get("entity_type") or "entity"
        user_message = (
            f"[ERROR] Unknown {entity_type} '{exc.context['entity_name']}'."
        )

    elif isinstance(exc, ResourceExhaustedError) and exc.context.get("expansions"):
        user_message = (
            f"[ERROR] The search budget ran out after "
            f"{exc.context['expansions']} expansions."
        )

    if include_details and isinstance(exc, BlocksPlannerException):
        user_message += f"\n\nTechnical details: {exc.message}"
        if exc.context:
            user_message += f"\n   Context: {exc.context}"

    return user_message
