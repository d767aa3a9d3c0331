"""CLI decorators."""

from .error_handling import (
    EXIT_INVALID,
    EXIT_LOAD_FAILURE,
    handle_errors,
    print_stack_trace_if_verbose,
)


__all__ = [
    "EXIT_INVALID",
    "EXIT_LOAD_FAILURE",
    "handle_errors",
    "print_stack_trace_if_verbose",
]
