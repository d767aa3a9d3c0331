"""Error handling decorators for CLI commands."""

import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer
from pydantic import ValidationError

from layerkit.cli.helpers.theme import get_themed_console
from layerkit.core.errors import (
    ConfigError,
    GeometryError,
    KeycodeCatalogError,
    LayerkitError,
    LayoutLoadError,
    TapDanceError,
)
from layerkit.core.structlog_logger import get_struct_logger


__all__ = ["EXIT_INVALID", "EXIT_LOAD_FAILURE", "handle_errors", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)

EXIT_INVALID = 1
EXIT_LOAD_FAILURE = 2


def _fail(event: str, error: Exception, exit_code: int) -> typer.Exit:
    logger.error(event, error=str(error))
    get_themed_console(stderr=True).print_error(str(error))
    print_stack_trace_if_verbose()
    return typer.Exit(exit_code)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle common exceptions in CLI commands.

    Layout documents that cannot be loaded exit with status 2; every other
    handled error exits with status 1. ``typer.Exit`` raised by the command
    itself passes through untouched.

    Args:
        func: The function to decorate

    Returns:
        Decorated function with error handling
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except LayoutLoadError as e:
            raise _fail("layout_load_error", e, EXIT_LOAD_FAILURE) from e
        except TapDanceError as e:
            raise _fail("tap_dance_error", e, EXIT_INVALID) from e
        except ConfigError as e:
            raise _fail("configuration_error", e, EXIT_INVALID) from e
        except (GeometryError, KeycodeCatalogError) as e:
            raise _fail("resource_error", e, EXIT_INVALID) from e
        except LayerkitError as e:
            raise _fail("layout_error", e, EXIT_INVALID) from e
        except ValidationError as e:
            raise _fail("invalid_input", e, EXIT_INVALID) from e
        except FileNotFoundError as e:
            raise _fail("file_not_found", e, EXIT_INVALID) from e
        except Exception as e:
            exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
            logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            print_stack_trace_if_verbose()
            raise typer.Exit(EXIT_INVALID) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if any(arg in sys.argv for arg in ["-vv", "--debug"]):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
