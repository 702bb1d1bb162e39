"""
Logging for render calls

LOG() writes through loguru only when the verbosity of the render call in
progress allows it. The renderer binds its RenderOptions to a ContextVar on
entry and resets it on exit, so tag handlers and nested lines_render() calls
can log without being handed the options, and a finished call leaves no
binding behind.

Level 2 carries recoverable input problems (unterminated quotes, extra
positionals, unknown data references, bodies that are not valid YAML).
Level 3 traces dispatch block by block.

Usage:
    token = options_connectToLogger(options)
    try:
        LOG("Dispatch [image] at line 4", level=3)
    finally:
        options_disconnect(token)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar, Token
import sys

# Context variable to hold the active RenderOptions
_render_options: ContextVar[Optional[Any]] = ContextVar('render_options', default=None)

# Configure loguru with tagdown-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def options_connectToLogger(options: Any) -> Token:
    """
    Connect RenderOptions to the logging context.

    Called by the renderer at the start of every render call so the
    options' verbosity applies to LOG() calls made while rendering,
    including calls from tag handlers.

    Args:
        options: RenderOptions instance with verbosity attribute

    Returns:
        Token to hand back to options_disconnect()
    """
    return _render_options.set(options)


def options_disconnect(token: Token) -> None:
    """Restore the logging context that was active before options_connectToLogger()"""
    _render_options.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current render verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose: malformed header and nested data warnings
        3 = Debug: per-block dispatch trace

    Example:
        LOG("Rendering 12 blocks", level=2)
        LOG("Dispatch [image] at line 4", level=3)
    """
    options = _render_options.get()

    if options and hasattr(options, 'verbosity') and options.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
