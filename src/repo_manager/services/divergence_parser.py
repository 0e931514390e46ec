"""Parsing of ``git rev-list --left-right --count`` output."""

import logging
import re

from ..models.working_tree import DivergenceCount

logger = logging.getLogger(__name__)

_SEPARATOR = re.compile(r"[\t ]+")


def parse_divergence(text: str) -> DivergenceCount | None:
    """
    Parse ``<behind><sep><ahead>`` into a divergence count.

    Args:
        text: Output of ``rev-list --left-right --count origin/<branch>...HEAD``

    Returns:
        DivergenceCount if the first two tokens are non-negative integers,
        None otherwise. Never raises for malformed input.
    """
    tokens = [token for token in _SEPARATOR.split(text.strip()) if token]

    if len(tokens) < 2:
        logger.debug(f"Divergence output has fewer than two tokens: {text!r}")
        return None

    behind, ahead = tokens[0], tokens[1]
    if not all(token.isascii() and token.isdigit() for token in (behind, ahead)):
        logger.debug(f"Divergence output is not numeric: {text!r}")
        return None

    return DivergenceCount(behind=int(behind), ahead=int(ahead))
