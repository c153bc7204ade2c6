from __future__ import annotations

import logging
import sys
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def ask_yes_no(question: str, *, input_fn: Optional[Callable[[str], str]] = None) -> bool:
    """Ask a (y/N) question. Only an answer starting with y/Y counts as yes.

    Without a terminal on stdin (and no input_fn) the answer is no.
    """

    if input_fn is None:
        if not sys.stdin or not sys.stdin.isatty():
            logger.info("%s -> no (stdin is not a terminal)", question.strip())
            return False
        input_fn = input

    try:
        reply = input_fn(question)
    except EOFError:
        return False
    return reply.strip()[:1] in {"y", "Y"}
