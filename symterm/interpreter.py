from __future__ import annotations

import logging
from typing import Optional, Union

from symterm import Snapshot
from symterm.builtins import register
from symterm.config import get_log_level, setup_logging
from symterm.evaluation.evaluator import evaluate, execute
from symterm.prelude import load_prelude
from symterm.serialization import SerializationStorage, deserialize, serialize, snapshot
from symterm.types import ExecutionContext, Term

logger = logging.getLogger(__name__)


class Interpreter:
    """
    One evaluation session: an ExecutionContext with the standard intrinsics
    registered and, unless disabled, the prelude functions bound. Also owns a
    SerializationStorage so terms keep their ids across save/load calls.
    """

    def __init__(self, prelude: bool = True, log_level: Optional[str] = None):
        level = log_level or get_log_level()
        if level:
            setup_logging(level)

        self.context: ExecutionContext = ExecutionContext()
        register(self.context)
        if prelude:
            load_prelude(self.context)
        self.storage: SerializationStorage = SerializationStorage()
        logger.debug(f"Interpreter ready: {self.context!r}")

    def evaluate(self, term: Term) -> Term:
        return evaluate(term, self.context)

    def execute(self, term: Term) -> Term:
        return execute(term, self.context)

    def snapshot(self, term: Term) -> Snapshot:
        return snapshot(term, self.storage)

    def serialize(self, term: Term) -> str:
        return serialize(term, self.storage)

    def deserialize(self, data: Union[str, bytes, Snapshot]) -> Term:
        return deserialize(data, self.storage)
