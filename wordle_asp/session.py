"""
Solver Session
==============

Holds the constant rule program plus the fact groups submitted while solving
the current word, and asks the oracle for the best next guess over their
union.

Fact groups live in an insertion-ordered table keyed by integer handles.
Handles are never reused, so a stale handle can never retract a newer group.
"""

import itertools
import logging
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Union

from .encoder import Fact, render
from .errors import SolverError, UnknownHandle
from .oracle import INCOHERENT, WINNER_PREDICATE, SolverOracle, split_atoms

log = logging.getLogger(__name__)


class Solved(NamedTuple):
    word: str
    score: Optional[int]


class Incoherent(NamedTuple):
    reason: str = ""


Outcome = Union[Solved, Incoherent]


def parse_winner(atom: str, predicate: str = WINNER_PREDICATE) -> Optional[Solved]:
    """'score(crane,42)' -> Solved('crane', 42); None for other atoms."""
    atom = atom.strip()
    if not (atom.startswith(predicate + '(') and atom.endswith(')')):
        return None
    args = split_atoms(atom[len(predicate) + 1:-1])
    if not args:
        return None
    word = args[0].strip('"')
    aux = None
    if len(args) > 1:
        try:
            aux = int(args[1])
        except ValueError:
            aux = None
    return Solved(word, aux)


class SolverSession:
    """
    Rules + active fact groups, and the oracle that solves them.

    The rules are fixed at construction; fact groups come and go through
    submit() / retract() / retract_all().
    """

    def __init__(self, oracle: SolverOracle, rules: Iterable[str],
                 winner: str = WINNER_PREDICATE):
        self.oracle = oracle
        self.rules: List[str] = list(rules)
        self.winner = winner
        self._groups: Dict[int, FrozenSet[Fact]] = {}
        self._handles = itertools.count(1)

    @property
    def active_count(self) -> int:
        return len(self._groups)

    @property
    def handles(self) -> List[int]:
        return list(self._groups)

    def submit(self, facts: Iterable[Fact]) -> int:
        """Add a fact group and return its handle. Does not call the solver."""
        handle = next(self._handles)
        self._groups[handle] = frozenset(facts)
        log.debug("submitted group %d (%d facts)", handle, len(self._groups[handle]))
        return handle

    def retract(self, handle: int) -> None:
        if handle not in self._groups:
            raise UnknownHandle(handle)
        del self._groups[handle]
        log.debug("retracted group %d", handle)

    def retract_all(self) -> int:
        """Drop every active group; returns how many were dropped."""
        n = len(self._groups)
        self._groups.clear()
        if n:
            log.debug("retracted %d groups", n)
        return n

    def program(self) -> str:
        parts = list(self.rules)
        parts.extend(render(facts) for facts in self._groups.values())
        return '\n'.join(parts) + '\n'

    def best_guess(self) -> Outcome:
        """
        Run the oracle over rules + active groups.

        The rule programs make the optimum unique. Should a solver still
        report several optimal models, the one whose winner word sorts first
        is chosen, matching what the programs' alphabetical tie-break picks.
        """
        result = self.oracle.solve(self.program())
        if result.status == INCOHERENT:
            log.debug("solver incoherent with %d active groups", self.active_count)
            return Incoherent(f"no answer set with {self.active_count} active fact groups")

        winners = []
        for model in result.models:
            found = [w for w in (parse_winner(a, self.winner) for a in model) if w is not None]
            if not found:
                raise SolverError(f"model has no {self.winner}/2 atom: {model}")
            winners.append(found[0])
        if not winners:
            raise SolverError("solver returned no model")

        best = min(winners, key=lambda s: s.word)
        log.debug("best guess %s (score %s) among %d optimal models", best.word, best.score, len(winners))
        return best
