"""
Solver Oracles
==============

Drivers for external answer-set solvers. An oracle takes a complete logic
program as text, runs the solver to completion and reports the optimal
models it found:

- DLV2Oracle:   dlv2, plain text output with COST / OPTIMUM markers
- ClingoOracle: clingo, JSON output (--outf=2)

The program is piped on stdin; there is no timeout.

dlv2 prints a single optimal answer set while clingo (--opt-mode=optN)
enumerates all of them. The rule programs rank words alphabetically at the
lowest priority level, so the optimum is unique and both dialects report
the same model.
"""

import json
import logging
import re
import subprocess
import time
from typing import List, NamedTuple, Optional, Tuple

from .errors import SolverError

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

OPTIMUM = 'OPTIMUM'
SATISFIABLE = 'SATISFIABLE'
INCOHERENT = 'INCOHERENT'

WINNER_PREDICATE = 'score'

DEFAULT_EXECUTABLES = {
    'dlv2': 'dlv2',
    'clingo': 'clingo',
}

Model = Tuple[str, ...]


class SolverResult(NamedTuple):
    status: str
    models: List[Model]  # optimal models, in the order the solver returned them


# ============================================================================
# OUTPUT PARSING
# ============================================================================

def split_atoms(text: str) -> List[str]:
    """Split 'a(x,y), b, c(z)' on top-level commas."""
    atoms = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
        elif ch == ',' and depth == 0:
            atoms.append(text[start:i].strip())
            start = i + 1
    tail = text[start:].strip()
    if tail:
        atoms.append(tail)
    return [a for a in atoms if a]


_COST_RE = re.compile(r'(-?\d+)@(-?\d+)')


def _parse_cost(line: str) -> Tuple[int, ...]:
    """'COST 3@1 7@2' -> (7, 3): highest level first, like clingo's cost vectors."""
    levels = sorted(((int(lvl), int(w)) for w, lvl in _COST_RE.findall(line)), reverse=True)
    return tuple(w for _, w in levels)


def _dedupe(models: List[Model]) -> List[Model]:
    seen = set()
    unique = []
    for m in models:
        key = frozenset(m)
        if key not in seen:
            seen.add(key)
            unique.append(m)
    return unique


def parse_dlv2_output(stdout: str) -> SolverResult:
    """
    Parse DLV2 text output.

    Answer sets are printed as '{a, b(c)}' lines, each optionally followed by
    a 'COST w@l ...' line; the solver prints 'OPTIMUM' after an answer set it
    has proven optimal, and 'INCOHERENT' when there is none.
    """
    answer_sets: List[Tuple[Model, Optional[Tuple[int, ...]], bool]] = []
    incoherent = False

    for raw in stdout.splitlines():
        line = raw.strip()
        if line.startswith('{') and line.endswith('}'):
            answer_sets.append((tuple(split_atoms(line[1:-1])), None, False))
        elif line.startswith('COST') and answer_sets:
            atoms, _, optimal = answer_sets[-1]
            answer_sets[-1] = (atoms, _parse_cost(line), optimal)
        elif line == OPTIMUM and answer_sets:
            atoms, cost, _ = answer_sets[-1]
            answer_sets[-1] = (atoms, cost, True)
        elif line == INCOHERENT:
            incoherent = True

    if not answer_sets:
        if incoherent:
            return SolverResult(INCOHERENT, [])
        raise SolverError("dlv2 printed neither an answer set nor INCOHERENT")

    marked = [atoms for atoms, _, optimal in answer_sets if optimal]
    if marked:
        return SolverResult(OPTIMUM, _dedupe(marked))

    costs = [cost for _, cost, _ in answer_sets if cost is not None]
    if not costs:
        return SolverResult(SATISFIABLE, _dedupe([atoms for atoms, _, _ in answer_sets]))
    best = min(costs)
    return SolverResult(OPTIMUM, _dedupe([atoms for atoms, cost, _ in answer_sets if cost == best]))


def parse_clingo_json(stdout: str) -> SolverResult:
    """
    Parse clingo's JSON output (--outf=2).

    With --opt-mode=optN the witnesses include the improving models found on
    the way to the optimum; only those with the minimal cost vector are kept.
    """
    try:
        data = json.loads(stdout)
    except ValueError as e:
        raise SolverError(f"clingo output is not valid JSON: {e}") from e

    result = data.get('Result')
    if result == 'UNSATISFIABLE':
        return SolverResult(INCOHERENT, [])
    if result not in ('SATISFIABLE', 'OPTIMUM FOUND'):
        raise SolverError(f"clingo finished with result {result!r}")

    witnesses = []
    for call in data.get('Call', []):
        witnesses.extend(call.get('Witnesses', []))
    if not witnesses:
        raise SolverError(f"clingo reported {result} without any witness")

    if result == 'SATISFIABLE' or 'Costs' not in witnesses[0]:
        return SolverResult(SATISFIABLE, _dedupe([tuple(w.get('Value', [])) for w in witnesses]))

    best = min(tuple(w['Costs']) for w in witnesses)
    optimal = [tuple(w.get('Value', [])) for w in witnesses if tuple(w['Costs']) == best]
    return SolverResult(OPTIMUM, _dedupe(optimal))


# ============================================================================
# ORACLES
# ============================================================================

class SolverOracle:
    """Runs an external solver executable on a program passed via stdin."""

    name = 'solver'
    ok_returncodes = (0,)

    def __init__(self, executable: str = None, winner: str = WINNER_PREDICATE):
        self.executable = executable or DEFAULT_EXECUTABLES.get(self.name, self.name)
        self.winner = winner
        self.calls = 0

    def command(self) -> List[str]:
        raise NotImplementedError

    def prepare(self, program: str) -> str:
        return program

    def parse(self, stdout: str) -> SolverResult:
        raise NotImplementedError

    def solve(self, program: str) -> SolverResult:
        cmd = self.command()
        start = time.time()
        try:
            proc = subprocess.run(cmd, input=self.prepare(program), stdout=subprocess.PIPE,
                                  stderr=subprocess.PIPE, universal_newlines=True)
        except FileNotFoundError as e:
            raise SolverError(f"{self.name} executable not found: {self.executable}") from e
        except OSError as e:
            raise SolverError(f"cannot run {self.executable}: {e}") from e

        self.calls += 1
        elapsed = time.time() - start
        log.debug("%s finished in %.2fs with status %d", self.name, elapsed, proc.returncode)

        if proc.returncode not in self.ok_returncodes:
            stderr = proc.stderr.strip()
            raise SolverError(f"{self.name} exited with status {proc.returncode}: {stderr}")
        return self.parse(proc.stdout)


class DLV2Oracle(SolverOracle):
    name = 'dlv2'

    def command(self) -> List[str]:
        return [self.executable, f'--filter={self.winner}/2', '--stdin']

    def parse(self, stdout: str) -> SolverResult:
        return parse_dlv2_output(stdout)


class ClingoOracle(SolverOracle):
    name = 'clingo'
    # 10 satisfiable, 20 unsatisfiable, 30 search space exhausted with a model
    ok_returncodes = (0, 10, 20, 30)

    def command(self) -> List[str]:
        return [self.executable, '--outf=2', '--opt-mode=optN', '-n', '0']

    def prepare(self, program: str) -> str:
        return f"{program}\n#show {self.winner}/2.\n"

    def parse(self, stdout: str) -> SolverResult:
        return parse_clingo_json(stdout)


ORACLES = {
    'dlv2': DLV2Oracle,
    'clingo': ClingoOracle,
}


def make_oracle(kind: str, executable: str = None, winner: str = WINNER_PREDICATE) -> SolverOracle:
    if kind not in ORACLES:
        raise ValueError(f"unknown solver '{kind}' (expected one of: {', '.join(ORACLES)})")
    return ORACLES[kind](executable, winner)
