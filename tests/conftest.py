import re

import pytest

from wordle_asp.oracle import INCOHERENT, OPTIMUM, SolverResult

_FACT_RE = re.compile(r'^(\w+)\(([^()]*)\)\.$')


def parse_facts(program):
    facts = {}
    for line in program.splitlines():
        m = _FACT_RE.match(line.strip())
        if m:
            args = tuple(int(a) if a.lstrip('-').isdigit() else a for a in m.group(2).split(','))
            facts.setdefault(m.group(1), []).append(args)
    return facts


def consistent(word, facts):
    for letter, pos in facts.get('green', []):
        if word[pos - 1] != letter:
            return False
    for letter, pos, _ in facts.get('yellow', []):
        if word[pos - 1] == letter or letter not in word:
            return False
    for letter, pos in facts.get('excluded', []):
        if word[pos - 1] == letter:
            return False
    for (letter,) in facts.get('absent', []):
        if letter in word:
            return False
    return True


class FakeOracle:
    """
    In-process stand-in for the solver: reads the facts back out of the
    program text and picks the consistent word with the lowest rank
    (alphabetical when there are no rank facts).
    """

    def __init__(self, ties=1):
        self.ties = ties
        self.programs = []
        self.calls = 0

    def solve(self, program):
        self.calls += 1
        self.programs.append(program)
        facts = parse_facts(program)
        words = [w for (w,) in facts.get('word', [])]
        rank = {w: r for w, r in facts.get('rank', [])}
        candidates = sorted((w for w in words if consistent(w, facts)),
                            key=lambda w: (rank.get(w, 0), w))
        if not candidates:
            return SolverResult(INCOHERENT, [])
        # optimal models listed best-last, to check the session's own tie-break
        best = candidates[:self.ties]
        return SolverResult(OPTIMUM, [(f"score({w},{rank.get(w, 0)})",) for w in reversed(best)])


WORDS = ['crane', 'slate', 'stale', 'steal', 'least', 'cigar', 'rebut', 'sissy',
         'humph', 'awake', 'blush', 'focal', 'evade', 'naval', 'serve']


@pytest.fixture
def words():
    return list(WORDS)


@pytest.fixture
def oracle():
    return FakeOracle()
