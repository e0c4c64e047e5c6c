"""
Constraint Encoding
===================

Translates one scored guess into ground ASP facts. Positions are 1-based.

    green(L,P).       L is confirmed at position P
    yellow(L,P,A).    L is in the secret but not at P, learned at attempt A
    excluded(L,P).    L is not at P (gray, but L is colored elsewhere in the guess)
    absent(L).        L does not occur in the secret at all
    attempt(A).       attempt A has been played

A gray letter is only declared absent when no other copy of it in the same
guess came back green or yellow; otherwise absent(L) would also forbid the
copy the secret really contains.
"""

from typing import FrozenSet, Iterable, List, NamedTuple, Tuple

from .feedback import GRAY, GREEN, YELLOW, ClueMask


class Fact(NamedTuple):
    predicate: str
    args: Tuple

    def to_asp(self) -> str:
        if not self.args:
            return f"{self.predicate}."
        return f"{self.predicate}({','.join(str(a) for a in self.args)})."

    def __str__(self):
        return self.to_asp()


def encode(guess: str, mask: ClueMask, attempt: int) -> FrozenSet[Fact]:
    """
    Encode the clue mask of one attempt as a fact group.

    Args:
        guess: the guessed word
        mask: clue mask for the guess
        attempt: 1-based attempt number within the current word

    Returns:
        frozenset of Facts
    """
    if len(guess) != len(mask):
        raise ValueError(f"mask length {len(mask)} does not match '{guess}'")

    colored = {guess[i] for i, v in enumerate(mask) if v != GRAY}

    facts = {Fact('attempt', (attempt,))}
    for i, (letter, clue) in enumerate(zip(guess, mask)):
        pos = i + 1
        if clue == GREEN:
            facts.add(Fact('green', (letter, pos)))
        elif clue == YELLOW:
            facts.add(Fact('yellow', (letter, pos, attempt)))
        elif letter in colored:
            facts.add(Fact('excluded', (letter, pos)))
        else:
            facts.add(Fact('absent', (letter,)))
    return frozenset(facts)


def decode(guess: str, facts: Iterable[Fact]) -> ClueMask:
    """Recover the clue mask of `guess` from the facts encode() produced for it."""
    greens = set()
    yellows = set()
    for fact in facts:
        if fact.predicate == 'green':
            greens.add(fact.args)
        elif fact.predicate == 'yellow':
            yellows.add(fact.args[:2])

    mask = []
    for i, letter in enumerate(guess):
        key = (letter, i + 1)
        if key in greens:
            mask.append(GREEN)
        elif key in yellows:
            mask.append(YELLOW)
        else:
            mask.append(GRAY)
    return tuple(mask)


def render(facts: Iterable[Fact]) -> str:
    """One fact per line, sorted so equal groups render identically."""
    return '\n'.join(sorted(f.to_asp() for f in facts))


def word_facts(words: Iterable[str]) -> List[Fact]:
    """The word EDB: word(W) plus at(W,P,L) for every letter."""
    facts = []
    for w in dict.fromkeys(words):
        facts.append(Fact('word', (w,)))
        for i, letter in enumerate(w):
            facts.append(Fact('at', (w, i + 1, letter)))
    return facts
