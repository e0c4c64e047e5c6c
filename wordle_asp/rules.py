"""
Rule Programs
=============

Static logic-program files and the scoring modes built from them.

Every mode loads the shared core (wordle.lp) plus its own strategy file, and
the driver adds the word EDB and any per-mode weight facts. The result is
constant for a whole batch: it is built once and handed to the session.
"""

import os
from typing import Callable, Dict, List, Tuple

import numpy as np

from .encoder import Fact, render, word_facts
from .errors import MalformedInput, UnknownMode
from .feedback import words_to_chars


DEFAULT_RULES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'programs')

CORE_PROGRAM = 'wordle.lp'

MODES: Dict[str, Tuple[str, ...]] = {
    'first': ('first.lp',),
    'frequency': ('frequency.lp',),
    'coverage': ('coverage.lp',),
}


# ============================================================================
# LOADING
# ============================================================================

def strip_program(text: str) -> str:
    """
    Drop comment lines, trailing '%' comments and #show directives.

    Output filtering is the oracle's business, so display directives in the
    rule files are removed before submission.
    """
    kept = []
    for line in text.splitlines():
        code = line.split('%', 1)[0].rstrip()
        if not code.strip():
            continue
        if code.lstrip().startswith('#show'):
            continue
        kept.append(code)
    return '\n'.join(kept)


def load_rule_file(filepath: str) -> str:
    try:
        with open(filepath, 'r') as f:
            return strip_program(f.read())
    except OSError as e:
        raise MalformedInput(f"cannot read rule file {filepath}: {e}") from e


def check_mode(mode: str) -> None:
    if mode not in MODES:
        raise UnknownMode(mode, MODES)


# ============================================================================
# PER-MODE WEIGHTS
# ============================================================================

def rank_facts(words: List[str]) -> List[Fact]:
    """rank(W,R): R is the index of W's first occurrence in the list."""
    return [Fact('rank', (w, r)) for r, w in enumerate(dict.fromkeys(words))]


def rarity_facts(words: List[str]) -> List[Fact]:
    """
    rarity(W,C): how far W is from the most letter-frequent word of the list.

    A word's frequency score sums, over its positions, how many listed words
    share that letter at that position, plus the overall count of each of its
    distinct letters. C = best score - score, so 0 is the most common word.
    """
    unique = list(dict.fromkeys(words))
    chars = words_to_chars(unique)
    n_words, width = chars.shape

    positional = np.zeros((width, 26), dtype=np.int64)
    for p in range(width):
        positional[p] = np.bincount(chars[:, p], minlength=26)
    overall = positional.sum(axis=0)

    scores = np.zeros(n_words, dtype=np.int64)
    for i in range(n_words):
        scores[i] = positional[np.arange(width), chars[i]].sum() + overall[np.unique(chars[i])].sum()

    rarity = scores.max() - scores
    return [Fact('rarity', (w, int(c))) for w, c in zip(unique, rarity)]


def order_facts(words: List[str]) -> List[Fact]:
    """order(W,I): I is W's position in alphabetical order."""
    return [Fact('order', (w, i)) for i, w in enumerate(sorted(set(words)))]


_MODE_FACTS: Dict[str, Callable[[List[str]], List[Fact]]] = {
    'first': rank_facts,
    'frequency': rarity_facts,
}


def build_rules(mode: str, words: List[str], rules_dir: str = None) -> List[str]:
    """
    Assemble the constant program texts for a batch.

    Returns:
        [core rules, mode rules..., word EDB with order facts, mode weight facts (if any)]
    """
    check_mode(mode)
    rules_dir = rules_dir or DEFAULT_RULES_DIR

    programs = [load_rule_file(os.path.join(rules_dir, CORE_PROGRAM))]
    for name in MODES[mode]:
        programs.append(load_rule_file(os.path.join(rules_dir, name)))

    programs.append(render(word_facts(words) + order_facts(words)))
    if mode in _MODE_FACTS:
        programs.append(render(_MODE_FACTS[mode](words)))
    return programs
