"""
Feedback Scoring
================

Turns a (guess, secret) pair into a clue mask: one GREEN / YELLOW / GRAY
value per guess position.

Repeated letters are handled with a per-letter yellow budget:

1. Green pass: every position where guess and secret agree is GREEN.
2. Yellow pass: for each letter, budget = occurrences in the secret minus
   its GREEN positions. Provisional-gray positions are visited left to right
   and become YELLOW while the budget for their letter lasts.

Guess "sissy" against secret "bless" scores 'yxxgx': the 's' at position 4
is green, the secret has one more 's' to spend, and the leftmost surplus
copy takes it while the copy at position 3 stays gray.
"""

import re

import numpy as np
from numba import jit, prange
from typing import List, Tuple

from .errors import MalformedInput


# ============================================================================
# CONSTANTS
# ============================================================================

GRAY = 0
YELLOW = 1
GREEN = 2

CORRECT_PATTERN = 242  # 2 + 2*3 + 2*9 + 2*27 + 2*81 = 242 (all green)
N_PATTERNS = 243  # 3^5 possible feedback patterns

ClueMask = Tuple[int, ...]

_CLUE_CHARS = 'xyg'
_CLUE_EMOJI = '⬛🟨🟩'

_LETTERS_RE = re.compile(r"[a-z]+")


# ============================================================================
# NUMBA-ACCELERATED FEEDBACK COMPUTATION
# ============================================================================

@jit(nopython=True, cache=True)
def compute_feedback(guess: np.ndarray, secret: np.ndarray) -> np.ndarray:
    """
    Compute the clue mask for a guess against a secret.

    Args:
        guess: shape (n,) array of char codes (0-25 for a-z)
        secret: shape (n,) array of char codes

    Returns:
        shape (n,) int32 array of GRAY / YELLOW / GREEN
    """
    n = guess.shape[0]
    feedback = np.zeros(n, dtype=np.int32)
    budget = np.zeros(26, dtype=np.int32)

    # Green pass; secret letters not matched in place fund the yellow budget
    for i in range(n):
        if guess[i] == secret[i]:
            feedback[i] = GREEN
        else:
            budget[secret[i]] += 1

    # Yellow pass, leftmost first
    for i in range(n):
        if feedback[i] == GRAY:
            c = guess[i]
            if budget[c] > 0:
                feedback[i] = YELLOW
                budget[c] -= 1

    return feedback


@jit(nopython=True, cache=True)
def feedback_code(guess: np.ndarray, secret: np.ndarray) -> int:
    """Base-3 pattern code (0-242) of compute_feedback."""
    feedback = compute_feedback(guess, secret)
    code = 0
    base = 1
    for i in range(feedback.shape[0]):
        code += feedback[i] * base
        base *= 3
    return code


@jit(nopython=True, parallel=True, cache=True)
def compute_feedback_matrix(guess_chars: np.ndarray, answer_chars: np.ndarray) -> np.ndarray:
    """
    Compute pattern codes for all guess/answer pairs in parallel.

    Args:
        guess_chars: shape (n_guesses, 5) array of char codes
        answer_chars: shape (n_answers, 5) array of char codes

    Returns:
        shape (n_guesses, n_answers) pattern code matrix
    """
    n_guesses = guess_chars.shape[0]
    n_answers = answer_chars.shape[0]
    result = np.zeros((n_guesses, n_answers), dtype=np.uint8)

    for i in prange(n_guesses):
        for j in range(n_answers):
            result[i, j] = feedback_code(guess_chars[i], answer_chars[j])

    return result


# ============================================================================
# STRING INTERFACE
# ============================================================================

def word_to_chars(word: str) -> np.ndarray:
    """Convert a lowercase word to a char code array."""
    return np.array([ord(c) - ord('a') for c in word], dtype=np.int32)


def words_to_chars(words: List[str]) -> np.ndarray:
    """Convert words to a (n_words, len) char code array."""
    width = len(words[0]) if words else 5
    arr = np.zeros((len(words), width), dtype=np.int32)
    for i, w in enumerate(words):
        for j, c in enumerate(w):
            arr[i, j] = ord(c) - ord('a')
    return arr


def _letters(word: str) -> str:
    """Lowercase a word and check it is plain a-z, the only range the kernels index."""
    letters = word.strip().lower()
    if not _LETTERS_RE.fullmatch(letters):
        raise MalformedInput(f"not an a-z word: {word!r}")
    return letters


def score(guess: str, secret: str) -> ClueMask:
    """Score a guess against a secret, ignoring case; both must be the same length."""
    guess = _letters(guess)
    secret = _letters(secret)
    if len(guess) != len(secret):
        raise ValueError(f"length mismatch: '{guess}' vs '{secret}'")
    feedback = compute_feedback(word_to_chars(guess), word_to_chars(secret))
    return tuple(int(v) for v in feedback)


def is_solved(mask: ClueMask) -> bool:
    return all(v == GREEN for v in mask)


def mask_to_string(mask: ClueMask) -> str:
    """'g' green, 'y' yellow, 'x' gray, e.g. (2, 1, 0, 0, 2) -> 'gyxxg'."""
    return ''.join(_CLUE_CHARS[v] for v in mask)


def string_to_mask(text: str) -> ClueMask:
    try:
        return tuple(_CLUE_CHARS.index(c) for c in text.lower())
    except ValueError:
        raise ValueError(f"invalid clue string: {text!r}") from None


def mask_to_int(mask: ClueMask) -> int:
    """Base-3 pattern code, first position least significant."""
    code = 0
    base = 1
    for v in mask:
        code += v * base
        base *= 3
    return code


def mask_to_emoji(mask: ClueMask) -> str:
    return ''.join(_CLUE_EMOJI[v] for v in mask)
