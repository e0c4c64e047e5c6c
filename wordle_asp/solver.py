"""
Guess Loop and Batch Runner
===========================

solve_word() plays one word against a SolverSession:

    opening guess -> score -> encode -> submit -> best_guess() -> score -> ...

until the guess matches, the attempt budget runs out, or the solver reports
the accumulated clues incoherent.

run_batch() plays a list of words through one session, dropping every fact
group a word submitted before the next word starts, so only the constant
rules carry over.
"""

import logging
import time
from collections import Counter
from typing import Dict, List, NamedTuple

import numpy as np

from .encoder import encode
from .errors import IncoherentConstraints
from .feedback import ClueMask, is_solved, mask_to_emoji, score
from .session import Incoherent, SolverSession

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

MAX_TRIES = 6

MATCHED = 'matched'
EXHAUSTED = 'exhausted'
INCOHERENT = 'incoherent'


class AttemptRecord(NamedTuple):
    attempt: int
    guess: str
    mask: ClueMask


class EpisodeResult(NamedTuple):
    word: str
    status: str
    attempts: List[AttemptRecord]

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    @property
    def solved(self) -> bool:
        return self.status == MATCHED


# ============================================================================
# ONE WORD
# ============================================================================

def solve_word(session: SolverSession, secret: str, opening: str,
               max_tries: int = MAX_TRIES, verbose: bool = False) -> EpisodeResult:
    """
    Solve one word.

    Args:
        session: solver session; expected to hold no fact groups on entry
        secret: the target word
        opening: fixed first guess
        max_tries: attempt budget, opening guess included
        verbose: print each attempt

    Returns:
        EpisodeResult with status MATCHED, EXHAUSTED or INCOHERENT and every
        attempt played. Fact groups submitted here are left in the session.
    """
    if max_tries < 1:
        raise ValueError(f"max_tries must be at least 1, got {max_tries}")

    attempts: List[AttemptRecord] = []
    guess = opening

    for attempt in range(1, max_tries + 1):
        if attempt > 1:
            outcome = session.best_guess()
            if isinstance(outcome, Incoherent):
                log.error("incoherent constraints for '%s' at attempt %d", secret, attempt)
                return EpisodeResult(secret, INCOHERENT, attempts)
            guess = outcome.word

        mask = score(guess, secret)
        attempts.append(AttemptRecord(attempt, guess, mask))
        if verbose:
            print(f"  Turn {attempt}: {guess} -> {mask_to_emoji(mask)}")

        if is_solved(mask):
            return EpisodeResult(secret, MATCHED, attempts)

        session.submit(encode(guess, mask, attempt))

    return EpisodeResult(secret, EXHAUSTED, attempts)


# ============================================================================
# BATCH
# ============================================================================

def run_batch(session: SolverSession, words: List[str], opening: str,
              max_tries: int = MAX_TRIES, verbose: bool = True) -> List[EpisodeResult]:
    """
    Solve every word in order with one session.

    Raises:
        IncoherentConstraints: as soon as any word's episode hits an
            incoherent solver state; the batch stops there.
        RuntimeError: if the session already holds fact groups when a word
            starts.
    """
    results = []
    start = time.time()
    log.info("solving %d words, opening with '%s'", len(words), opening)

    for i, word in enumerate(words):
        if verbose and i % 100 == 0:
            elapsed = time.time() - start
            rate = i / elapsed if elapsed > 0 else 0
            print(f"[{i}/{len(words)}] {rate:.1f} w/s")

        if session.active_count:
            raise RuntimeError(f"{session.active_count} fact groups active before '{word}' - session not clean")
        try:
            result = solve_word(session, word, opening, max_tries)
        finally:
            session.retract_all()

        if result.status == INCOHERENT:
            raise IncoherentConstraints(word, result.attempt_count + 1)

        log.debug("%s: %s in %d", word, result.status, result.attempt_count)
        results.append(result)

    log.info("finished %d words in %.1fs", len(results), time.time() - start)
    return results


# ============================================================================
# REPORTING
# ============================================================================

def summarize(results: List[EpisodeResult], elapsed: float = None) -> Dict:
    """Aggregate batch results into the numbers print_results() shows."""
    counts = np.array([r.attempt_count for r in results], dtype=np.int32)
    failed = [r.word for r in results if not r.solved]
    dist = Counter(r.attempt_count for r in results if r.solved)

    summary = {
        'total': len(results),
        'average': float(counts.mean()) if len(counts) else 0.0,
        'distribution': dict(sorted(dist.items())),
        'failures': len(failed),
        'failed_words': failed[:20],
    }
    if elapsed is not None:
        summary['time'] = elapsed
        summary['rate'] = len(results) / elapsed if elapsed > 0 else 0.0
    return summary


def print_results(summary: Dict):
    """Pretty print batch results."""
    total = summary['total']
    print("\n" + "=" * 50)
    print("BATCH RESULTS")
    print("=" * 50)
    print(f"Words solved: {total}")
    print(f"Average attempts: {summary['average']:.4f}")
    if total:
        print(f"Failures: {summary['failures']} ({100 * summary['failures'] / total:.2f}%)")
    if 'time' in summary:
        print(f"Time: {summary['time']:.1f}s ({summary['rate']:.1f} words/sec)")
    print("\nDistribution:")
    for n, count in summary['distribution'].items():
        pct = 100 * count / total
        bar = "█" * int(pct / 2)
        print(f"  {n}: {count:5d} ({pct:5.2f}%) {bar}")
    if summary['failed_words']:
        print(f"\nFailed words: {summary['failed_words']}")
    print("=" * 50)
