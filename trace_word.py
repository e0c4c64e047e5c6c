"""Trace how the solver narrows down one word."""

import argparse
import logging

import numpy as np

from wordle_asp.feedback import compute_feedback_matrix, mask_to_emoji, mask_to_int, words_to_chars
from wordle_asp.oracle import ORACLES, make_oracle
from wordle_asp.rules import build_rules
from wordle_asp.session import SolverSession
from wordle_asp.solver import EXHAUSTED, INCOHERENT, MAX_TRIES, solve_word
from wordle_asp.words import check_targets, load_dictionary, normalize_word


def trace_solve(session, words, answer, starting_word='salet', max_tries=MAX_TRIES):
    print(f"\n=== Tracing solve for: {answer} ===\n")

    chars = words_to_chars(words)
    feedback_matrix = compute_feedback_matrix(chars, chars)
    word_to_idx = {w: i for i, w in enumerate(words)}
    candidates = np.ones(len(words), dtype=np.bool_)

    result = solve_word(session, answer, starting_word, max_tries)
    session.retract_all()

    for record in result.attempts:
        pattern = mask_to_int(record.mask)
        idx = word_to_idx.get(record.guess)
        if idx is None:
            print(f"  Turn {record.attempt}: {record.guess} -> {mask_to_emoji(record.mask)} (not in word list)")
            continue
        candidates &= feedback_matrix[idx] == pattern
        n_cand = int(candidates.sum())
        print(f"  Turn {record.attempt}: {record.guess} -> {mask_to_emoji(record.mask)} ({n_cand} consistent)")
        if n_cand <= 10:
            print(f"        remaining: {[words[i] for i in np.where(candidates)[0]]}")
        if answer in word_to_idx and not candidates[word_to_idx[answer]]:
            print(f"  ERROR: {answer} not in remaining candidates!")

    if result.status == INCOHERENT:
        print(f"\n✗ Solver incoherent after {result.attempt_count} guesses")
    elif result.status == EXHAUSTED:
        print(f"\n✗ Failed to solve in {max_tries} guesses")
    else:
        print(f"\n✓ Solved in {result.attempt_count} guesses!")
    return result


def build_parser():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('answers', nargs='+')
    parser.add_argument('--words', default=None, help="dictionary file (default: packaged answer list)")
    parser.add_argument('--mode', default='frequency')
    parser.add_argument('--start', default='salet')
    parser.add_argument('--solver', choices=sorted(ORACLES), default='dlv2')
    parser.add_argument('--solver-path', default=None)
    return parser


def main(argv=None, oracle=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG)
    words = load_dictionary(args.words)
    answers = [normalize_word(w) for w in args.answers]
    check_targets(answers, words)
    session = SolverSession(oracle or make_oracle(args.solver, args.solver_path),
                            build_rules(args.mode, words))
    return [trace_solve(session, words, answer, normalize_word(args.start)) for answer in answers]


if __name__ == "__main__":
    main()
