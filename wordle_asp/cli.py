"""
Command line entry point.

Usage:

    wordle-asp WORDLIST MODE START [--solver dlv2|clingo] [--dictionary FILE] [--output results.csv]

Guesses are drawn from the dictionary (the packaged answer list unless
--dictionary names another file), never from WORDLIST, so a word is solved the
same way whatever else is in the batch. Every WORDLIST word must be in the
dictionary.

Exit statuses: 0 ok, 2 bad arguments, 3 malformed word list or rule file,
4 unknown mode, 5 solver incoherence, 6 solver failure.
"""

import argparse
import logging
import sys
import time

from .errors import (EXIT_BAD_ARGS, EXIT_OK, EXIT_UNKNOWN_MODE, MalformedInput,
                     UnknownMode, WordleASPError)
from .oracle import ORACLES, make_oracle
from .rules import MODES, build_rules, check_mode
from .session import SolverSession
from .solver import MAX_TRIES, print_results, run_batch, summarize
from .words import check_targets, load_dictionary, load_words, normalize_word, write_results

log = logging.getLogger(__name__)

DEFAULT_OUTPUT = 'results.csv'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wordle-asp',
        description="Batch-solve Wordle words with an answer-set solver proposing each guess")
    parser.add_argument('wordlist', help="file of 5-letter words, whitespace or line separated")
    parser.add_argument('mode', help=f"scoring strategy: {', '.join(MODES)}")
    parser.add_argument('start', help="opening guess used for every word")
    parser.add_argument('--dictionary', default=None,
                        help="candidate words the solver may guess (default: packaged answer list)")
    parser.add_argument('--solver', choices=sorted(ORACLES), default='dlv2',
                        help="solver dialect (default: %(default)s)")
    parser.add_argument('--solver-path', default=None,
                        help="solver executable (default: the dialect's name on PATH)")
    parser.add_argument('--rules-dir', default=None,
                        help="directory holding the .lp rule files")
    parser.add_argument('--output', '-o', default=DEFAULT_OUTPUT,
                        help="CSV result file (default: %(default)s)")
    parser.add_argument('--max-tries', type=int, default=MAX_TRIES,
                        help="attempt budget per word (default: %(default)s)")
    parser.add_argument('--verbose', '-v', action='store_true', help="debug logging")
    parser.add_argument('--quiet', '-q', action='store_true', help="only warnings and the summary")
    return parser


def _usage_exit(parser: argparse.ArgumentParser, message: str, status: int) -> int:
    parser.print_usage(sys.stderr)
    print(f"{parser.prog}: error: {message}", file=sys.stderr)
    return status


def run(args) -> int:
    words = load_words(args.wordlist)
    dictionary = load_dictionary(args.dictionary)
    check_targets(words, dictionary)
    log.info("%d candidate words in the dictionary", len(dictionary))
    rules = build_rules(args.mode, dictionary, args.rules_dir)
    oracle = make_oracle(args.solver, args.solver_path)
    session = SolverSession(oracle, rules)

    start = time.time()
    results = run_batch(session, words, args.start, args.max_tries, verbose=not args.quiet)
    elapsed = time.time() - start

    write_results(args.output, results)
    log.info("wrote %d results to %s (%d solver calls)", len(results), args.output, oracle.calls)
    print_results(summarize(results, elapsed))
    return EXIT_OK


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    try:
        check_mode(args.mode)
    except UnknownMode as e:
        return _usage_exit(parser, str(e), EXIT_UNKNOWN_MODE)
    try:
        args.start = normalize_word(args.start)
    except MalformedInput as e:
        return _usage_exit(parser, f"bad start word: {e}", EXIT_BAD_ARGS)
    if args.max_tries < 1:
        return _usage_exit(parser, "--max-tries must be at least 1", EXIT_BAD_ARGS)

    try:
        return run(args)
    except WordleASPError as e:
        log.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return e.exit_status


if __name__ == '__main__':
    sys.exit(main())
