"""
Error taxonomy
==============

Every fatal condition of a run maps to one exception class, and every class
carries the process exit status the CLI reports for it.
"""


EXIT_OK = 0
EXIT_BAD_ARGS = 2
EXIT_MALFORMED_INPUT = 3
EXIT_UNKNOWN_MODE = 4
EXIT_INCOHERENT = 5
EXIT_SOLVER_FAILURE = 6


class WordleASPError(Exception):
    """Base class for errors surfaced to the command line."""
    exit_status = 1


class MalformedInput(WordleASPError):
    """Word list or rule file unreadable, or a word of the wrong shape."""
    exit_status = EXIT_MALFORMED_INPUT


class UnknownMode(WordleASPError):
    """Requested scoring strategy is not one of the known modes."""
    exit_status = EXIT_UNKNOWN_MODE

    def __init__(self, mode: str, known=()):
        self.mode = mode
        self.known = tuple(known)
        msg = f"unknown mode '{mode}'"
        if self.known:
            msg += f" (expected one of: {', '.join(self.known)})"
        super().__init__(msg)


class IncoherentConstraints(WordleASPError):
    """
    The solver found no answer set for the active constraints.

    This points at a defect in the rule files or the fact encoding, never at
    user input, so it aborts the whole batch.
    """
    exit_status = EXIT_INCOHERENT

    def __init__(self, word: str, attempt: int, reason: str = ""):
        self.word = word
        self.attempt = attempt
        self.reason = reason
        msg = f"solver reported INCOHERENT while solving '{word}' at attempt {attempt}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class SolverError(WordleASPError):
    """Solver executable missing, crashed, or produced output we cannot read."""
    exit_status = EXIT_SOLVER_FAILURE


class UnknownHandle(WordleASPError, AssertionError):
    """Retract called with a handle the session never issued or already dropped."""

    def __init__(self, handle):
        self.handle = handle
        super().__init__(f"unknown fact group handle: {handle!r}")
