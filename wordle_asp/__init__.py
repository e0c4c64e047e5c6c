"""
Wordle ASP - Batch Wordle Solving with an Answer-Set Solver
===========================================================

Each guess is scored against the target, the clue is encoded as logic facts,
and an external ASP solver (DLV2 or clingo) proposes the next guess.
"""

__version__ = "1.0.0"

from .feedback import GRAY, YELLOW, GREEN, score, mask_to_string
from .encoder import Fact, encode, decode
from .session import SolverSession, Solved, Incoherent
from .solver import MAX_TRIES, solve_word, run_batch, summarize, print_results
