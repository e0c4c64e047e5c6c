"""
Word lists and result files
===========================

Words are plain lowercase ``str`` values of exactly WORD_LENGTH letters.
Result files hold one CSV row per solved word:

    word,attemptCount,guess1,clue1,guess2,clue2,...
"""

import csv
import os
import re
import tempfile
from typing import Iterable, List

from .errors import MalformedInput
from .feedback import mask_to_string


WORD_LENGTH = 5

_WORD_RE = re.compile(f'^[a-z]{{{WORD_LENGTH}}}$')

DEFAULT_DICTIONARY = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'answers.txt')


def normalize_word(text: str) -> str:
    """Lowercase and validate a single word, raising MalformedInput if it is not one."""
    word = text.strip().lower()
    if not _WORD_RE.match(word):
        raise MalformedInput(f"not a {WORD_LENGTH}-letter word: {text!r}")
    return word


def load_words(filepath: str) -> List[str]:
    """
    Load a whitespace or line delimited word list.

    Every token must be a WORD_LENGTH-letter alphabetic word; duplicates are
    kept so a batch can deliberately repeat a word.
    """
    try:
        with open(filepath, 'r') as f:
            lines = f.readlines()
    except OSError as e:
        raise MalformedInput(f"cannot read word list {filepath}: {e}") from e

    words = []
    for lineno, line in enumerate(lines, start=1):
        for token in line.split():
            try:
                words.append(normalize_word(token))
            except MalformedInput as e:
                raise MalformedInput(f"{filepath}:{lineno}: {e}") from e

    if not words:
        raise MalformedInput(f"word list {filepath} is empty")
    return words


def load_dictionary(filepath: str = None) -> List[str]:
    """
    Load the solver's candidate dictionary, de-duplicated in file order.

    Defaults to the packaged list of Wordle answers. The dictionary is fixed
    for a run and independent of which words are being solved.
    """
    return list(dict.fromkeys(load_words(filepath or DEFAULT_DICTIONARY)))


def check_targets(targets: Iterable[str], dictionary: Iterable[str]) -> None:
    """Every target must be a dictionary word, or the solver could never propose it."""
    known = set(dictionary)
    missing = [w for w in dict.fromkeys(targets) if w not in known]
    if missing:
        shown = ', '.join(missing[:10])
        more = f" and {len(missing) - 10} more" if len(missing) > 10 else ""
        raise MalformedInput(f"{len(missing)} word(s) not in the dictionary: {shown}{more}")


def result_row(result) -> List[str]:
    """Flatten an episode result into its CSV row."""
    row = [result.word, str(result.attempt_count)]
    for record in result.attempts:
        row.append(record.guess)
        row.append(mask_to_string(record.mask))
    return row


def write_results(filepath: str, results: Iterable) -> None:
    """
    Write one CSV row per episode result, in the given order.

    The rows go to a temporary file next to the target which is renamed into
    place once complete, so a reader never sees a partial line.
    """
    directory = os.path.dirname(os.path.abspath(filepath))
    fd, tmp_path = tempfile.mkstemp(prefix='.results-', suffix='.csv', dir=directory)
    try:
        with os.fdopen(fd, 'w', newline='') as f:
            writer = csv.writer(f, lineterminator='\n')
            for result in results:
                writer.writerow(result_row(result))
        os.replace(tmp_path, filepath)
    except BaseException:
        os.unlink(tmp_path)
        raise
