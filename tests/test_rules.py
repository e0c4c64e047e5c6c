import os
import re

import pytest

from wordle_asp.encoder import Fact
from wordle_asp.errors import MalformedInput, UnknownMode
from wordle_asp.rules import (DEFAULT_RULES_DIR, MODES, build_rules, load_rule_file, order_facts,
                              rank_facts, rarity_facts, strip_program)


def test_strip_program():
    text = """% header comment
word(a).   % trailing comment

  % indented comment
#show pick/1.
  #show score/2.
:~ pick(W), rank(W,R). [R@1, W]
"""
    assert strip_program(text) == "word(a).\n:~ pick(W), rank(W,R). [R@1, W]"


def test_shipped_rule_files_exist():
    for mode, files in MODES.items():
        for name in ('wordle.lp',) + files:
            assert os.path.isfile(os.path.join(DEFAULT_RULES_DIR, name)), (mode, name)


def test_shipped_rules_have_no_show_or_comments():
    text = load_rule_file(os.path.join(DEFAULT_RULES_DIR, 'coverage.lp'))
    assert '#show' not in text
    assert '%' not in text
    assert 'score(W,S)' in text


def test_missing_rule_file():
    with pytest.raises(MalformedInput):
        load_rule_file('/nonexistent/rules.lp')


def test_rank_facts():
    assert rank_facts(['b', 'a', 'b']) == [Fact('rank', ('b', 0)), Fact('rank', ('a', 1))]


def test_rarity_facts():
    words = ['sales', 'tales', 'bales', 'zzzzz']
    rarity = {f.args[0]: f.args[1] for f in rarity_facts(words)}
    assert min(rarity.values()) == 0
    assert rarity['zzzzz'] == max(rarity.values())
    assert rarity['sales'] < rarity['zzzzz']
    assert all(isinstance(c, int) and c >= 0 for c in rarity.values())


def test_build_rules(words):
    programs = build_rules('first', words)
    assert len(programs) == 4
    assert 'candidate(W)' in programs[0]
    assert ':~ pick(W), rank(W,R).' in programs[1]
    assert 'word(crane).' in programs[2]
    assert 'order(awake,0).' in programs[2]
    assert 'rank(crane,0).' in programs[3]

    assert len(build_rules('coverage', words)) == 3
    assert 'rarity(' in build_rules('frequency', words)[3]


def test_unknown_mode(words):
    with pytest.raises(UnknownMode) as exc:
        build_rules('entropy', words)
    assert 'first' in str(exc.value)


def test_order_facts():
    assert order_facts(['slate', 'crane', 'slate']) == [Fact('order', ('crane', 0)),
                                                         Fact('order', ('slate', 1))]


_LEVEL_RE = re.compile(r'@(\d+)')


@pytest.mark.parametrize('mode', sorted(MODES))
def test_alphabetical_order_breaks_ties_last(mode):
    # the order constraint sits below every mode level, so each mode has one optimum
    programs = build_rules(mode, ['crane', 'slate'])
    core_levels = [int(l) for l in _LEVEL_RE.findall(programs[0])]
    mode_levels = [int(l) for p in programs[1:1 + len(MODES[mode])] for l in _LEVEL_RE.findall(p)]
    assert core_levels == [1]
    assert mode_levels
    assert min(mode_levels) > 1
