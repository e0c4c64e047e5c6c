import pytest

from conftest import WORDS, FakeOracle
from wordle_asp import cli
from wordle_asp.errors import (EXIT_BAD_ARGS, EXIT_INCOHERENT, EXIT_MALFORMED_INPUT, EXIT_OK,
                               EXIT_SOLVER_FAILURE, EXIT_UNKNOWN_MODE)
from wordle_asp.oracle import INCOHERENT, SolverResult
from wordle_asp.words import DEFAULT_DICTIONARY, load_dictionary


class DoomedOracle:
    calls = 0

    def solve(self, program):
        return SolverResult(INCOHERENT, [])


@pytest.fixture
def wordlist(tmp_path):
    path = tmp_path / 'words.txt'
    path.write_text('\n'.join(WORDS) + '\n')
    return str(path)


@pytest.fixture
def fake_solver(monkeypatch):
    monkeypatch.setattr(cli, 'make_oracle', lambda kind, path=None: FakeOracle())


def test_full_run(wordlist, tmp_path, fake_solver, capsys):
    out = tmp_path / 'out.csv'
    status = cli.main([wordlist, 'first', 'crane', '--dictionary', wordlist,
                       '--output', str(out), '--quiet'])
    assert status == EXIT_OK

    lines = out.read_text().splitlines()
    assert [line.split(',')[0] for line in lines] == WORDS
    assert lines[0] == 'crane,1,crane,ggggg'
    assert lines[2] == 'stale,3,crane,xxgxg,slate,gygyg,stale,ggggg'
    assert 'BATCH RESULTS' in capsys.readouterr().out


def test_missing_arguments():
    with pytest.raises(SystemExit) as exc:
        cli.main(['words.txt'])
    assert exc.value.code == EXIT_BAD_ARGS


def test_unknown_mode(wordlist, capsys):
    assert cli.main([wordlist, 'entropy', 'crane']) == EXIT_UNKNOWN_MODE
    err = capsys.readouterr().err
    assert 'usage:' in err
    assert "unknown mode 'entropy'" in err


def test_bad_start_word(wordlist):
    assert cli.main([wordlist, 'first', 'cranes']) == EXIT_BAD_ARGS
    assert cli.main([wordlist, 'first', 'crane', '--max-tries', '0']) == EXIT_BAD_ARGS


def test_unreadable_word_list(tmp_path, fake_solver):
    missing = str(tmp_path / 'nope.txt')
    assert cli.main([missing, 'first', 'crane']) == EXIT_MALFORMED_INPUT


def test_incoherent_solver(wordlist, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(cli, 'make_oracle', lambda kind, path=None: DoomedOracle())
    out = tmp_path / 'out.csv'
    assert cli.main([wordlist, 'first', 'slate', '--output', str(out), '-q']) == EXIT_INCOHERENT
    assert 'INCOHERENT' in capsys.readouterr().err
    assert not out.exists()


def test_missing_solver(wordlist, tmp_path):
    args = [wordlist, 'coverage', 'crane', '--solver-path', str(tmp_path / 'no-dlv2'),
            '--output', str(tmp_path / 'out.csv'), '-q']
    assert cli.main(args) == EXIT_SOLVER_FAILURE


def _rows(args, out):
    assert cli.main(args + ['--output', str(out), '-q']) == EXIT_OK
    return {line.split(',')[0]: line for line in out.read_text().splitlines()}


def test_word_solved_the_same_alone_and_in_a_batch(wordlist, tmp_path, fake_solver):
    alone = tmp_path / 'alone.txt'
    alone.write_text('humph\n')
    single = _rows([str(alone), 'first', 'crane'], tmp_path / 'single.csv')
    batch = _rows([wordlist, 'first', 'crane'], tmp_path / 'batch.csv')
    assert len(batch) == len(WORDS)
    assert single['humph'] == batch['humph']


def test_guesses_come_from_the_dictionary(tmp_path, fake_solver):
    # the only target is 'stale', but the solver may still guess 'slate'
    targets = tmp_path / 'targets.txt'
    targets.write_text('stale\n')
    dictionary = tmp_path / 'dictionary.txt'
    dictionary.write_text('crane\nslate\nstale\n')
    rows = _rows([str(targets), 'first', 'crane', '--dictionary', str(dictionary)],
                 tmp_path / 'out.csv')
    assert rows['stale'] == 'stale,3,crane,xxgxg,slate,gygyg,stale,ggggg'


def test_target_outside_dictionary(wordlist, tmp_path, fake_solver, capsys):
    dictionary = tmp_path / 'dictionary.txt'
    dictionary.write_text('crane\nslate\n')
    args = [wordlist, 'first', 'crane', '--dictionary', str(dictionary),
            '--output', str(tmp_path / 'out.csv')]
    assert cli.main(args) == EXIT_MALFORMED_INPUT
    assert 'not in the dictionary' in capsys.readouterr().err
    assert not (tmp_path / 'out.csv').exists()


def test_packaged_dictionary():
    dictionary = load_dictionary()
    assert len(dictionary) == 2309
    assert dictionary[:3] == ['aback', 'abase', 'abate']
    assert set(WORDS) <= set(dictionary)
    assert load_dictionary(DEFAULT_DICTIONARY) == dictionary
