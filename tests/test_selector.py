import pytest

from config import SolverConfig
from errors import InvalidInput
from lexicon import FrequencyModel, build_dictionary
from selector import GuessSelector, best_guess, rank_guesses

COUNTS = {"apple": 100, "angle": 50, "ankle": 10, "ample": 5}
WORDS = sorted(COUNTS)


@pytest.fixture
def weights():
    return FrequencyModel(build_dictionary(COUNTS)).distribution(WORDS)


def test_best_first_guess(weights):
    # angle and ankle tie on entropy; angle is the more common word
    assert best_guess(WORDS, WORDS, weights) == "angle"


def test_ranking_order(weights):
    ranked = rank_guesses(WORDS, WORDS, weights)
    assert [w for w, _ in ranked] == ["angle", "ankle", "apple", "ample"]
    assert ranked[0][1] == ranked[1][1] > ranked[2][1] == ranked[3][1]
    assert rank_guesses(WORDS, WORDS, weights, top=2) == ranked[:2]


def test_informative_non_candidate_wins():
    candidates = ["bat", "cat", "hat", "mat"]
    uniform = {w: 0.25 for w in candidates}
    universe = candidates + ["cab"]
    assert best_guess(universe, candidates, uniform) == "cab"


def test_candidate_preferred_over_equal_non_candidate():
    candidates = ["bat", "cat"]
    weights = {"bat": 0.5, "cat": 0.5}
    # "bcz" splits them as well as either candidate but can never be the answer
    assert best_guess(["bcz", "cat", "bat"], candidates, weights) == "bat"


def test_lexicographic_last_resort():
    candidates = ["bat", "cat"]
    weights = {"bat": 0.5, "cat": 0.5}
    assert best_guess(["cat", "bat"], candidates, weights) == "bat"


def test_single_candidate_is_returned():
    assert best_guess(WORDS, ["ankle"], {"ankle": 1.0}) == "ankle"


def test_best_guess_rejects_empty_inputs(weights):
    with pytest.raises(InvalidInput):
        best_guess([], WORDS, weights)
    with pytest.raises(InvalidInput):
        best_guess(WORDS, [], weights)
    with pytest.raises(InvalidInput):
        GuessSelector([])


def test_parallel_matches_serial(weights):
    serial = GuessSelector(WORDS, SolverConfig(max_workers=1))
    parallel = GuessSelector(WORDS, SolverConfig(max_workers=2, parallel_threshold=1))
    assert not serial._parallel(WORDS)
    assert parallel._parallel(WORDS)
    assert parallel.rank(WORDS, weights) == serial.rank(WORDS, weights)
    assert parallel.best_guess(WORDS, weights) == "angle"


def test_serial_rank_fills_pattern_cache(weights):
    selector = GuessSelector(WORDS, SolverConfig(max_workers=1))
    selector.rank(WORDS, weights)
    assert len(selector.cache) == 16
    selector.rank(WORDS, weights)
    assert selector.cache.hits == 16


def test_opening_guess_is_memoised(weights):
    selector = GuessSelector(WORDS, SolverConfig(max_workers=1), fingerprint="v1")
    assert selector.best_guess(WORDS, weights, opening=True) == "angle"
    key = ("v1", frozenset(WORDS), "frequency")
    assert selector.memo == {key: "angle"}
    selector.memo[key] = "ample"
    assert selector.best_guess(WORDS, weights, opening=True) == "ample"
    # later rounds never read the memo
    assert selector.best_guess(WORDS, weights) == "angle"


def test_memo_can_be_disabled(weights):
    selector = GuessSelector(WORDS, SolverConfig(memoize_opener=False, max_workers=1))
    selector.best_guess(WORDS, weights, opening=True)
    assert selector.memo == {}


def test_config_validation():
    for bad in [
        dict(word_length=0),
        dict(max_rounds=0),
        dict(weighting="zipf"),
        dict(floor_count=0),
        dict(max_workers=0),
        dict(parallel_threshold=0),
    ]:
        with pytest.raises(InvalidInput):
            SolverConfig(**bad)
