import math
import pickle

import pytest

from errors import InvalidInput
from lexicon import (
    DEFAULT_DICTIONARY,
    FrequencyModel,
    build_dictionary,
    load_dictionary,
    load_word_list,
)

COUNTS = {"apple": 100, "angle": 50, "ankle": 10, "ample": 5}


def test_build_dictionary_from_mapping_and_pairs():
    d1 = build_dictionary(COUNTS)
    d2 = build_dictionary(list(COUNTS.items()))
    assert d1.words == ("ample", "angle", "ankle", "apple")
    assert d1.word_length == 5
    assert d1.counts == d2.counts
    assert d1.fingerprint == d2.fingerprint
    assert "angle" in d1 and "zebra" not in d1
    assert len(d1) == 4


def test_build_dictionary_normalises_and_keeps_first_duplicate():
    d = build_dictionary([("Apple", 3), ("apple", 9), ("zesty", None)])
    assert d.count("apple") == 3
    assert d.count("zesty") == 0
    assert d.count("nope!") == 0


@pytest.mark.parametrize(
    "entries",
    [
        {},
        [("apple", 1), ("pear", 1)],
        [("app1e", 1)],
        [("apple", -1)],
        [("apple", 1.5)],
        [("apple", "7")],
    ],
)
def test_build_dictionary_rejects(entries):
    with pytest.raises(InvalidInput):
        build_dictionary(entries)


def test_build_dictionary_expected_length():
    with pytest.raises(InvalidInput):
        build_dictionary(COUNTS, word_length=6)


def test_dictionary_counts_are_read_only():
    d = build_dictionary(COUNTS)
    with pytest.raises(TypeError):
        d.counts["apple"] = 1
    with pytest.raises(TypeError):
        d.counts["zebra"] = 1
    assert d.count("apple") == 100 and "zebra" not in d
    assert pickle.loads(pickle.dumps(d)) == d


def test_fingerprint_tracks_content():
    a = build_dictionary(COUNTS)
    b = build_dictionary({**COUNTS, "apple": 101})
    assert a.fingerprint != b.fingerprint


def test_frequency_distribution_is_proportional():
    model = FrequencyModel(build_dictionary(COUNTS))
    probs = model.distribution(["apple", "angle", "ankle", "ample"])
    assert math.isclose(sum(probs.values()), 1.0)
    assert math.isclose(probs["apple"], 100 / 165)
    assert math.isclose(probs["ample"], 5 / 165)


def test_distribution_renormalises_over_candidates():
    model = FrequencyModel(build_dictionary(COUNTS))
    probs = model.distribution(["apple", "ample"])
    assert set(probs) == {"apple", "ample"}
    assert math.isclose(probs["apple"], 100 / 105)
    assert model.weight("angle", ["apple", "ample"]) == 0.0
    assert model.distribution([]) == {}


def test_weight_matches_distribution():
    model = FrequencyModel(build_dictionary(COUNTS))
    words = ["apple", "angle", "ankle", "ample"]
    probs = model.distribution(words)
    total = model.total_weight(words)
    assert total == pytest.approx(165)
    for w in words:
        assert model.weight(w, words) == pytest.approx(probs[w])
        assert model.weight(w, words, total=total) == pytest.approx(probs[w])
    assert model.weight("zebra", words, total=total) == 0.0


def test_zero_and_missing_counts_get_the_floor():
    d = build_dictionary({"apple": 10, "zesty": 0})
    model = FrequencyModel(d, floor_count=0.5)
    probs = model.distribution(["apple", "zesty"])
    assert 0 < probs["zesty"] < probs["apple"]
    assert math.isclose(probs["zesty"], 0.5 / 10.5)
    assert model.raw_weight("xxxxx") == 0.5
    assert all(0 < p <= 1 for p in probs.values())


def test_uniform_mode():
    model = FrequencyModel(build_dictionary(COUNTS), mode="uniform")
    probs = model.distribution(COUNTS)
    assert all(math.isclose(p, 0.25) for p in probs.values())


def test_sigmoid_mode_keeps_order_and_compresses():
    model = FrequencyModel(build_dictionary(COUNTS), mode="sigmoid")
    probs = model.distribution(list(COUNTS))
    assert probs["apple"] > probs["angle"] > probs["ankle"] > probs["ample"] > 0
    assert probs["apple"] / probs["ample"] < 100 / 5
    assert math.isclose(sum(probs.values()), 1.0)
    assert 0 < model.raw_weight("xxxxx") < model.raw_weight("ample")


def test_model_rejects_bad_settings():
    d = build_dictionary(COUNTS)
    with pytest.raises(InvalidInput):
        FrequencyModel(d, mode="zipf")
    with pytest.raises(InvalidInput):
        FrequencyModel(d, floor_count=0)


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def test_load_word_count_lines(tmp_path):
    p = tmp_path / "dict.txt"
    p.write_text("# comment\napple 100\nangle 50\npear 7\nCafés 3\nzesty\n", encoding="utf-8")
    d = load_dictionary(p)
    assert d.counts == {"apple": 100, "angle": 50, "cafes": 3, "zesty": 0}


def test_load_csv(tmp_path):
    p = tmp_path / "dict.csv"
    p.write_text("word,count\napple,100\nangle,50\nkiwi,3\n", encoding="utf-8")
    d = load_dictionary(p)
    assert d.counts == {"apple": 100, "angle": 50}


def test_load_bad_count(tmp_path):
    p = tmp_path / "dict.txt"
    p.write_text("apple lots\n", encoding="utf-8")
    with pytest.raises(InvalidInput):
        load_dictionary(p)


def test_load_missing_or_empty(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dictionary(tmp_path / "nope.txt")
    p = tmp_path / "short.txt"
    p.write_text("pear 1\n", encoding="utf-8")
    with pytest.raises(InvalidInput):
        load_dictionary(p)


def test_load_word_list(tmp_path):
    p = tmp_path / "answers.txt"
    p.write_text("apple\nangle 3\n", encoding="utf-8")
    assert load_word_list(p) == ["apple", "angle"]


def test_bundled_dictionary():
    d = load_dictionary()
    assert DEFAULT_DICTIONARY.exists()
    assert d.word_length == 5
    assert len(d) > 50
    assert d.count("zesty") == 0
