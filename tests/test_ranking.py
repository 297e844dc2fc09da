import pytest

from darkvision.exceptions import ConfigurationError
from darkvision.services.ranking import RankedFilter, ThresholdConfig, rank_occurrences


def _score(value: float) -> float:
    return value


def _rank(groups: dict[str, list[float]], **thresholds) -> list[tuple[str, float]]:
    entries = rank_occurrences(groups, _score, ThresholdConfig(**thresholds))
    return [(e.key, e.occurrence) for e in entries]


SCORES = {
    "alice": [0.9, 0.6, 0.95],
    "bob": [0.5, 0.55, 0.99, 0.86],
    "carol": [0.88, 0.87],
    "dave": [0.99],
    "erin": [0.7, 0.71, 0.72, 0.73, 0.74],
}


# ------------------------------------------------------------------ #
#  Threshold validation
# ------------------------------------------------------------------ #


class TestThresholdConfig:
    def test_zero_minimum_occurrence_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ThresholdConfig(minimum_occurrence=0, minimum_score=0.5, minimum_score_occurrence=1)
        assert exc_info.value.field == "minimum_occurrence"

    def test_zero_minimum_score_occurrence_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ThresholdConfig(minimum_occurrence=1, minimum_score=0.5, minimum_score_occurrence=0)
        assert exc_info.value.field == "minimum_score_occurrence"

    def test_score_occurrence_above_occurrence_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ThresholdConfig(minimum_occurrence=2, minimum_score=0.5, minimum_score_occurrence=3)
        assert exc_info.value.field == "minimum_score_occurrence"

    def test_negative_cap_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ThresholdConfig(
                minimum_occurrence=1,
                minimum_score=0.5,
                minimum_score_occurrence=1,
                maximum_occurrence_count=-1,
            )
        assert exc_info.value.field == "maximum_occurrence_count"

    def test_valid_config_accepted(self):
        config = ThresholdConfig(
            minimum_occurrence=3, minimum_score=0.85, minimum_score_occurrence=2
        )
        assert config.maximum_occurrence_count is None


# ------------------------------------------------------------------ #
#  Documented scenarios
# ------------------------------------------------------------------ #


class TestScenarios:
    def test_kept_with_enough_convincing_occurrences(self):
        result = _rank(
            {"alice": [0.9, 0.6, 0.95]},
            minimum_occurrence=2,
            minimum_score=0.85,
            minimum_score_occurrence=2,
        )
        assert result == [("alice", 0.95)]

    def test_dropped_without_enough_convincing_occurrences(self):
        # minimum_score_occurrence may not exceed minimum_occurrence, so both are 3:
        # alice is seen 3 times but only twice above 0.85
        result = _rank(
            {"alice": [0.9, 0.6, 0.95]},
            minimum_occurrence=3,
            minimum_score=0.85,
            minimum_score_occurrence=3,
        )
        assert result == []

    def test_sorted_then_truncated(self):
        result = _rank(
            {"a": [0.9, 0.9, 0.9], "b": [0.99, 0.99]},
            minimum_occurrence=2,
            minimum_score=0.5,
            minimum_score_occurrence=1,
            maximum_occurrence_count=1,
        )
        assert result == [("b", 0.99)]

    def test_empty_groups(self):
        result = _rank({}, minimum_occurrence=1, minimum_score=0.5, minimum_score_occurrence=1)
        assert result == []

    def test_zero_minimum_occurrence_fails_before_processing(self):
        calls: list[float] = []

        def score(value: float) -> float:
            calls.append(value)
            return value

        with pytest.raises(ConfigurationError):
            rank_occurrences(
                {"a": [0.9]},
                score,
                ThresholdConfig(minimum_occurrence=0, minimum_score=0.5, minimum_score_occurrence=1),
            )
        assert calls == []


# ------------------------------------------------------------------ #
#  Filtering and ranking
# ------------------------------------------------------------------ #


class TestRankedFilter:
    def test_rare_but_confident_dropped(self):
        result = _rank(
            {"dave": [0.99], "alice": [0.9, 0.6, 0.95]},
            minimum_occurrence=2,
            minimum_score=0.5,
            minimum_score_occurrence=1,
        )
        assert [key for key, _ in result] == ["alice"]

    def test_frequent_but_unconvincing_dropped(self):
        result = _rank(
            {"erin": [0.7, 0.71, 0.72, 0.73, 0.74]},
            minimum_occurrence=3,
            minimum_score=0.85,
            minimum_score_occurrence=1,
        )
        assert result == []

    def test_score_equal_to_minimum_counts(self):
        result = _rank(
            {"a": [0.85, 0.85]},
            minimum_occurrence=2,
            minimum_score=0.85,
            minimum_score_occurrence=2,
        )
        assert result == [("a", 0.85)]

    def test_sorted_by_best_score_descending(self):
        result = _rank(
            SCORES,
            minimum_occurrence=1,
            minimum_score=0.0,
            minimum_score_occurrence=1,
        )
        assert result == [
            ("bob", 0.99),
            ("dave", 0.99),
            ("alice", 0.95),
            ("carol", 0.88),
            ("erin", 0.74),
        ]

    def test_equal_scores_keep_first_encounter_order(self):
        groups = {"z": [0.8], "a": [0.8], "m": [0.8]}
        result = _rank(groups, minimum_occurrence=1, minimum_score=0.5, minimum_score_occurrence=1)
        assert [key for key, _ in result] == ["z", "a", "m"]

    def test_best_occurrence_tie_goes_to_first_in_group(self):
        first = {"score": 0.9, "frame": "f1"}
        second = {"score": 0.9, "frame": "f2"}
        entries = rank_occurrences(
            {"alice": [first, second]},
            lambda o: o["score"],
            ThresholdConfig(minimum_occurrence=1, minimum_score=0.5, minimum_score_occurrence=1),
        )
        assert entries[0].occurrence is first

    def test_cap_of_zero_returns_nothing(self):
        result = _rank(
            SCORES,
            minimum_occurrence=1,
            minimum_score=0.0,
            minimum_score_occurrence=1,
            maximum_occurrence_count=0,
        )
        assert result == []

    def test_cap_larger_than_result_keeps_all(self):
        result = _rank(
            {"a": [0.9], "b": [0.8]},
            minimum_occurrence=1,
            minimum_score=0.5,
            minimum_score_occurrence=1,
            maximum_occurrence_count=10,
        )
        assert [key for key, _ in result] == ["a", "b"]

    def test_input_groups_not_mutated(self):
        groups = {"alice": [0.9, 0.6, 0.95], "dave": [0.99]}
        snapshot = {k: list(v) for k, v in groups.items()}
        _rank(groups, minimum_occurrence=2, minimum_score=0.85, minimum_score_occurrence=2)
        assert groups == snapshot

    def test_filter_instance_is_reusable(self):
        ranked = RankedFilter(
            ThresholdConfig(minimum_occurrence=2, minimum_score=0.85, minimum_score_occurrence=1),
            _score,
        )
        first = ranked.apply(SCORES)
        second = ranked.apply(SCORES)
        assert first == second
        assert [e.key for e in first] == ["bob", "alice", "carol"]


# ------------------------------------------------------------------ #
#  Properties
# ------------------------------------------------------------------ #


class TestProperties:
    @pytest.mark.parametrize("minimum_score", [0.0, 0.5, 0.8, 0.9, 0.99])
    def test_raising_minimum_occurrence_never_adds_keys(self, minimum_score: float):
        previous: set[str] | None = None
        for minimum_occurrence in range(1, 7):
            kept = {
                key for key, _ in _rank(
                    SCORES,
                    minimum_occurrence=minimum_occurrence,
                    minimum_score=minimum_score,
                    minimum_score_occurrence=1,
                )
            }
            if previous is not None:
                assert kept <= previous
            previous = kept

    @pytest.mark.parametrize("minimum_occurrence", [1, 2, 3])
    def test_raising_minimum_score_never_adds_keys(self, minimum_occurrence: int):
        previous: set[str] | None = None
        for minimum_score in [0.0, 0.6, 0.7, 0.8, 0.86, 0.9, 0.95, 0.99, 1.0]:
            kept = {
                key for key, _ in _rank(
                    SCORES,
                    minimum_occurrence=minimum_occurrence,
                    minimum_score=minimum_score,
                    minimum_score_occurrence=1,
                )
            }
            if previous is not None:
                assert kept <= previous
            previous = kept

    def test_retained_occurrence_is_group_maximum(self):
        result = _rank(SCORES, minimum_occurrence=1, minimum_score=0.0, minimum_score_occurrence=1)
        assert len({key for key, _ in result}) == len(result)
        for key, retained in result:
            assert retained == max(SCORES[key])

    @pytest.mark.parametrize("cap", [0, 1, 2, 3, 4, 5, 6])
    def test_truncation_keeps_top_n(self, cap: int):
        uncapped = _rank(SCORES, minimum_occurrence=1, minimum_score=0.0, minimum_score_occurrence=1)
        capped = _rank(
            SCORES,
            minimum_occurrence=1,
            minimum_score=0.0,
            minimum_score_occurrence=1,
            maximum_occurrence_count=cap,
        )
        assert len(capped) <= cap
        assert capped == uncapped[:cap]

    def test_identical_runs_identical_output(self):
        kwargs = dict(minimum_occurrence=2, minimum_score=0.8, minimum_score_occurrence=1)
        assert _rank(SCORES, **kwargs) == _rank(SCORES, **kwargs)
