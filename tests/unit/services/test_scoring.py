"""
Unit tests for the pick scorer
"""

import itertools
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ufc_scoring.models import FightResult, Pick, PickDetail
from ufc_scoring.services.scoring import (
    FightResultMissingError,
    max_points_for,
    normalize_method,
    parse_fight_time,
    result_for,
    score_pick,
    score_pick_detail,
)

KO_RESULT = FightResult(winner="fighter2", method="KO/TKO", round=2, time="3:45")
DECISION_RESULT = FightResult(winner="fighter1", method="Decision")


class TestNormalizeMethod:
    """Test method normalization."""

    def test_normalize_method(self):
        assert normalize_method("KO") == "KO/TKO"
        assert normalize_method("TKO") == "KO/TKO"
        assert normalize_method("ko/tko") == "KO/TKO"
        assert normalize_method("SUB") == "Submission"
        assert normalize_method("Submission") == "Submission"
        assert normalize_method("DEC") == "Decision"
        assert normalize_method("decision") == "Decision"

    def test_models_normalize_on_input(self):
        result = FightResult(winner="fighter1", method="tko", round=1, time="0:45")
        assert result.method == "KO/TKO"

        pick_detail = PickDetail(fight_id=1, predicted_winner="fighter1", predicted_method="SUB")
        assert pick_detail.predicted_method == "Submission"

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            FightResult(winner="fighter1", method="DQ")

    def test_round_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            FightResult(winner="fighter1", method="KO/TKO", round=6)


class TestParseFightTime:

    def test_parse_valid_times(self):
        assert parse_fight_time("3:45") == 225
        assert parse_fight_time("03:45") == 225
        assert parse_fight_time("0:07") == 7
        assert parse_fight_time(" 4:59 ") == 299

    def test_parse_invalid_times(self):
        assert parse_fight_time(None) is None
        assert parse_fight_time("") is None
        assert parse_fight_time("3:75") is None
        assert parse_fight_time("345") is None
        assert parse_fight_time("round 2") is None


class TestScorePickDetail:
    """Test suite for the per-fight scoring rules."""

    def _detail(self, winner, method, round=None, time=None):
        return PickDetail(
            fight_id=1,
            predicted_winner=winner,
            predicted_method=method,
            predicted_round=round,
            predicted_time=time
        )

    def test_perfect_finish_pick(self):
        """Winner + method + round + time on a finish = 6 points."""
        score = score_pick_detail(self._detail("fighter2", "KO/TKO", 2, "3:45"), KO_RESULT)
        assert score.points == 6
        assert score.is_correct is True

    def test_wrong_method_on_finish(self):
        """Winner + round + time, wrong method = 5 points (the rules are additive: 3 + 1 + 1)."""
        score = score_pick_detail(self._detail("fighter2", "Submission", 2, "3:45"), KO_RESULT)
        assert score.points == 5
        assert score.is_correct is True

    def test_wrong_winner_gets_nothing(self):
        """Everything else right but the winner = 0 points."""
        score = score_pick_detail(self._detail("fighter1", "KO/TKO", 2, "3:45"), KO_RESULT)
        assert score.points == 0
        assert score.is_correct is False

    def test_decision_with_method(self):
        score = score_pick_detail(self._detail("fighter1", "Decision"), DECISION_RESULT)
        assert score.points == 4
        assert score.is_correct is True

    def test_decision_with_wrong_method(self):
        """Round/time don't apply to a decision, even if predicted."""
        score = score_pick_detail(self._detail("fighter1", "KO/TKO", 3, "5:00"), DECISION_RESULT)
        assert score.points == 3
        assert score.is_correct is True

    def test_decision_ignores_round_and_time_on_result(self):
        result = FightResult(winner="fighter1", method="Decision", round=3, time="5:00")
        score = score_pick_detail(self._detail("fighter1", "Decision", 3, "5:00"), result)
        assert score.points == 4

    def test_time_exact_match_by_default(self):
        score = score_pick_detail(self._detail("fighter2", "KO/TKO", 2, "3:44"), KO_RESULT)
        assert score.points == 5

        score = score_pick_detail(self._detail("fighter2", "KO/TKO", 2, "03:45"), KO_RESULT)
        assert score.points == 6

    def test_time_tolerance(self):
        detail = self._detail("fighter2", "KO/TKO", 2, "3:40")

        assert score_pick_detail(detail, KO_RESULT, time_tolerance_seconds=5).points == 6
        assert score_pick_detail(detail, KO_RESULT, time_tolerance_seconds=4).points == 5

    def test_missing_prediction_round_and_time(self):
        score = score_pick_detail(self._detail("fighter2", "KO/TKO"), KO_RESULT)
        assert score.points == 4

    def test_wrong_winner_never_scores(self):
        for method, round, time in itertools.product(
            ["Decision", "KO/TKO", "Submission"], [None, 1, 2], [None, "3:45"]
        ):
            for result in (KO_RESULT, DECISION_RESULT):
                wrong = "fighter1" if result.winner == "fighter2" else "fighter2"
                score = score_pick_detail(self._detail(wrong, method, round, time), result)
                assert score == (0, False)

    def test_decision_points_range(self):
        for method, round in itertools.product(["Decision", "KO/TKO", "Submission"], [None, 1, 3]):
            score = score_pick_detail(self._detail("fighter1", method, round, "1:00"), DECISION_RESULT)
            assert score.is_correct is True
            assert score.points == (4 if method == "Decision" else 3)

    def test_finish_points_range(self):
        for method, round, time in itertools.product(
            ["Decision", "KO/TKO", "Submission"], [None, 1, 2], [None, "3:45", "1:00"]
        ):
            score = score_pick_detail(self._detail("fighter2", method, round, time), KO_RESULT)
            assert score.is_correct is True
            assert 3 <= score.points <= 6

            perfect = method == "KO/TKO" and round == 2 and time == "3:45"
            assert (score.points == 6) == perfect

    def test_max_points(self):
        assert max_points_for(KO_RESULT) == 6
        assert max_points_for(DECISION_RESULT) == 4


class TestScorePick:
    """Test scoring of a whole pick (all fights of an event)."""

    def _pick(self, details):
        return Pick(
            id="alice:100",
            user_id="alice",
            event_id=100,
            is_submitted=True,
            details=details
        )

    def test_totals_recomputed_from_details(self, make_detail):
        pick = self._pick([
            make_detail(1, "fighter2", "KO/TKO", 2, "3:45"),
            make_detail(2, "fighter1", "KO/TKO"),
            make_detail(3, "fighter1", "Decision"),
        ])
        results = {1: KO_RESULT, 2: DECISION_RESULT, 3: KO_RESULT}
        scored_at = datetime(2025, 3, 2, tzinfo=timezone.utc)

        scored, skipped = score_pick(pick, results, scored_at=scored_at)

        assert skipped == 0
        assert [d.points_earned for d in scored.details] == [6, 3, 0]
        assert [d.is_correct for d in scored.details] == [True, True, False]
        assert scored.total_points == 9
        assert scored.correct_picks == 2
        assert scored.total_picks == 3
        assert scored.accuracy == 66.67
        assert scored.is_scored is True
        assert scored.scored_at == scored_at

    def test_previous_points_are_replaced(self, make_detail):
        stale = make_detail(1, "fighter1", "KO/TKO").model_copy(
            update={"points_earned": 6, "is_correct": True}
        )
        pick = self._pick([stale]).model_copy(update={"total_points": 6, "correct_picks": 1})

        scored, _ = score_pick(pick, {1: KO_RESULT})

        assert scored.details[0].points_earned == 0
        assert scored.details[0].is_correct is False
        assert scored.total_points == 0
        assert scored.correct_picks == 0

    def test_missing_result_is_skipped(self, make_detail):
        pick = self._pick([
            make_detail(1, "fighter2", "KO/TKO", 2, "3:45"),
            make_detail(99, "fighter1", "Decision"),
        ])

        scored, skipped = score_pick(pick, {1: KO_RESULT})

        assert skipped == 1
        assert scored.total_points == 6
        assert scored.total_picks == 2
        missing = scored.details[1]
        assert missing.points_earned == 0
        assert missing.is_correct is False
        assert missing.scored_at is None

    def test_all_details_missing_leaves_pick_unscored(self, make_detail):
        pick = self._pick([
            make_detail(1, "fighter2", "KO/TKO", 2, "3:45"),
            make_detail(2, "fighter1", "Decision"),
        ])

        scored, skipped = score_pick(pick, {})

        assert skipped == 2
        assert scored.total_points == 0
        assert scored.total_picks == 2
        assert scored.is_scored is False
        assert scored.scored_at is None

    def test_result_for_raises_when_missing(self, make_detail):
        with pytest.raises(FightResultMissingError) as exc_info:
            result_for(make_detail(7, "fighter1", "Decision"), {1: KO_RESULT})

        assert exc_info.value.fight_id == 7

    def test_empty_pick(self):
        scored, skipped = score_pick(self._pick([]), {1: KO_RESULT})

        assert skipped == 0
        assert scored.total_points == 0
        assert scored.accuracy == 0.0
        assert scored.is_scored is True
