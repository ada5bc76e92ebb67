"""
Tests for the adaptive weight store, its ports and joblib persistence.
"""

import os
from dataclasses import replace

import joblib
import pytest

from xypoker.constants import Phase
from xypoker.learning import (
    InMemoryWeightPort,
    JoblibWeightPort,
    LearningData,
    WeightStore,
    WeightVector,
    record_game_result,
    update_weights,
)
from xypoker.persistence import (
    delete_learning_data,
    load_learning_data,
    save_learning_data,
)

PREFERENCES = (
    "trip_preference",
    "flush_preference",
    "straight_preference",
    "x_hand_focus",
    "bonus_aggression",
)


@pytest.fixture
def store():
    return WeightStore(InMemoryWeightPort())


# ===================================================================
# Learning rule
# ===================================================================


class TestUpdateWeights:
    def test_win_nudges_all_preferences(self):
        updated = update_weights(WeightVector(), won=True)
        for name in PREFERENCES:
            assert getattr(updated, name) == pytest.approx(1.05)
        assert updated.hiding_strategy == pytest.approx(0.3)

    def test_loss_moves_weakest_strongest_and_aggression(self):
        weights = WeightVector(
            trip_preference=1.2,
            flush_preference=0.8,
            straight_preference=1.0,
            x_hand_focus=1.5,
            bonus_aggression=1.0,
        )
        updated = update_weights(weights, won=False)
        assert updated.flush_preference == pytest.approx(0.88)
        assert updated.x_hand_focus == pytest.approx(1.425)
        assert updated.bonus_aggression == pytest.approx(1.08)
        assert updated.trip_preference == pytest.approx(1.2)
        assert updated.straight_preference == pytest.approx(1.0)

    def test_loss_ties_pick_first_min_and_last_max(self):
        updated = update_weights(WeightVector(), won=False)
        # All equal: trip is the weakest, aggression the strongest
        assert updated.trip_preference == pytest.approx(1.10)
        assert updated.flush_preference == pytest.approx(1.0)
        assert updated.bonus_aggression == pytest.approx(1.0 * 0.95 * 1.08)

    def test_draw_leaves_weights(self):
        weights = WeightVector(trip_preference=1.3)
        assert update_weights(weights, won=False, draw=True) == weights

    def test_clamps(self):
        high = WeightVector(
            trip_preference=2.0,
            flush_preference=2.0,
            straight_preference=2.0,
            x_hand_focus=2.0,
            bonus_aggression=2.5,
            hiding_strategy=0.9,
        )
        updated = update_weights(high, won=True)
        assert updated.trip_preference == 2.0
        assert updated.bonus_aggression == 2.5
        assert updated.hiding_strategy == 0.6

        low = WeightVector(
            trip_preference=0.5,
            flush_preference=0.5,
            straight_preference=0.5,
            x_hand_focus=0.5,
            bonus_aggression=0.5,
            hiding_strategy=0.01,
        )
        updated = update_weights(low, won=False)
        assert updated.hiding_strategy == 0.1
        for name in PREFERENCES:
            assert getattr(updated, name) >= 0.5

    def test_repeated_losses_stay_in_bounds(self):
        weights = WeightVector()
        for _ in range(200):
            weights = update_weights(weights, won=False)
        for name in PREFERENCES[:4]:
            assert 0.5 <= getattr(weights, name) <= 2.0
        assert 0.5 <= weights.bonus_aggression <= 2.5


# ===================================================================
# Store
# ===================================================================


class TestWeightStore:
    def test_defaults_when_empty(self, store):
        assert store.load() == WeightVector()
        assert store.data() == LearningData()
        assert store.win_rate() == 0.0

    def test_record_counts(self, store):
        store.record_result(won=True)
        store.record_result(won=False)
        store.record_result(won=False, draw=True)
        assert store.stats() == {
            "games": 3,
            "wins": 1,
            "losses": 1,
            "draws": 1,
            "win_rate": pytest.approx(1 / 3),
        }

    def test_record_persists_through_port(self, store):
        store.record_result(won=True)
        assert store.load().trip_preference == pytest.approx(1.05)
        saved = store.port.load()
        assert saved["total_games"] == 1
        assert saved["trip_preference"] == pytest.approx(1.05)

    def test_draw_changes_only_counters(self, store):
        store.record_result(won=False, draw=True)
        assert store.load() == WeightVector()
        assert store.data().draws == 1

    def test_reset(self, store):
        store.record_result(won=True)
        store.reset()
        assert store.data() == LearningData()

    def test_partial_record_filled_with_defaults(self):
        store = WeightStore(InMemoryWeightPort({"wins": 4, "total_games": 5, "x_hand_focus": 1.7}))
        data = store.data()
        assert data.wins == 4
        assert data.weights.x_hand_focus == 1.7
        assert data.weights.trip_preference == 1.0


class TestRecordGameResult:
    def _finished(self, started_state, winner):
        return replace(started_state, phase=Phase.ENDED, winner=winner)

    def test_ai_win(self, store, started_state):
        record_game_result(store, self._finished(started_state, "p2"), ai_player_index=1)
        assert store.data().wins == 1

    def test_ai_loss(self, store, started_state):
        record_game_result(store, self._finished(started_state, "p1"), ai_player_index=1)
        assert store.data().losses == 1

    def test_draw_is_not_a_loss(self, store, started_state):
        record_game_result(store, self._finished(started_state, "draw"), ai_player_index=0)
        data = store.data()
        assert data.draws == 1
        assert data.losses == 0

    def test_unfinished_game_ignored(self, store, started_state):
        assert record_game_result(store, started_state, ai_player_index=1) is None
        assert store.data().total_games == 0


# ===================================================================
# joblib persistence
# ===================================================================


class TestJoblibPersistence:
    def test_round_trip(self, tmp_path):
        path = str(tmp_path / "nested" / "learning.joblib")
        save_learning_data({"total_games": 2, "wins": 1}, path)
        assert os.path.exists(path)
        assert load_learning_data(path) == {"total_games": 2, "wins": 1}

    def test_missing_file(self, tmp_path):
        assert load_learning_data(str(tmp_path / "absent.joblib")) is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.joblib"
        path.write_bytes(b"")
        assert load_learning_data(str(path)) is None

    def test_non_dict_ignored(self, tmp_path):
        path = str(tmp_path / "list.joblib")
        joblib.dump([1, 2, 3], path)
        assert load_learning_data(path) is None

    def test_delete(self, tmp_path):
        path = str(tmp_path / "learning.joblib")
        save_learning_data({"total_games": 1}, path)
        assert delete_learning_data(path)
        assert not delete_learning_data(path)

    def test_store_over_joblib(self, tmp_path):
        path = str(tmp_path / "learning.joblib")
        WeightStore(JoblibWeightPort(path)).record_result(won=True)
        reopened = WeightStore(JoblibWeightPort(path))
        assert reopened.data().wins == 1
        assert reopened.load().flush_preference == pytest.approx(1.05)
