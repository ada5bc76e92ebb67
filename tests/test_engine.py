"""
Tests for the turn state machine: dealing, placement legality, gravity, the
column bonus, phase transitions and the pure-reducer contract.
"""

import random
from collections import Counter

import pytest

from xypoker.card import Card, parse_cards
from xypoker.config import RulesConfig
from xypoker.constants import (
    BOTTOM_ROW,
    CLUBS,
    JOKER_RANK,
    JOKER_SUIT,
    MAX_HIDDEN_CARDS,
    NUM_COLS,
    NUM_ROWS,
    Phase,
    ActionStartGame,
    ActionPlaceAndDraw,
    ActionCalculateScore,
    ActionSyncState,
)
from xypoker.game.engine import GameState, game_reducer, initial_game_state
from xypoker.game.helpers import empty_board, first_empty_row, hidden_in_column
from xypoker.game.serialization import state_to_dict
from xypoker.scoring import score_breakdown


def place_first_card(state: GameState, col: int, hidden: bool = False) -> GameState:
    """Current player places the first card of their hand into `col`."""
    card = state.get_current_player().hand[0]
    return game_reducer(state, ActionPlaceAndDraw(card.id, col, hidden))


def first_open_column(state: GameState) -> int:
    return state.legal_columns(state.current_player_index)[0]


def assert_card_conservation(state: GameState):
    ids = [card.id for card in state.all_cards()]
    assert len(ids) == 52
    assert len(set(ids)) == 52


def assert_gravity(state: GameState):
    for player in state.players:
        for col in range(NUM_COLS):
            seen_empty = False
            for row in range(NUM_ROWS):
                if player.board[row][col] is None:
                    seen_empty = True
                else:
                    assert not seen_empty, f"Gap in column {col} of {player.id}"


# ===================================================================
# Setup
# ===================================================================


class TestInitialState:
    def test_setup_phase(self):
        state = initial_game_state()
        assert state.phase == Phase.SETUP
        assert [p.id for p in state.players] == ["p1", "p2"]
        assert all(p.board == empty_board() for p in state.players)
        assert state.winner is None

    def test_house_rules_carried(self):
        rules = RulesConfig(pure_straight_flush_tier=True)
        assert initial_game_state(rules).house_rules == rules


class TestStartGame:
    def test_deal(self, started_state):
        assert started_state.phase == Phase.PLAYING
        assert started_state.turn_count == 1
        assert [len(p.hand) for p in started_state.players] == [4, 4]
        assert len(started_state.deck) == 44
        assert started_state.current_player_index in (0, 1)
        assert_card_conservation(started_state)

    def test_shared_dice(self, started_state):
        p1, p2 = started_state.players
        assert p1.dice == p2.dice
        assert len(p1.dice) == 5
        assert all(1 <= value <= 6 for value in p1.dice)
        assert p1.dice == sorted(p1.dice, reverse=True)

    def test_unsorted_dice_rule(self):
        rules = RulesConfig(sort_dice_descending=False)
        state = game_reducer(initial_game_state(rules), ActionStartGame(seed=3))
        assert len(state.dice) == 5
        assert state.house_rules == rules

    def test_seed_is_deterministic(self):
        a = game_reducer(initial_game_state(), ActionStartGame(seed=7))
        b = game_reducer(initial_game_state(), ActionStartGame(seed=7))
        assert a == b

    def test_injected_rng_is_deterministic(self):
        a = game_reducer(initial_game_state(), ActionStartGame(), random.Random(11))
        b = game_reducer(initial_game_state(), ActionStartGame(), random.Random(11))
        assert a == b

    def test_start_resets_a_game_in_progress(self, started_state):
        mid = place_first_card(started_state, 0)
        restarted = game_reducer(mid, ActionStartGame(seed=1))
        assert restarted.turn_count == 1
        assert all(p.hidden_cards_count == 0 for p in restarted.players)
        assert all(p.board == empty_board() for p in restarted.players)


# ===================================================================
# Placement
# ===================================================================


class TestPlaceAndDraw:
    def test_place_moves_card_and_draws(self, started_state):
        player_idx = started_state.current_player_index
        card = started_state.players[player_idx].hand[0]
        top_of_deck = started_state.deck[0]

        new_state = game_reducer(started_state, ActionPlaceAndDraw(card.id, 2))
        player = new_state.players[player_idx]
        assert player.board[0][2] == card
        assert card not in player.hand
        assert top_of_deck in player.hand
        assert len(player.hand) == 4
        assert len(new_state.deck) == 43
        assert new_state.current_player_index == 1 - player_idx
        assert new_state.turn_count == 2
        assert_card_conservation(new_state)

    def test_reducer_does_not_mutate_input(self, started_state):
        before = state_to_dict(started_state)
        place_first_card(started_state, 0, hidden=True)
        assert state_to_dict(started_state) == before

    def test_gravity_fills_top_down(self, started_state):
        first = started_state.current_player_index
        state = place_first_card(started_state, 3)
        state = place_first_card(state, 0)  # Opponent
        state = place_first_card(state, 3)
        board = state.players[first].board
        assert board[0][3] is not None
        assert board[1][3] is not None
        assert board[2][3] is None
        assert_gravity(state)

    def test_hidden_placement(self, started_state):
        player_idx = started_state.current_player_index
        card = started_state.players[player_idx].hand[1]
        state = game_reducer(started_state, ActionPlaceAndDraw(card.id, 1, True))
        placed = state.players[player_idx].board[0][1]
        assert placed.is_hidden
        assert placed.id == card.id
        assert state.players[player_idx].hidden_cards_count == 1


class TestRejectedPlacements:
    def test_card_not_in_hand(self, started_state):
        assert game_reducer(started_state, ActionPlaceAndDraw("hearts-99", 0)) is started_state

    def test_opponents_card(self, started_state):
        opponent = started_state.players[1 - started_state.current_player_index]
        action = ActionPlaceAndDraw(opponent.hand[0].id, 0)
        assert game_reducer(started_state, action) is started_state

    @pytest.mark.parametrize("col", [-1, 5, 17])
    def test_column_out_of_range(self, started_state, col):
        card = started_state.get_current_player().hand[0]
        assert game_reducer(started_state, ActionPlaceAndDraw(card.id, col)) is started_state

    def test_full_column(self, started_state, set_player):
        idx = started_state.current_player_index
        board = empty_board()
        for row, card in enumerate(parse_cards("2C 3C 4C")):
            board[row][0] = card
        state = set_player(started_state, idx, board=board)
        card = state.players[idx].hand[0]
        assert game_reducer(state, ActionPlaceAndDraw(card.id, 0)) is state

    def test_hidden_limit_per_player(self, started_state, set_player):
        idx = started_state.current_player_index
        state = set_player(started_state, idx, hidden_cards_count=MAX_HIDDEN_CARDS)
        card = state.players[idx].hand[0]
        assert game_reducer(state, ActionPlaceAndDraw(card.id, 0, True)) is state
        # The same card face-up is fine
        assert game_reducer(state, ActionPlaceAndDraw(card.id, 0, False)) is not state

    def test_hidden_limit_per_column(self, started_state, set_player):
        idx = started_state.current_player_index
        board = empty_board()
        for row, card in enumerate(parse_cards("2C 3C")):
            board[row][4] = card.with_hidden(True)
        state = set_player(started_state, idx, board=board, hidden_cards_count=2)
        card = state.players[idx].hand[0]
        assert game_reducer(state, ActionPlaceAndDraw(card.id, 4, True)) is state
        assert game_reducer(state, ActionPlaceAndDraw(card.id, 3, True)) is not state

    def test_jokers_cannot_be_hidden(self, started_state):
        joker = Card(JOKER_SUIT, JOKER_RANK)
        assert not started_state.can_hide(started_state.current_player_index, joker, 0)

    def test_placement_before_start(self):
        state = initial_game_state()
        assert game_reducer(state, ActionPlaceAndDraw("clubs-2", 0)) is state

    def test_rejection_reason(self, started_state):
        idx = started_state.current_player_index
        assert started_state.placement_rejection(idx, "nope", 0, False) is not None
        card = started_state.players[idx].hand[0]
        assert started_state.placement_rejection(idx, card.id, 0, False) is None
        assert started_state.is_legal_placement(idx, card.id, 0)
        assert not started_state.is_legal_placement(1 - idx, card.id, 0)


# ===================================================================
# Column bonus
# ===================================================================


class TestColumnBonus:
    def _two_cards_in_column(self, state, set_player, idx, col):
        board = empty_board()
        board[0][col] = Card(CLUBS, 2)
        board[1][col] = Card(CLUBS, 3)
        return set_player(state, idx, board=board)

    def test_first_to_complete_draws_bonus(self, started_state, set_player):
        idx = started_state.current_player_index
        state = self._two_cards_in_column(started_state, set_player, idx, 0)
        deck_before = len(state.deck)

        new_state = place_first_card(state, 0)
        player = new_state.players[idx]
        assert player.board[BOTTOM_ROW][0] is not None
        assert player.bonuses_claimed == 1
        assert len(player.hand) == 5
        assert len(new_state.deck) == deck_before - 2

    def test_second_to_complete_gets_nothing(self, started_state, set_player):
        idx = started_state.current_player_index
        opp = 1 - idx
        full = empty_board()
        for row, card in enumerate(parse_cards("2C 3C 4C")):
            full[row][0] = card
        state = set_player(started_state, opp, board=full)
        state = self._two_cards_in_column(state, set_player, idx, 0)

        new_state = place_first_card(state, 0)
        player = new_state.players[idx]
        assert player.bonuses_claimed == 0
        assert len(player.hand) == 4
        assert len(new_state.deck) == len(state.deck) - 1

    def test_no_bonus_for_upper_rows(self, started_state):
        idx = started_state.current_player_index
        new_state = place_first_card(started_state, 0)
        assert new_state.players[idx].bonuses_claimed == 0


# ===================================================================
# Full game
# ===================================================================


class TestFullGame:
    @pytest.mark.parametrize("seed", [0, 42, 2024])
    def test_thirty_placements_reach_scoring(self, seed):
        state = game_reducer(initial_game_state(), ActionStartGame(seed=seed))
        for turn in range(30):
            assert state.phase == Phase.PLAYING
            state = place_first_card(state, first_open_column(state))
            assert_card_conservation(state)
            assert_gravity(state)
        assert state.phase == Phase.SCORING
        assert state.both_boards_full()
        assert state.turn_count == 31

        # Each column pays a bonus to at most one player
        assert sum(p.bonuses_claimed for p in state.players) <= NUM_COLS

        expected = score_breakdown(state)
        final = game_reducer(state, ActionCalculateScore())
        assert final.phase == Phase.ENDED
        assert final.winner == expected.winner
        assert final.winner in ("p1", "p2", "draw")
        assert tuple(p.score for p in final.players) == expected.totals

    def test_same_seed_same_winner(self):
        def play(seed):
            state = game_reducer(initial_game_state(), ActionStartGame(seed=seed))
            while state.phase == Phase.PLAYING:
                state = place_first_card(state, first_open_column(state))
            return game_reducer(state, ActionCalculateScore())

        assert play(5) == play(5)

    def test_hidden_limits_hold_through_a_game(self):
        state = game_reducer(initial_game_state(), ActionStartGame(seed=8))
        while state.phase == Phase.PLAYING:
            # Always ask to hide; the engine must refuse once limits are hit
            idx = state.current_player_index
            card = state.players[idx].hand[0]
            col = first_open_column(state)
            hidden = state.can_hide(idx, card, col)
            state = game_reducer(state, ActionPlaceAndDraw(card.id, col, hidden))
            for player in state.players:
                assert player.hidden_cards_count <= MAX_HIDDEN_CARDS
                for c in range(NUM_COLS):
                    assert hidden_in_column(player.board, c) < NUM_ROWS
        assert Counter(p.hidden_cards_count for p in state.players) == Counter({3: 2})

    def test_no_placements_after_scoring(self):
        state = game_reducer(initial_game_state(), ActionStartGame(seed=9))
        while state.phase == Phase.PLAYING:
            state = place_first_card(state, first_open_column(state))
        card = state.get_current_player().hand[0]
        assert game_reducer(state, ActionPlaceAndDraw(card.id, 0)) is state


# ===================================================================
# Other actions
# ===================================================================


class TestOtherActions:
    def test_sync_replaces_state(self, started_state):
        other = game_reducer(initial_game_state(), ActionStartGame(seed=123))
        assert game_reducer(started_state, ActionSyncState(other)) is other

    def test_unknown_action_is_ignored(self, started_state):
        assert game_reducer(started_state, "FLIP_TABLE") is started_state
        assert game_reducer(started_state, None) is started_state

    def test_score_ignored_while_playing(self, started_state):
        assert game_reducer(started_state, ActionCalculateScore()) is started_state

    def test_first_empty_row_helper(self):
        board = empty_board()
        assert first_empty_row(board, 0) == 0
        board[0][0] = Card(CLUBS, 5)
        assert first_empty_row(board, 0) == 1
