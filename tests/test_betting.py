"""Tests for betting logic."""
import pytest
from betting_table.game.table import Table, TableConfig
from betting_table.game.betting import BettingEngine, Action, ActionType
from betting_table.game.errors import (
    AlreadyFolded,
    BetLimitExceeded,
    BetTooSmall,
    NoActiveHand,
    NotSeated,
    NotYourTurn,
)


def make_engine(*stacks: int, bet_limit: int = 50, small_blind: int = 5) -> BettingEngine:
    """Create an engine with players h0, h1, ... seated in order."""
    table = Table(TableConfig(bet_limit=bet_limit, initial_stack=500, small_blind=small_blind))
    for i, stack in enumerate(stacks or (500, 500)):
        table.roster.join(f"h{i}", f"player{i}", stack)
    return BettingEngine(table)


def call(engine: BettingEngine, handle: str) -> int:
    return engine.process_action(handle, Action(type=ActionType.CHECK_CALL))


def fold(engine: BettingEngine, handle: str) -> int:
    return engine.process_action(handle, Action(type=ActionType.FOLD))


def raise_to(engine: BettingEngine, handle: str, target: int) -> int:
    return engine.process_action(handle, Action(type=ActionType.BET_RAISE, amount=target))


class TestNextInHand:
    """Test turn rotation primitive."""

    def test_empty_table(self):
        """Test no seats means no next player."""
        engine = make_engine()
        engine.roster.remove("h0")
        engine.roster.remove("h1")

        assert engine.next_in_hand(0) is None

    def test_nobody_in_hand(self):
        """Test seats with nobody contesting return None."""
        engine = make_engine(500, 500, 500)

        assert engine.next_in_hand(0) is None

    def test_skips_folded_and_wraps(self):
        """Test folded seats are skipped and scan wraps around."""
        engine = make_engine(500, 500, 500)
        for p in engine.roster:
            p.in_hand = True
        engine.roster[1].in_hand = False

        assert engine.next_in_hand(0) == 2
        assert engine.next_in_hand(2) == 0

    def test_returns_self_last(self):
        """Test the starting seat is only found after a full lap."""
        engine = make_engine(500, 500, 500)
        engine.roster[1].in_hand = True

        assert engine.next_in_hand(1) == 1

    def test_none_starts_at_first_seat(self):
        """Test a None start scans from seat 0."""
        engine = make_engine(500, 500)
        for p in engine.roster:
            p.in_hand = True

        assert engine.next_in_hand(None) == 0


class TestBettingActions:
    """Test fold, check/call and bet/raise."""

    def test_turn_checks(self):
        """Test each assert_turn failure."""
        engine = make_engine(500, 500, 500)

        with pytest.raises(NotSeated):
            engine.assert_turn("ghost")
        with pytest.raises(NoActiveHand):
            engine.assert_turn("h0")

        engine.start_hand()
        with pytest.raises(NotYourTurn):
            engine.assert_turn("h1")

        fold(engine, "h0")
        engine.hand.turn_index = 0
        with pytest.raises(AlreadyFolded):
            engine.assert_turn("h0")

    def test_call(self):
        """Test calling the big blind."""
        engine = make_engine(500, 500, 500)
        engine.start_hand()

        paid = call(engine, "h0")

        assert paid == 10
        assert engine.roster[0].stack == 490
        assert engine.roster[0].has_acted
        assert engine.hand.pot == 25
        assert engine.hand.current_bet == 10
        assert engine.hand.turn_index == 1

    def test_call_short_stack_goes_all_in(self):
        """Test a call for more than the stack pays the stack."""
        engine = make_engine(8, 500, 500)
        engine.start_hand()

        paid = call(engine, "h0")

        assert paid == 8
        assert engine.roster[0].stack == 0
        assert engine.roster[0].bet_this_round == 8
        assert engine.hand.current_bet == 10

    def test_opening_bet_of_zero_is_too_small(self):
        """Test an opening bet must be at least 1."""
        engine = make_engine(500, 500)
        engine.start_hand()
        call(engine, "h1")
        call(engine, "h0")
        engine.open_next_round()

        assert engine.hand.current_bet == 0
        with pytest.raises(BetTooSmall):
            raise_to(engine, "h1", 0)

        raise_to(engine, "h1", 1)
        assert engine.hand.current_bet == 1

    def test_raise_must_exceed_current_bet(self):
        """Test a raise to the current bet is rejected."""
        engine = make_engine(500, 500, 500)
        engine.start_hand()

        with pytest.raises(BetTooSmall):
            raise_to(engine, "h0", 10)

        raise_to(engine, "h0", 11)
        assert engine.hand.current_bet == 11

    def test_raise_limit(self):
        """Test the increment above the current bet is capped."""
        engine = make_engine(500, 500, 500, bet_limit=50)
        engine.start_hand()

        with pytest.raises(BetLimitExceeded):
            raise_to(engine, "h0", 61)

        raise_to(engine, "h0", 60)
        assert engine.hand.current_bet == 60

    def test_opening_bet_limit(self):
        """Test the whole opening bet counts as the increment."""
        engine = make_engine(500, 500, bet_limit=20)
        engine.start_hand()
        call(engine, "h1")
        call(engine, "h0")
        engine.open_next_round()

        with pytest.raises(BetLimitExceeded):
            raise_to(engine, "h1", 21)

    def test_rejected_raise_changes_nothing(self):
        """Test an over-limit raise leaves the whole table untouched."""
        engine = make_engine(500, 500, 500)
        engine.start_hand()
        before = engine.table.to_dict()

        with pytest.raises(BetLimitExceeded):
            raise_to(engine, "h0", 500)

        assert engine.table.to_dict() == before

    def test_raise_reopens_action(self):
        """Test a full raise makes everyone else act again."""
        engine = make_engine(500, 500, 500)
        engine.start_hand()

        raise_to(engine, "h0", 30)

        assert engine.hand.current_bet == 30
        assert engine.hand.pot == 45
        assert engine.hand.last_aggressor_index == 0
        assert engine.roster[0].has_acted
        assert not engine.roster[1].has_acted
        assert not engine.roster[2].has_acted
        assert engine.hand.turn_index == 1

        with pytest.raises(NotYourTurn):
            call(engine, "h0")

    def test_reraise_clears_previous_callers(self):
        """Test players who already called must respond to a re-raise."""
        engine = make_engine(500, 500, 500)
        engine.start_hand()
        call(engine, "h0")
        raise_to(engine, "h1", 30)

        assert not engine.roster[0].has_acted
        assert engine.hand.last_aggressor_index == 1

    def test_short_all_in_raise_does_not_reopen(self):
        """Test an all-in below the current bet leaves the bet and others alone."""
        engine = make_engine(500, 500, 500, 500, 8)
        engine.start_hand()
        call(engine, "h3")

        paid = raise_to(engine, "h4", 30)

        assert paid == 8
        assert engine.roster[4].stack == 0
        assert engine.roster[4].has_acted
        assert engine.hand.current_bet == 10
        assert engine.hand.last_aggressor_index is None
        assert engine.roster[3].has_acted

    def test_all_in_raise_above_current_bet(self):
        """Test an all-in that still beats the current bet becomes the bet."""
        engine = make_engine(500, 500, 500, 20)
        engine.start_hand()

        paid = raise_to(engine, "h3", 40)

        assert paid == 20
        assert engine.hand.current_bet == 20
        assert engine.hand.last_aggressor_index == 3


class TestRoundClosure:
    """Test betting round completion."""

    def test_heads_up_call_then_check(self):
        """Test the small blind calls and the big blind checks."""
        engine = make_engine(500, 500, small_blind=5)
        engine.start_hand()
        sb = engine.hand.small_blind_index
        bb = engine.hand.big_blind_index
        sb_handle = engine.roster[sb].handle
        bb_handle = engine.roster[bb].handle

        assert engine.hand.turn_index == sb
        call(engine, sb_handle)

        assert engine.hand.pot == 20
        assert engine.roster[sb].stack == 490
        assert not engine.hand.round_closed
        assert engine.hand.turn_index == bb

        paid = call(engine, bb_handle)

        assert paid == 0
        assert engine.hand.round_closed
        assert engine.hand.turn_index is None

    def test_big_blind_gets_option(self):
        """Test the round stays open until the big blind acts."""
        engine = make_engine(500, 500, 500)
        engine.start_hand()
        call(engine, "h0")
        call(engine, "h1")

        assert not engine.hand.round_closed
        assert engine.hand.turn_index == 2

        call(engine, "h2")
        assert engine.hand.round_closed

    def test_all_in_below_bet_others_must_match_each_other(self):
        """Test an all-in short player does not lower what the others owe."""
        engine = make_engine(8, 500, 500)
        engine.start_hand()

        call(engine, "h0")
        assert engine.roster[0].stack == 0
        assert not engine.hand.round_closed

        call(engine, "h1")
        raise_to(engine, "h2", 20)
        assert not engine.hand.round_closed
        assert engine.hand.turn_index == 0

        call(engine, "h0")
        assert not engine.hand.round_closed
        assert engine.hand.turn_index == 1

        call(engine, "h1")
        assert engine.hand.round_closed
        assert engine.hand.turn_index is None
        assert engine.roster[1].bet_this_round == engine.roster[2].bet_this_round == 20
        assert engine.roster[0].bet_this_round == 8

    def test_fold_to_one_player_ends_action(self):
        """Test the last fold sets the turn to none immediately."""
        engine = make_engine(500, 500)
        engine.start_hand()
        sb_handle = engine.roster[engine.hand.small_blind_index].handle

        fold(engine, sb_handle)

        assert engine.hand.turn_index is None
        assert engine.hand.in_progress
        assert not engine.hand.round_closed

    def test_fold_with_players_left_passes_turn(self):
        """Test a fold among three passes the turn on."""
        engine = make_engine(500, 500, 500)
        engine.start_hand()

        fold(engine, "h0")

        assert engine.hand.turn_index == 1
        assert not engine.roster[0].in_hand

    def test_chip_conservation(self):
        """Test stacks plus pot never change during betting."""
        engine = make_engine(500, 500, 500)
        total = engine.table.chips_in_play()
        engine.start_hand()
        assert engine.table.chips_in_play() == total

        call(engine, "h0")
        assert engine.table.chips_in_play() == total
        raise_to(engine, "h1", 30)
        assert engine.table.chips_in_play() == total
        call(engine, "h2")
        assert engine.table.chips_in_play() == total
        fold(engine, "h0")
        assert engine.table.chips_in_play() == total
        assert engine.hand.round_closed

        engine.end_hand(1)
        assert engine.roster.total_stacks() == total
        assert engine.hand.pot == 0
