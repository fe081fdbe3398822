"""
Tests for the match engine: turn flow, undo, computer turns and results.
"""
import logging

import pytest

from dartsim.ai import Throw
from dartsim.core import MISS, AimTarget, Segment, load_yaml, save_match_results
from dartsim.game import Match, MatchConfig, MatchPhase, PlayerProfile


class ScriptedSimulator:
    """Lands darts where the script says; exactly on target once it runs out."""

    def __init__(self, segments=()):
        self.segments = list(segments)
        self.targets = []

    def simulate(self, target, skill):
        self.targets.append(target)
        segment = self.segments.pop(0) if self.segments else target.to_segment()
        return Throw(target, skill, 0.0, (0.0, 0.0), (0.0, 0.0), segment)


def humans(mode="x01", start_score=501):
    return MatchConfig(
        mode=mode,
        start_score=start_score,
        players=[PlayerProfile("Alice"), PlayerProfile("Bob")],
    )


def human_vs_computer(mode="x01", start_score=501, computer_first=False, double_in=False):
    players = [PlayerProfile("Alice"), PlayerProfile("CPU", is_computer=True, skill=8)]
    if computer_first:
        players.reverse()
    return MatchConfig(mode=mode, start_score=start_score, double_in=double_in, players=players)


# ============================================================
# Turn flow
# ============================================================

def test_turn_passes_after_three_darts():
    match = Match(humans())
    outcomes = [match.throw_dart(Segment(20, 3)) for _ in range(3)]

    assert [o.dart_in_turn for o in outcomes] == [1, 2, 3]
    assert [o.turn_complete for o in outcomes] == [False, False, True]
    assert outcomes[0].remaining == 441
    assert outcomes[2].remaining == 321
    assert match.current_player_idx == 1
    assert match.players[0].remaining == 321
    assert match.players[0].stats.one_eighties == 1


def test_bust_ends_turn_early():
    match = Match(humans(start_score=40))
    outcome = match.throw_dart(Segment(20, 3))

    assert outcome.bust
    assert outcome.turn_complete
    assert outcome.remaining == 40
    assert match.current_player_idx == 1


def test_checkout_wins():
    match = Match(humans(start_score=40))
    outcome = match.throw_dart(Segment(20, 2))

    assert outcome.checkout
    assert outcome.game_over
    assert outcome.winner == 0
    assert match.phase == MatchPhase.GAME_OVER
    assert match.throw_dart(Segment(20)) is None


def test_cricket_win_checked_after_every_dart():
    """Closing the last number with the lead ends the match mid-turn."""
    match = Match(humans(mode="cricket"))
    for number in match.players[0].marks:
        match.players[0].marks[number] = 3
    match.players[0].marks[20] = 2

    outcome = match.throw_dart(Segment(20))
    assert outcome.game_over
    assert outcome.turn_complete
    assert match.winner == 0
    assert match.players[0].rounds == 1
    assert match.players[0].darts_thrown == 1


def test_checkout_suggestion():
    match = Match(humans(start_score=170))
    assert match.checkout_suggestion() == "T20 → T20 → BULL"

    match.throw_dart(Segment(20))
    assert match.current_remaining == 150
    assert match.checkout_suggestion() == "T20 → T18 → D18"

    assert Match(humans(mode="cricket")).checkout_suggestion() is None


# ============================================================
# Undo
# ============================================================

def test_undo_restores_every_snapshot():
    """Undoing N darts walks back through the exact states before each dart."""
    match = Match(humans(start_score=101))
    darts = [
        Segment(20), Segment(20, 3), Segment(20),  # Alice busts on 1
        Segment(5), Segment(5), Segment(5),  # Bob
        Segment(20, 3), Segment(1), Segment(20, 2),  # Alice checks out
    ]

    snapshots = []
    for segment in darts:
        snapshots.append(match.snapshot())
        match.throw_dart(segment)

    assert match.game_over
    assert match.undo_depth == len(darts)

    for expected in reversed(snapshots):
        assert match.undo()
        assert match.snapshot() == expected

    assert not match.undo()
    assert match.players[0].remaining == 101


def test_undo_reopens_finished_match():
    match = Match(humans(start_score=40))
    match.throw_dart(Segment(20, 2))
    assert match.result() is not None

    assert match.undo()
    assert not match.game_over
    assert match.winner is None
    assert match.result() is None
    assert match.phase == MatchPhase.AWAITING_DART
    assert match.current_player_idx == 0
    assert match.current_remaining == 40


def test_undo_crosses_turn_boundary():
    match = Match(humans())
    for _ in range(3):
        match.throw_dart(Segment(19))
    assert match.current_player_idx == 1

    match.undo()
    assert match.current_player_idx == 0
    assert match.turn.darts_thrown == 2
    assert match.players[0].remaining == 501


def test_undo_on_empty_stack():
    match = Match(humans())
    assert not match.can_undo
    assert not match.undo()


# ============================================================
# Computer turns
# ============================================================

def test_computer_turn_refused_for_human():
    match = Match(human_vs_computer(), simulator=ScriptedSimulator())
    assert not match.is_ai_turn
    assert match.execute_ai_turn() == []
    assert match.execute_ai_dart() is None


def test_human_dart_refused_on_computer_turn():
    match = Match(human_vs_computer(computer_first=True), simulator=ScriptedSimulator())
    assert match.is_ai_turn
    assert match.throw_dart(Segment(20)) is None


def test_computer_turn_with_perfect_aim():
    simulator = ScriptedSimulator()
    match = Match(human_vs_computer(), simulator=simulator)
    for _ in range(3):
        match.throw_dart(MISS)

    outcomes = match.execute_ai_turn()
    assert len(outcomes) == 3
    assert [o.scored for o in outcomes] == [60, 60, 60]
    assert all(o.target == AimTarget(20, 3) for o in outcomes)
    assert outcomes[-1].turn_complete
    assert match.players[1].remaining == 321
    assert match.current_player_idx == 0
    assert match.phase == MatchPhase.AWAITING_DART

    # Computer darts are not undoable on their own
    assert match.undo_depth == 3
    assert match.undo()
    assert match.players[1].remaining == 501
    assert match.current_player_idx == 0
    assert match.turn.darts_thrown == 2


def test_computer_turn_stops_on_bust():
    simulator = ScriptedSimulator([Segment(20), Segment(20)])
    match = Match(human_vs_computer(start_score=30, computer_first=True), simulator=simulator)

    outcomes = match.execute_ai_turn()
    assert len(outcomes) == 2
    assert outcomes[-1].bust
    assert simulator.targets == [AimTarget(15, 2), AimTarget(5, 2)]
    assert match.players[0].remaining == 30
    assert match.current_player_idx == 1


def test_computer_turn_stops_on_checkout():
    match = Match(human_vs_computer(start_score=40, computer_first=True), simulator=ScriptedSimulator())

    outcomes = match.execute_ai_turn()
    assert len(outcomes) == 1
    assert outcomes[0].checkout
    assert match.game_over
    assert match.result().winner_name == "CPU"


def test_computer_opens_and_finishes_low_double_in_start():
    """Double-in from 30: the opening double is the finishing double."""
    config = human_vs_computer(start_score=30, computer_first=True, double_in=True)
    simulator = ScriptedSimulator()
    match = Match(config, simulator=simulator)

    outcomes = match.execute_ai_turn()
    assert simulator.targets == [AimTarget(15, 2)]
    assert outcomes[-1].checkout
    assert match.game_over


def test_computer_cricket_turn():
    match = Match(human_vs_computer(mode="cricket", computer_first=True), simulator=ScriptedSimulator())

    outcomes = match.execute_ai_turn()
    assert len(outcomes) == 3
    assert not match.game_over
    assert match.players[0].rounds == 1


def test_undo_refused_during_computer_turn():
    match = Match(human_vs_computer(), simulator=ScriptedSimulator())
    for _ in range(3):
        match.throw_dart(Segment(1))

    assert match.begin_ai_turn()
    assert not match.begin_ai_turn()
    assert match.phase == MatchPhase.AI_TURN
    assert not match.can_undo
    assert not match.undo()

    match.end_ai_turn()
    assert match.undo()


# ============================================================
# Rematch and results
# ============================================================

def test_rematch_resets_everything():
    match = Match(humans())
    match.throw_dart(Segment(20, 3))
    generation = match.generation

    match.rematch()
    assert match.generation == generation + 1
    assert match.undo_depth == 0
    assert match.players[0].remaining == 501
    assert match.turn.darts_thrown == 0
    assert match.current_player_idx == 0


def test_stale_computer_dart_discarded():
    match = Match(human_vs_computer(computer_first=True), simulator=ScriptedSimulator())
    stale = match.generation
    match.rematch()

    assert match.execute_ai_dart(generation=stale) is None
    assert match.turn.darts_thrown == 0
    assert match.execute_ai_dart(generation=match.generation) is not None


def test_match_result():
    received = []
    match = Match(humans(start_score=40), on_game_over=received.append)

    match.throw_dart(Segment(20))
    match.throw_dart(Segment(10))
    match.throw_dart(MISS)
    for _ in range(3):
        match.throw_dart(MISS)
    match.throw_dart(Segment(5, 2))

    assert len(received) == 1
    result = received[0]
    assert result is match.result()
    assert result.mode == "x01"
    assert result.winner_name == "Alice"

    alice, bob = result.players
    assert alice.won and not bob.won
    assert alice.skill is None
    assert alice.x01_stats.darts_thrown == 4
    assert alice.x01_stats.checkout_attempts == 2
    assert alice.x01_stats.checkout_hits == 1
    assert bob.x01_stats.final_remaining == 40

    data = result.to_dict()
    assert data["players"][0]["name"] == "Alice"
    assert data["players"][1]["cricket_stats"] is None


def test_match_result_saves_as_yaml(tmp_path):
    match = Match(humans(start_score=40))
    match.throw_dart(Segment(20, 2))

    out = tmp_path / "results.yaml"
    save_match_results(out, [match.result().to_dict()])

    saved = load_yaml(out)["results"][0]
    assert saved["winner_name"] == "Alice"
    assert saved["players"][0]["x01_stats"]["checkout_hits"] == 1


def test_game_over_handler_failure_is_logged(caplog):
    def broken_handler(result):
        raise RuntimeError("disk full")

    match = Match(humans(start_score=40), on_game_over=broken_handler)
    with caplog.at_level(logging.WARNING):
        match.throw_dart(Segment(20, 2))

    assert match.game_over
    assert match.result() is not None
    assert "Game over handler failed" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
