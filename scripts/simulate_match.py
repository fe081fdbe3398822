"""
Computer vs computer match simulator.

Plays a series of matches between two computer players and prints win
rates and averages. Useful for checking how skill levels compare.

Usage:
    python scripts/simulate_match.py
    python scripts/simulate_match.py --mode cricket --games 200
    python scripts/simulate_match.py --skill-a 9 --skill-b 6 --start-score 301 --seed 7
    python scripts/simulate_match.py --config config/default_config.yaml --paced
    python scripts/simulate_match.py --games 500 --output results.yaml
"""
import sys
import argparse
from pathlib import Path
import logging

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dartsim.ai import ThrowSimulator
from dartsim.core import save_match_results
from dartsim.game import (
    AiConfig,
    AiTurnRunner,
    Match,
    MatchConfig,
    PlayerProfile,
    load_match_config,
)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Stop runaway matches (two very weak players can take a long time)
MAX_TURNS = 1000


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Simulate computer vs computer dart matches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, help="YAML config with match rules")
    parser.add_argument("-m", "--mode", choices=["x01", "cricket"], help="Game mode")
    parser.add_argument("--start-score", type=int, help="X01 start score")
    parser.add_argument("--double-in", action="store_true", help="Require a double to start")
    parser.add_argument("--single-out", action="store_true", help="Allow finishing on any dart")
    parser.add_argument("--skill-a", type=int, default=7, help="Skill of player A (1-10)")
    parser.add_argument("--skill-b", type=int, default=5, help="Skill of player B (1-10)")
    parser.add_argument("-n", "--games", type=int, default=100, help="Number of matches")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--paced", action="store_true", help="Play one match with display pacing")
    parser.add_argument("-o", "--output", type=str, help="Write every match result to this YAML file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args()


def build_config(args) -> MatchConfig:
    """Merge command line options over the YAML config."""
    base = load_match_config(Path(args.config)) if args.config else MatchConfig()
    return MatchConfig(
        mode=args.mode or base.mode,
        start_score=args.start_score or base.start_score,
        double_in=args.double_in or base.double_in,
        double_out=base.double_out and not args.single_out,
        players=[
            PlayerProfile(f"CPU A ({args.skill_a})", is_computer=True, skill=args.skill_a),
            PlayerProfile(f"CPU B ({args.skill_b})", is_computer=True, skill=args.skill_b),
        ],
        ai=AiConfig(
            start_delay_sec=base.ai.start_delay_sec,
            dart_delay_sec=base.ai.dart_delay_sec,
            seed=args.seed if args.seed is not None else base.ai.seed,
        ),
    )


def play_paced(match: Match) -> None:
    """Play one match turn by turn with the configured delays."""
    def show(outcome):
        print(f"  {match.profiles[outcome.player_idx].name}: {outcome.segment.label}"
              f"{' BUST' if outcome.bust else ''}")

    while not match.game_over:
        runner = AiTurnRunner(match, on_dart=show)
        if not runner.start():
            break
        runner.join()


def play_series(config: MatchConfig, games: int) -> list:
    """Play a series of matches, print a summary and return the results."""
    simulator = ThrowSimulator(seed=config.ai.seed)
    match = Match(config, simulator=simulator)

    wins = [0, 0]
    averages = [[], []]
    darts = []
    results = []

    for game in range(games):
        # Alternate who throws first
        if game > 0:
            match.profiles.reverse()
            match.rematch()

        turns = 0
        while not match.game_over and turns < MAX_TURNS:
            match.execute_ai_turn()
            turns += 1

        result = match.result()
        if result is None:
            logger.warning(f"Game {game + 1} stopped after {MAX_TURNS} turns")
            continue

        results.append(result.to_dict())
        winner_slot = 0 if result.winner_name == config.players[0].name else 1
        wins[winner_slot] += 1
        darts.append(sum(p.x01_stats.darts_thrown if p.x01_stats else p.cricket_stats.darts_thrown
                         for p in result.players if p.won))

        for player in result.players:
            slot = 0 if player.name == config.players[0].name else 1
            if player.x01_stats:
                averages[slot].append(player.x01_stats.average_per_turn)
            else:
                averages[slot].append(player.cricket_stats.average_marks_per_round)

    label = "3-dart avg" if config.mode == "x01" else "marks/round"
    print(f"\n{match.game_mode.get_name()} - {games} games")
    for slot, profile in enumerate(config.players):
        mean = float(np.mean(averages[slot])) if averages[slot] else 0.0
        print(f"  {profile.name:12s} wins {wins[slot]:4d}  {label} {mean:6.2f}")
    if darts:
        print(f"  Winning darts: median {float(np.median(darts)):.0f}")

    return results


def main():
    """Run the simulator."""
    args = parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = build_config(args)

    if args.paced:
        match = Match(config)
        play_paced(match)
        result = match.result()
        if result:
            print(f"Winner: {result.winner_name}")
        return

    logging.getLogger("dartsim").setLevel(logging.WARNING)
    results = play_series(config, args.games)

    if args.output:
        count = save_match_results(Path(args.output), results)
        print(f"{count} results saved to {args.output}")


if __name__ == "__main__":
    main()
