"""
Main entry point for playing Shape Grid in a terminal.

Usage:
    python -m src.main
    python -m src.main configs/default.yaml --seed 7
    python -m src.main --simulate 0.8 --output results/run1.json --verbose
"""

import argparse
import logging
import random
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from .session import GameConfig, GameSession, ManualScheduler, ResolutionOutcome
from .utils.grid_visualizer import glyph, parse_choice, render_puzzle


def load_config(config_path: str) -> GameConfig:
    """Load game configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return GameConfig(**data)


def run_simulation(
    config: GameConfig,
    accuracy: float,
    think_time: float = 2.0,
    seed: Optional[int] = None,
) -> GameSession:
    """
    Play a full game with a bot that answers correctly with probability `accuracy`.

    A think_time at or beyond the time limit lets every puzzle time out.

    Args:
        config: Game configuration
        accuracy: Probability of picking the correct answer (0-1)
        think_time: Time units the bot waits before answering
        seed: Seed for the bot's own choices

    Returns:
        The finished GameSession
    """
    if not 0.0 <= accuracy <= 1.0:
        raise ValueError(f"Accuracy must be between 0 and 1, got {accuracy}")

    scheduler = ManualScheduler()
    session = GameSession.create(config=config, scheduler=scheduler)
    bot = random.Random(seed)

    session.start()
    while not session.is_complete:
        scheduler.advance(min(think_time, session.time_remaining * config.tick_interval))

        if not session.is_processing:
            puzzle = session.current_puzzle
            if bot.random() < accuracy:
                choice = puzzle.correct_answer
            else:
                choice = bot.choice([s for s in puzzle.answer_options if s != puzzle.correct_answer])
            session.submit_answer(choice)

        # Run the settle delay to its due time, then make sure a puzzle is up
        if session.state == "resolving":
            scheduler.advance(scheduler.next_due() - scheduler.now)
        if session.state == "transition":
            session.load_puzzle()

    return session


def _print_outcome(outcome: ResolutionOutcome) -> None:
    if outcome.timed_out:
        print(f"Time's up! The answer was {glyph(outcome.correct_answer)} {outcome.correct_answer}.")
    elif outcome.correct:
        print("Correct!")
    else:
        print(f"Wrong. The answer was {glyph(outcome.correct_answer)} {outcome.correct_answer}.")
    print(f"Score: {outcome.display_score}")


def play_interactive(config: GameConfig) -> GameSession:
    """
    Play in the terminal, reading answers from stdin.

    The virtual clock moves by the real time spent at the prompt, capped at
    the time left. An answer typed after its puzzle timed out is dropped
    rather than applied to whatever puzzle is on screen by then.
    """
    scheduler = ManualScheduler()
    session = GameSession.create(config=config, scheduler=scheduler)
    session.on_answer = _print_outcome

    session.start()
    while True:
        while not session.is_complete:
            puzzle = session.current_puzzle
            print()
            print(f"Level {session.level} / {session.total_levels}    "
                  f"Score: {session.display_score}    "
                  f"Time: {session.time_remaining * config.tick_interval:.0f}s")
            print(render_puzzle(puzzle))

            started = time.monotonic()
            try:
                raw = input("Your answer (1-4, q to quit): ")
            except EOFError:
                raw = "q"
            elapsed = time.monotonic() - started

            if raw.strip().lower() == "q":
                return session

            scheduler.advance(min(elapsed, session.time_remaining * config.tick_interval))

            if session.current_puzzle is puzzle and session.state == "active":
                choice = parse_choice(raw, puzzle.answer_options)
                if choice is None:
                    print("Pick one of the numbered options.")
                    continue
                session.submit_answer(choice)

            if session.state == "resolving":
                # Only the settle delay is queued while resolving
                scheduler.advance(scheduler.next_due() - scheduler.now)
            if session.state == "transition":
                session.load_puzzle()

        print()
        print(f"Game over! Score: {session.display_score}    Accuracy: {session.accuracy}%")
        try:
            again = input("Play again? [y/N]: ")
        except EOFError:
            again = ""
        if again.strip().lower() not in ("y", "yes"):
            return session
        session.restart()


def main():
    parser = argparse.ArgumentParser(
        description="Play Shape Grid, a Latin-square shape puzzle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  total_levels: 100
  time_limit: 15
  points_per_correct: 10
  points_per_wrong: -5
  seed: 42
        """
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Path to YAML configuration file (defaults are used if omitted)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for puzzle generation (overrides the config)"
    )
    parser.add_argument(
        "--simulate",
        type=float,
        metavar="ACCURACY",
        help="Let a bot play, answering correctly with this probability (0-1)"
    )
    parser.add_argument(
        "--think-time",
        type=float,
        default=2.0,
        help="Time units the simulated player takes per answer (default: 2)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Path to save results JSON (default: results/<timestamp>.json)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else GameConfig()
        if args.seed is not None:
            config = config.model_copy(update={"seed": args.seed})
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        output_path = Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = Path("results") / f"game_{timestamp}.json"

    if args.simulate is not None:
        try:
            session = run_simulation(config, args.simulate, think_time=args.think_time, seed=args.seed)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        try:
            session = play_interactive(config)
        except KeyboardInterrupt:
            print("\nGame interrupted by user")
            return 0

    session.save_result(output_path)
    result = session.get_result()

    # Print summary
    print()
    print("=== Game Summary ===")
    print(f"State: {result.state}")
    print(f"Levels completed: {result.levels_completed} / {config.total_levels}")
    print(f"Final score: {result.final_score}")
    print(f"Accuracy: {result.accuracy}%")
    print(f"Results saved to: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
