#!/usr/bin/env python3
"""Offline CLI to playtest band chemistry balance week by week.

Usage:
    python simulate.py                                  # 12 weeks from default state
    python simulate.py --weeks 52 --seed 7              # reproducible year
    python simulate.py --trigger gig_outcome --trigger songwriting_session
    python simulate.py --state 40 65 50 70              # chemistry tension alignment conflict

Each week runs the weekly_check trigger plus any extra --trigger sources,
applies whatever fires, then applies weekly drift.

No server, database, or Docker needed.
"""

import argparse
import random
import sys

from band_dynamics.core.application import apply_presets
from band_dynamics.core.drift import weekly_drift
from band_dynamics.core.modifiers import compute_modifiers
from band_dynamics.core.presets import DramaSeverity, preset_catalog
from band_dynamics.core.roller import DEFAULT_MAX_EVENTS, roll_events
from band_dynamics.core.state import BandChemistryState
from band_dynamics.core.triggers import TriggerSource, evaluate_triggers

# --- ANSI Colors ---
SEVERITY_COLORS = {
    DramaSeverity.MINOR: "\033[90m",
    DramaSeverity.MODERATE: "\033[93m",
    DramaSeverity.MAJOR: "\033[91m",
    DramaSeverity.CRITICAL: "\033[1;91m",
}

DIVIDER = "\033[90m" + "─" * 60 + "\033[0m"
GREEN = "\033[92m"
RESET = "\033[0m"
DIM = "\033[90m"
BOLD = "\033[1m"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate band chemistry over several weeks.")
    parser.add_argument("--weeks", type=int, default=12, help="number of weeks to simulate")
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible runs")
    parser.add_argument(
        "--trigger",
        action="append",
        default=[],
        choices=[s.value for s in TriggerSource if s is not TriggerSource.WEEKLY_CHECK],
        help="extra trigger source evaluated every week (repeatable)",
    )
    parser.add_argument(
        "--state",
        type=int,
        nargs=4,
        metavar=("CHEM", "TENSION", "ALIGN", "CONFLICT"),
        help="starting state (clamped to 0-100)",
    )
    parser.add_argument("--max-events", type=int, default=DEFAULT_MAX_EVENTS)
    return parser.parse_args(argv)


def format_state(state: BandChemistryState) -> str:
    return (
        f"chem {state.chemistry_level:3d}  tension {state.romantic_tension:3d}  "
        f"align {state.creative_alignment:3d}  conflict {state.conflict_index:3d}"
    )


def format_modifiers(state: BandChemistryState, rng: random.Random) -> str:
    m = compute_modifiers(state, rng=rng)
    return (
        f"song x{m.song_quality:.3f}  perf x{m.performance_rating:.3f}  "
        f"rehearsal x{m.rehearsal_efficiency:.3f}  leave {m.member_leave_risk}%  "
        f"drama {m.drama_event_chance}%  fans {m.fan_perception:+d}"
    )


def run_week(
    week: int,
    state: BandChemistryState,
    sources: list[str],
    rng: random.Random,
    max_events: int,
) -> BandChemistryState:
    """Run one simulated week and print what happened. Returns the new state."""
    print(DIVIDER)
    print(f"{BOLD}Week {week}{RESET}")

    for source in sources:
        candidates = evaluate_triggers(state, source)
        fired = roll_events(candidates, max_events=max_events, rng=rng)
        if not fired:
            continue
        state, applied = apply_presets(state, fired)
        for drama in applied:
            preset = drama.preset
            color = SEVERITY_COLORS.get(preset.severity, "")
            public = " [public]" if preset.is_public else ""
            print(f"  {color}{preset.label}{RESET} ({preset.severity.value}){public} via {source}")
            print(f"    {DIM}{preset.description}{RESET}")

    changes = weekly_drift(state)
    state = state.apply(changes)
    if changes:
        print(f"  {GREEN}drift{RESET} {DIM}{changes}{RESET}")

    print(f"  {format_state(state)}")
    print(f"  {DIM}{format_modifiers(state, rng)}{RESET}")
    return state


def main(argv: list[str] | None = None):
    args = parse_args(sys.argv[1:] if argv is None else argv)
    rng = random.Random(args.seed)

    if args.state:
        chem, tension, align, conflict = args.state
        state = BandChemistryState(
            chemistry_level=chem,
            romantic_tension=tension,
            creative_alignment=align,
            conflict_index=conflict,
        )
    else:
        state = BandChemistryState()

    sources = [TriggerSource.WEEKLY_CHECK.value] + args.trigger

    print()
    print(f"{BOLD}" + "=" * 60 + f"{RESET}")
    print(f"{BOLD}  Band chemistry simulation: {args.weeks} weeks{RESET}")
    print(f"  {DIM}{len(preset_catalog)} presets, triggers: {', '.join(sources)}{RESET}")
    print(f"{BOLD}" + "=" * 60 + f"{RESET}")
    print(f"  start  {format_state(state)}")

    for week in range(1, args.weeks + 1):
        state = run_week(week, state, sources, rng, args.max_events)

    print(DIVIDER)
    print(f"{BOLD}  Final{RESET}  {format_state(state)}")
    print()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{DIM}Simulation aborted.{RESET}")
