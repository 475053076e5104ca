"""Terminal session runner — plans, paces and times one training day.

Usage:
    python -m runner.run_session --day 12 --modality echo_bike
    python -m runner.run_session --day 12 --modality c2_row_erg --demo
    python -m runner.run_session --time-trial 412 --units cal --modality echo_bike
    python -m runner.run_session --countdown --units cal --modality echo_bike
    python -m runner.run_session --calendar 20

Commands while running: s=start  p=pause  r=resume  k=skip to end
x=reset  q=quit.
"""

from __future__ import annotations

import argparse
import logging
import queue
import sys
import threading

from session_engine.aggregation.validation import parse_total_output
from session_engine.errors import SessionEngineError, ValidationError
from session_engine.formatting import format_clock, format_duration
from session_engine.models.catalog import modality_label
from session_engine.planner.day_types import display_name
from session_engine.session import TrainingSession, load_program_calendar, record_time_trial
from session_engine.time_trial import TimeTrialSession
from session_engine.timer.states import Completed, TimerState, state_name
from session_engine.timer.tick_source import SchedulerTickSource, SerializedTickSource
from store_client import RestDataStore, StoreClientError

from runner.config import LOG_LEVEL, STORE_API_KEY, STORE_URL, TICK_SECONDS, USER_ID

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_POLL_SECONDS = 0.1


def _build_store(demo: bool) -> RestDataStore | None:
    if demo or not STORE_URL:
        logger.info("Running without a data store")
        return None
    return RestDataStore(STORE_URL, STORE_API_KEY)


def _read_lines(lines: "queue.Queue[str]") -> None:
    """Stdin reader thread; EOF is reported as a quit command."""
    for line in sys.stdin:
        lines.put(line.strip())
    lines.put("q")


def _print_plan(session: TrainingSession) -> None:
    workout = session.workout
    print(f"Day {workout.day_number}: {display_name(workout.day_type)}")
    print(f"Total work: {format_duration(session.total_work_seconds)}")
    for interval in session.timer.intervals:
        target = interval.target_pace
        pace = f"{target.pace:.1f} {target.units}/min ({target.intensity_percent}%)" if target else "-"
        rest = f" + {format_clock(interval.rest_duration)} rest" if interval.rest_duration else ""
        print(f"  {interval.id:>3}. {interval.description:<28} {format_clock(interval.duration)}{rest}  {pace}")


class _StatusPrinter:
    """Timer listener: a header line per state change, then a live clock."""

    def __init__(self) -> None:
        self._last_name = ""

    def __call__(self, state: TimerState) -> None:
        name = state_name(state)
        if name != self._last_name:
            print(f"\n[{name}]")
            self._last_name = name
        if isinstance(state, Completed):
            return
        print(
            f"\r{state.phase.name.lower():<5} {format_clock(state.seconds_remaining)}  "
            f"interval {state.interval_index + 1}",
            end="",
            flush=True,
        )


def _apply_command(session: TrainingSession | TimeTrialSession, command: str) -> bool:
    """Apply one typed command; returns False when the user quits."""
    actions = {
        "s": session.start,
        "p": session.pause,
        "r": session.resume,
        "k": session.skip_to_end,
        "x": session.reset,
    }
    if command == "q":
        return False
    action = actions.get(command)
    if action is None:
        if command:
            print("Commands: s=start p=pause r=resume k=skip x=reset q=quit")
        return True
    try:
        action()
    except SessionEngineError as exc:
        print(f"\n{exc}")
    return True


def _prompt(lines: "queue.Queue[str]", label: str) -> str:
    print(label, end="", flush=True)
    return lines.get()


def _run_timer(
    session: TrainingSession | TimeTrialSession,
    events: "queue.Queue",
    lines: "queue.Queue[str]",
) -> bool:
    """Event loop; every tick and command runs on this thread. False on quit."""
    while not isinstance(session.timer.state, Completed):
        try:
            command = lines.get_nowait()
        except queue.Empty:
            command = None
        if command is not None and not _apply_command(session, command):
            return False

        try:
            deliver = events.get(timeout=_POLL_SECONDS)
        except queue.Empty:
            continue
        deliver()
    return True


def _submit(session: TrainingSession, lines: "queue.Queue[str]") -> None:
    while True:
        try:
            output = parse_total_output(_prompt(lines, "\nTotal output: "))
            break
        except ValidationError as exc:
            print(exc)

    result = session.submit_results(
        output,
        _prompt(lines, "Average heart rate (blank to skip): "),
        _prompt(lines, "Peak heart rate (blank to skip): "),
        _prompt(lines, "RPE 1-10 (blank to skip): "),
    )

    print(f"Average pace: {result.average_pace:.2f}")
    if result.target_pace is not None:
        print(f"Target pace:  {result.target_pace:.2f}")
    if result.performance_ratio is not None:
        print(f"Ratio:        {result.performance_ratio:.3f}")
    print(f"Intervals:    {result.intervals_completed}/{result.total_intervals}")


def run_day(day: int, modality: str, demo: bool) -> int:
    store = _build_store(demo)
    events: queue.Queue = queue.Queue()
    ticks = SchedulerTickSource(TICK_SECONDS)
    session = TrainingSession(
        store,
        USER_ID,
        day,
        SerializedTickSource(ticks, events),
        on_change=_StatusPrinter(),
    )

    try:
        session.load()
        session.select_modality(modality)
    except (SessionEngineError, StoreClientError) as exc:
        logger.error("Could not prepare day %d: %s", day, exc)
        return 1

    print(f"Modality: {modality_label(modality)}")
    _print_plan(session)
    if session.baseline is None:
        print("No baseline for this modality; record a time trial first.")
        return 1

    lines: queue.Queue[str] = queue.Queue()
    threading.Thread(target=_read_lines, args=(lines,), daemon=True).start()
    print("Type s to start.")

    try:
        finished = _run_timer(session, events, lines)
    finally:
        ticks.shutdown()
    if not finished:
        logger.info("Session abandoned")
        return 0

    try:
        _submit(session, lines)
    except StoreClientError as exc:
        logger.error("Failed to save session: %s", exc)
        return 1
    return 0


def run_time_trial(modality: str, total_output: float, units: str) -> int:
    store = _build_store(demo=False)
    if store is None or not store.is_connected():
        logger.error("A data store is needed to record a time trial")
        return 1
    try:
        baseline = record_time_trial(store, USER_ID, modality, total_output, units)
    except (SessionEngineError, StoreClientError) as exc:
        logger.error("Failed to record time trial: %s", exc)
        return 1
    print(f"New baseline for {modality_label(modality)}: {baseline.rate:.2f} {baseline.units}/min")
    return 0


def run_countdown(modality: str, units: str) -> int:
    """Timed 10-minute trial; the score entered at the end sets the baseline."""
    store = _build_store(demo=False)
    if store is None or not store.is_connected():
        logger.error("A data store is needed to record a time trial")
        return 1

    events: queue.Queue = queue.Queue()
    ticks = SchedulerTickSource(TICK_SECONDS)
    trial = TimeTrialSession(
        store, USER_ID, modality, SerializedTickSource(ticks, events), on_change=_StatusPrinter(),
    )

    try:
        previous = trial.previous_baselines()
    except StoreClientError as exc:
        logger.warning("Could not load previous time trials: %s", exc)
        previous = []
    print(f"Time trial: {modality_label(modality)}, {format_clock(trial.seconds_remaining)}")
    for past in previous:
        print(f"  {past.trial_date}  {past.total_output:g} {past.units}  {past.calculated_rpm:.2f} {past.units}/min")

    lines: queue.Queue[str] = queue.Queue()
    threading.Thread(target=_read_lines, args=(lines,), daemon=True).start()
    print("Type s to start.")

    try:
        finished = _run_timer(trial, events, lines)
    finally:
        ticks.shutdown()
    if not finished:
        logger.info("Time trial abandoned")
        return 0

    while True:
        score = _prompt(lines, f"\nScore ({units}): ")
        if score == "q":
            return 0
        try:
            baseline = trial.submit_score(score, units)
            break
        except ValidationError as exc:
            print(exc)
        except (SessionEngineError, StoreClientError) as exc:
            logger.error("Failed to record time trial: %s", exc)
            return 1
    print(f"New baseline for {modality_label(modality)}: {baseline.rate:.2f} {baseline.units}/min")
    return 0


def run_calendar(days: int) -> int:
    store = _build_store(demo=False)
    if store is None or not store.is_connected():
        logger.error("A data store is needed to show the program calendar")
        return 1
    try:
        statuses = load_program_calendar(store, USER_ID, range(1, days + 1))
    except StoreClientError as exc:
        logger.error("Could not load the program calendar: %s", exc)
        return 1
    for day, status in statuses.items():
        print(f"Day {day:>3}  {status.value}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Interval training session runner")
    parser.add_argument("--modality", help="Equipment, e.g. echo_bike")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--day", type=int, help="Training day number to run")
    group.add_argument("--time-trial", type=float, metavar="SCORE", help="Record a 10-minute time trial")
    group.add_argument("--countdown", action="store_true", help="Run a timed 10-minute time trial")
    group.add_argument("--calendar", type=int, metavar="DAYS", help="Show the status of days 1..DAYS")
    parser.add_argument("--units", default="cal", help="Units of the time-trial score")
    parser.add_argument("--demo", action="store_true", help="Ignore the data store")
    args = parser.parse_args()

    if args.calendar is not None:
        sys.exit(run_calendar(args.calendar))
    if not args.modality:
        parser.error("--modality is required")
    if args.time_trial is not None:
        sys.exit(run_time_trial(args.modality, args.time_trial, args.units))
    if args.countdown:
        sys.exit(run_countdown(args.modality, args.units))
    sys.exit(run_day(args.day, args.modality, args.demo))


if __name__ == "__main__":
    main()
