"""
Command line tool for workout sessions.

Usage examples:
    # Start the quick workout (or a specific workout template id)
    python -m gymbo.cli start
    python -m gymbo.cli start --workout-id 2f0c...

    # Show the current session with numbered exercises and sets
    python -m gymbo.cli status

    # Complete set 2 of exercise 1 in the active session
    python -m gymbo.cli complete 1 2

    # Pause, resume and end
    python -m gymbo.cli pause
    python -m gymbo.cli resume
    python -m gymbo.cli end

    # Recent sessions
    python -m gymbo.cli history --limit 5

    # Remove every stored session
    python -m gymbo.cli reset --yes
"""
import argparse
import asyncio
import logging
import sys
from uuid import UUID, uuid4

from gymbo.config.settings import get_settings
from gymbo.container import DependencyContainer
from gymbo.core.exceptions import (
    BusinessRuleError,
    DomainError,
    SessionNotFoundError,
    ValidationError,
)
from gymbo.core.logging import add_log_context, clear_log_context, configure_logging
from gymbo.models.enums import SessionState
from gymbo.repositories.base import SessionRepository
from gymbo.schemas.session import WorkoutSession


def format_session(session: WorkoutSession) -> str:
    """Render a session with 1-based exercise and set numbers."""
    lines = [
        f"{session.workout_name or 'Workout'} [{session.state.value}] {session.id}",
        f"  Started: {session.start_date:%Y-%m-%d %H:%M}  Duration: {session.formatted_duration()}",
        f"  Progress: {session.completed_sets}/{session.total_sets} sets, {int(session.total_volume)} kg volume",
    ]
    for exercise_number, exercise in enumerate(session.exercises, start=1):
        rest = exercise.formatted_rest_time_to_next
        header = f"  {exercise_number}. Exercise {exercise.exercise_id}"
        if rest:
            header += f" (rest {rest})"
        lines.append(header)
        if exercise.has_notes:
            lines.append(f"     Note: {exercise.notes}")
        for set_number, session_set in enumerate(exercise.sets, start=1):
            mark = "x" if session_set.completed else " "
            lines.append(
                f"     [{mark}] {set_number}: {session_set.formatted_weight} x {session_set.formatted_reps}"
            )
    return "\n".join(lines)


async def _resolve_session(
    repository: SessionRepository,
    session_id: UUID | None,
    states: tuple[SessionState, ...] = (SessionState.ACTIVE,),
) -> WorkoutSession:
    """Explicit id, else the active session, else the newest session in `states`."""
    if session_id is not None:
        session = await repository.fetch(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    active = await repository.fetch_active_session()
    if active is not None and SessionState.ACTIVE in states:
        return active

    settings = get_settings()
    for session in await repository.fetch_recent_sessions(settings.recent_sessions_limit):
        if session.state in states:
            return session
    wanted = " or ".join(s.value for s in states)
    raise BusinessRuleError(f"No {wanted} session found", code="BR_NO_ACTIVE_SESSION")


async def start_command(container: DependencyContainer, args) -> None:
    workout_id = args.workout_id if args.workout_id is not None else uuid4()
    session = await container.make_start_session_use_case().execute(workout_id)
    print("✅ Workout started!")
    print(format_session(session))


async def status_command(container: DependencyContainer, args) -> None:
    repository = container.make_session_repository()
    session = await _resolve_session(
        repository, args.session_id, (SessionState.ACTIVE, SessionState.PAUSED)
    )
    print(format_session(session))


async def complete_command(container: DependencyContainer, args) -> None:
    repository = container.make_session_repository()
    session = await _resolve_session(repository, args.session_id)

    if not 1 <= args.exercise <= len(session.exercises):
        raise ValidationError("exercise", f"Exercise number must be between 1 and {len(session.exercises)}")
    exercise = session.exercises[args.exercise - 1]
    if not 1 <= args.set <= len(exercise.sets):
        raise ValidationError("set", f"Set number must be between 1 and {len(exercise.sets)}")
    session_set = exercise.sets[args.set - 1]

    await container.make_complete_set_use_case().execute(session.id, exercise.id, session_set.id)
    print(f"✅ Set {args.set} of exercise {args.exercise} completed")
    if exercise.formatted_rest_time_to_next:
        print(f"   Rest: {exercise.formatted_rest_time_to_next}")


async def pause_command(container: DependencyContainer, args) -> None:
    session = await _resolve_session(container.make_session_repository(), args.session_id)
    await container.make_pause_session_use_case().execute(session.id)
    print(f"⏸  Workout paused ({session.id})")


async def resume_command(container: DependencyContainer, args) -> None:
    session = await _resolve_session(
        container.make_session_repository(), args.session_id, (SessionState.PAUSED,)
    )
    await container.make_resume_session_use_case().execute(session.id)
    print(f"▶  Workout resumed ({session.id})")


async def end_command(container: DependencyContainer, args) -> None:
    session = await _resolve_session(
        container.make_session_repository(), args.session_id, (SessionState.ACTIVE, SessionState.PAUSED)
    )
    completed = await container.make_end_session_use_case().execute(session.id)
    print("🎉 Workout completed!")
    print(format_session(completed))


async def history_command(container: DependencyContainer, args) -> None:
    repository = container.make_session_repository()
    if args.workout_id is not None:
        sessions = await repository.fetch_sessions(args.workout_id)
        sessions = sessions[: args.limit]
    else:
        sessions = await repository.fetch_recent_sessions(args.limit)

    if not sessions:
        print("No sessions found")
        return
    for session in sessions:
        print(
            f"{session.start_date:%Y-%m-%d %H:%M}  {session.state.value:<9}  "
            f"{session.completed_sets}/{session.total_sets} sets  "
            f"{session.workout_name or '-'}  {session.id}"
        )


async def reset_command(container: DependencyContainer, args) -> None:
    if not args.yes:
        raise BusinessRuleError("Refusing to delete all sessions without --yes", code="BR_CONFIRMATION_REQUIRED")
    count = await container.make_session_repository().delete_all()
    print(f"🗑  Deleted {count} sessions")


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description=f"{get_settings().app_name} workout session CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show log output")
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (defaults to GYMBO_DATABASE_URL or ./gymbo.db)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    start_parser = subparsers.add_parser("start", help="Start a new workout session")
    start_parser.add_argument("--workout-id", "-w", type=UUID, help="Workout template id")
    start_parser.set_defaults(func=start_command)

    status_parser = subparsers.add_parser("status", help="Show the current session")
    status_parser.add_argument("--session-id", "-s", type=UUID, help="Session id")
    status_parser.set_defaults(func=status_command)

    complete_parser = subparsers.add_parser("complete", help="Complete a set")
    complete_parser.add_argument("exercise", type=int, help="Exercise number (1-based)")
    complete_parser.add_argument("set", type=int, help="Set number (1-based)")
    complete_parser.add_argument("--session-id", "-s", type=UUID, help="Session id")
    complete_parser.set_defaults(func=complete_command)

    for name, help_text, func in (
        ("pause", "Pause the active session", pause_command),
        ("resume", "Resume a paused session", resume_command),
        ("end", "End the current session", end_command),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--session-id", "-s", type=UUID, help="Session id")
        sub.set_defaults(func=func)

    history_parser = subparsers.add_parser("history", help="List recent sessions")
    history_parser.add_argument("--limit", "-n", type=int, default=get_settings().recent_sessions_limit)
    history_parser.add_argument("--workout-id", "-w", type=UUID, help="Only sessions of this workout template")
    history_parser.set_defaults(func=history_command)

    reset_parser = subparsers.add_parser("reset", help="Delete all stored sessions")
    reset_parser.add_argument("--yes", action="store_true", help="Confirm deletion")
    reset_parser.set_defaults(func=reset_command)

    return parser


async def run(args) -> int:
    add_log_context(command=args.command)
    container = await DependencyContainer.create(database_url=args.database_url)
    try:
        await args.func(container, args)
    except DomainError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1
    finally:
        await container.aclose()
        clear_log_context()
    return 0


def main(argv: list[str] | None = None):
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
