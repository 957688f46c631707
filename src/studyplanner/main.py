"""Entry point for the study planner CLI."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from .activity import ActivityLog
from .config import DEFAULT_CONFIG_PATH, Config, load_config
from .loop import run_timer_loop
from .models import ResourceCategory, ResourceSubject, Subject, TaskPriority
from .notify import show_timer_finished
from .resources import ResourceStore
from .scheduler import ThreadingScheduler
from .session import SessionController, seconds_to_minutes
from .stats import StudyStats
from .storage import LocalStore
from .tasks import TaskStore
from .timer import TIMER_PRESETS, CountdownTimer, find_preset, format_duration

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _load(args: argparse.Namespace) -> Config:
    config_path: Path = args.config
    if config_path.exists():
        config = load_config(config_path)
    elif config_path != DEFAULT_CONFIG_PATH:
        print(f"Configuration file not found: {config_path}", file=sys.stderr)
        sys.exit(1)
    else:
        config = Config()
    setup_logging(args.verbose, config.log_file)
    return config


def _open(config: Config) -> tuple[StudyStats, TaskStore]:
    store = LocalStore(config.data_dir)
    stats = StudyStats(store)
    return stats, TaskStore(store, stats)


def cmd_timer(args: argparse.Namespace) -> None:
    """Run a countdown and record the session when it ends."""
    config = _load(args)
    stats, _ = _open(config)

    minutes = config.default_duration_minutes
    label = "study"
    if args.preset:
        preset = find_preset(args.preset)
        if preset is None:
            names = ", ".join(p.label for p in TIMER_PRESETS)
            print(f"Unknown preset {args.preset!r}. Choose one of: {names}", file=sys.stderr)
            sys.exit(1)
        minutes, label = preset.minutes, preset.label
    elif args.minutes is not None:
        if args.minutes <= 0:
            print("--minutes must be positive", file=sys.stderr)
            sys.exit(1)
        minutes = args.minutes

    subject = args.subject or config.default_subject

    scheduler = ThreadingScheduler()
    timer = CountdownTimer(
        scheduler,
        total_seconds=minutes * 60,
        on_expire=lambda t: show_timer_finished(subject, seconds_to_minutes(t.elapsed_seconds)),
    )
    controller = SessionController(timer, stats, subject=subject, label=label)
    try:
        session = run_timer_loop(controller, enable_tray=not args.no_tray)
    finally:
        scheduler.shutdown()

    if session:
        print(f"Saved {session.duration_minutes} minute {session.subject} session.")
    else:
        print("No session saved.")
    user_stats = stats.user_stats
    print(
        f"Total: {user_stats.total_study_time_minutes} min, "
        f"streak: {user_stats.current_streak_days} day(s)"
    )


def cmd_stats(args: argparse.Namespace) -> None:
    """Print aggregate statistics."""
    config = _load(args)
    stats, tasks = _open(config)
    user_stats = stats.user_stats
    counts = tasks.counts()

    hours, mins = divmod(user_stats.total_study_time_minutes, 60)
    print(f"Total study time: {hours}h {mins}m")
    print(f"Current streak:   {user_stats.current_streak_days} day(s)")
    if user_stats.last_study_date:
        print(f"Last studied:     {user_stats.last_study_date.isoformat()}")
    print(f"Tasks:            {counts.completed}/{counts.total} completed, {counts.overdue} overdue")
    print()
    print("Subject progress:")
    for subject in Subject:
        print(f"  {subject:<12} {stats.get_subject_progress(subject):>3}%")
    print()
    print(f"Last {args.days} days:")
    for total in stats.get_daily_totals(args.days):
        bar = "#" * (total.total_minutes // 10)
        print(f"  {total.day:%a %d %b}  {total.total_minutes:>4} min  {bar}")
    recent = stats.activity.recent(5)
    if recent:
        print()
        print("Recent activity:")
        for activity in recent:
            print(f"  {activity.timestamp:%Y-%m-%d %H:%M}  {activity.description}")


def cmd_sessions(args: argparse.Namespace) -> None:
    """List recorded sessions."""
    config = _load(args)
    stats, _ = _open(config)
    sessions = stats.todays_sessions() if args.today else stats.sessions()
    if args.subject:
        sessions = [s for s in sessions if s.subject == args.subject]
    if not sessions:
        print("No study sessions recorded yet")
        return
    for session in sessions:
        print(
            f"{session.start_time:%Y-%m-%d %H:%M}  {session.subject:<12} "
            f"{format_duration(session.duration_minutes * 60):>8}  {session.notes or ''}"
        )


def _parse_due(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        print(f"Invalid --due date {value!r}, expected YYYY-MM-DD", file=sys.stderr)
        sys.exit(1)


def cmd_task_add(args: argparse.Namespace) -> None:
    config = _load(args)
    _, tasks = _open(config)
    due = _parse_due(args.due) if args.due else None
    task = tasks.create(
        args.title,
        args.subject,
        priority=args.priority,
        description=args.description,
        due_date=due,
    )
    print(f"Created task {task.id[:8]}: {task.title}")


def cmd_task_list(args: argparse.Namespace) -> None:
    config = _load(args)
    _, tasks = _open(config)
    items = tasks.by_subject(args.subject) if args.subject else tasks.all_tasks()
    if not items:
        print("No tasks")
        return
    for task in items:
        due = f" due {task.due_date:%Y-%m-%d}" if task.due_date else ""
        print(f"{task.id[:8]}  [{task.status:<11}] {task.subject:<12} {task.title}{due}")


def _resolve(tasks: TaskStore, prefix: str) -> str:
    task_id = tasks.resolve_id(prefix)
    if task_id is None:
        print(f"No unique task matches {prefix!r}", file=sys.stderr)
        sys.exit(1)
    return task_id


def cmd_task_done(args: argparse.Namespace) -> None:
    config = _load(args)
    stats, tasks = _open(config)
    task = tasks.complete(_resolve(tasks, args.id))
    if task:
        progress = stats.get_subject_progress(task.subject)
        print(f"Completed {task.title} ({task.subject} now {progress}%)")


def cmd_task_rm(args: argparse.Namespace) -> None:
    config = _load(args)
    _, tasks = _open(config)
    tasks.delete(_resolve(tasks, args.id))
    print("Task deleted")


def _open_resources(config: Config) -> ResourceStore:
    store = LocalStore(config.data_dir)
    return ResourceStore(store, ActivityLog(store))


def cmd_resource_add(args: argparse.Namespace) -> None:
    config = _load(args)
    resources = _open_resources(config)
    try:
        resource = resources.create(
            args.title,
            args.url,
            subject=args.subject,
            category=args.category,
            description=args.description,
        )
    except ValidationError as e:
        print(f"Invalid resource: {e.errors()[0]['msg']}", file=sys.stderr)
        sys.exit(1)
    print(f"Added resource {resource.id[:8]}: {resource.title}")


def cmd_resource_list(args: argparse.Namespace) -> None:
    config = _load(args)
    resources = _open_resources(config)
    items = resources.search(args.query, subject=args.subject, category=args.category)
    if not items:
        print("No resources found")
        return
    for resource in items:
        print(f"{resource.id[:8]}  [{resource.category:<7}] {resource.subject:<12} {resource.title}")
        print(f"          {resource.url}")


def cmd_resource_rm(args: argparse.Namespace) -> None:
    config = _load(args)
    resources = _open_resources(config)
    resource_id = resources.resolve_id(args.id)
    if resource_id is None:
        print(f"No unique resource matches {args.id!r}", file=sys.stderr)
        sys.exit(1)
    resources.delete(resource_id)
    print("Resource deleted")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_timer_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--minutes", "-m", type=int, help="Countdown length in minutes")
    group.add_argument("--preset", "-p", help="Named preset, e.g. pomodoro or focus-block")
    parser.add_argument("--subject", "-s", type=Subject, choices=list(Subject))
    parser.add_argument(
        "--no-tray",
        action="store_true",
        help="Disable system tray icon",
    )


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Study planner: countdown timer and study statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  studyplanner                              25 minute countdown with tray icon
  studyplanner timer -p focus-block -s Chemistry
  studyplanner stats --days 14
  studyplanner task add "Rotational motion DPP" -s Physics
  studyplanner task done 3f2a
  studyplanner resource add "Desmos" https://www.desmos.com/calculator --category tool
""",
    )
    subparsers = parser.add_subparsers(dest="command")

    timer_parser = subparsers.add_parser("timer", help="Run a countdown (default)")
    _add_common(timer_parser)
    _add_timer_args(timer_parser)
    timer_parser.set_defaults(func=cmd_timer)

    stats_parser = subparsers.add_parser("stats", help="Show study statistics")
    _add_common(stats_parser)
    stats_parser.add_argument("--days", "-d", type=int, default=7)
    stats_parser.set_defaults(func=cmd_stats)

    sessions_parser = subparsers.add_parser("sessions", help="List study sessions")
    _add_common(sessions_parser)
    sessions_parser.add_argument("--today", action="store_true")
    sessions_parser.add_argument("--subject", "-s", type=Subject, choices=list(Subject))
    sessions_parser.set_defaults(func=cmd_sessions)

    task_parser = subparsers.add_parser("task", help="Manage tasks")
    task_sub = task_parser.add_subparsers(dest="task_command", required=True)

    add_parser = task_sub.add_parser("add", help="Create a task")
    _add_common(add_parser)
    add_parser.add_argument("title")
    add_parser.add_argument("--subject", "-s", type=Subject, choices=list(Subject), required=True)
    add_parser.add_argument(
        "--priority", type=TaskPriority, choices=list(TaskPriority), default=TaskPriority.MEDIUM
    )
    add_parser.add_argument("--description")
    add_parser.add_argument("--due", help="Due date, YYYY-MM-DD")
    add_parser.set_defaults(func=cmd_task_add)

    list_parser = task_sub.add_parser("list", help="List tasks")
    _add_common(list_parser)
    list_parser.add_argument("--subject", "-s", type=Subject, choices=list(Subject))
    list_parser.set_defaults(func=cmd_task_list)

    done_parser = task_sub.add_parser("done", help="Mark a task completed")
    _add_common(done_parser)
    done_parser.add_argument("id", help="Task id or unique prefix")
    done_parser.set_defaults(func=cmd_task_done)

    rm_parser = task_sub.add_parser("rm", help="Delete a task")
    _add_common(rm_parser)
    rm_parser.add_argument("id", help="Task id or unique prefix")
    rm_parser.set_defaults(func=cmd_task_rm)

    resource_parser = subparsers.add_parser("resource", help="Manage resource links")
    resource_sub = resource_parser.add_subparsers(dest="resource_command", required=True)

    res_add = resource_sub.add_parser("add", help="Save a resource link")
    _add_common(res_add)
    res_add.add_argument("title")
    res_add.add_argument("url", help="http(s) link")
    res_add.add_argument(
        "--subject", "-s",
        type=ResourceSubject,
        choices=list(ResourceSubject),
        default=ResourceSubject.GENERAL,
    )
    res_add.add_argument(
        "--category",
        type=ResourceCategory,
        choices=list(ResourceCategory),
        default=ResourceCategory.WEBSITE,
    )
    res_add.add_argument("--description")
    res_add.set_defaults(func=cmd_resource_add)

    res_list = resource_sub.add_parser("list", help="List or search resource links")
    _add_common(res_list)
    res_list.add_argument("query", nargs="?", help="Match title, description or URL")
    res_list.add_argument("--subject", "-s", type=ResourceSubject, choices=list(ResourceSubject))
    res_list.add_argument("--category", type=ResourceCategory, choices=list(ResourceCategory))
    res_list.set_defaults(func=cmd_resource_list)

    res_rm = resource_sub.add_parser("rm", help="Delete a resource link")
    _add_common(res_rm)
    res_rm.add_argument("id", help="Resource id or unique prefix")
    res_rm.set_defaults(func=cmd_resource_rm)

    # Common and timer args on the main parser for the default command
    _add_common(parser)
    _add_timer_args(parser)

    args = parser.parse_args()

    # Default to timer if no subcommand
    if args.command is None:
        cmd_timer(args)
    else:
        args.func(args)


if __name__ == "__main__":
    main()
