#!/usr/bin/env python3
"""
Tempo Planner - Command Line Interface
Track tasks, see your productivity score and streak, and re-prioritize from the terminal
"""

import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tempo.core import (
    CategoryRepository,
    Config,
    DailyStats,
    DailyStatsRepository,
    PersistenceError,
    Task,
    TaskRepository,
    TempoError,
    get_database,
)
from tempo.dashboard import DashboardAggregator, DashboardData
from tempo.productivity import ProductivityTracker, get_prioritizer

# Initialize CLI app and console
app = typer.Typer(help="Tempo Planner - tasks, streaks and productivity scores")
console = Console()

PRIORITY_COLORS = {
    4: "red bold",
    3: "yellow",
    2: "white",
    1: "dim",
}

STATUS_ICONS = {
    "todo": "[white]○ todo[/white]",
    "in_progress": "[yellow]◐ in progress[/yellow]",
    "completed": "[green]✓ completed[/green]",
}


@dataclass
class PlannerContext:
    """Everything a command needs, built once per invocation."""
    config: Config
    tasks: TaskRepository
    categories: CategoryRepository
    tracker: ProductivityTracker
    dashboard: DashboardAggregator
    user_id: str


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _refresh_productivity(ctx: PlannerContext) -> Optional[DailyStats]:
    """Recompute today's score; a failure is reported but not fatal."""
    try:
        return ctx.tracker.recompute_derived(ctx.user_id)
    except PersistenceError as e:
        console.print(f"[yellow]Warning: could not update productivity score ({e})[/yellow]")
        return None


def format_priority(priority: int) -> str:
    color = PRIORITY_COLORS.get(priority, "white")
    return f"[{color}]P{priority}[/{color}]"


def format_due(task: Task, now: datetime) -> str:
    """Due date, red when overdue."""
    if task.due_date is None:
        return "-"
    due = task.due_date
    if due.tzinfo is None and now.tzinfo is not None:
        due = due.replace(tzinfo=now.tzinfo)
    if due < now and not task.is_completed():
        return f"[red]⚠ {due.strftime('%m/%d %H:%M')}[/red]"
    return due.strftime("%m/%d %H:%M")


def render_stats(stats: DailyStats) -> Panel:
    lines = [
        f"Score:     [bold]{stats.productivity_score}[/bold] / 100",
        f"Streak:    {stats.streak_days} day{'s' if stats.streak_days != 1 else ''}",
        f"Completed: {stats.tasks_completed}",
        f"Created:   {stats.tasks_created}",
    ]
    return Panel("\n".join(lines), title=f"Productivity {stats.day.isoformat()}", expand=False)


def render_history(rows: List[DailyStats]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Day", width=12)
    table.add_column("", width=4)
    table.add_column("Completed", justify="right")
    table.add_column("Created", justify="right")
    table.add_column("Score", justify="right")

    for row in rows:
        table.add_row(
            row.day.isoformat(),
            row.day.strftime("%a"),
            str(row.tasks_completed),
            str(row.tasks_created),
            str(row.productivity_score),
        )
    return table


def render_dashboard(data: DashboardData) -> Panel:
    stats = data.stats
    lines = [
        f"Tasks:           {stats.total_tasks}",
        f"  todo:          {stats.todo}",
        f"  in progress:   {stats.in_progress}",
        f"  completed:     {stats.completed}",
        f"Completed today: [green]{stats.today_completed}[/green]",
        f"Streak:          {stats.streak_days} day{'s' if stats.streak_days != 1 else ''}",
        f"Score:           [bold]{stats.productivity_score}[/bold] / 100",
    ]
    return Panel("\n".join(lines), title=f"Dashboard {data.day.isoformat()}", expand=False)


# ============================================================================
# CLI Commands
# ============================================================================

@app.callback()
def main(
    ctx: typer.Context,
    user: str = typer.Option("local", "--user", "-u", envvar="TEMPO_USER", help="User id to act as"),
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Configuration directory"),
):
    """Open the configured database for the chosen user."""
    config = Config(config_dir)
    try:
        db = get_database(config.get_database_path())
    except FileNotFoundError as e:
        _fail(str(e))

    tasks = TaskRepository(db)
    categories = CategoryRepository(db)
    daily_stats = DailyStatsRepository(db)
    ctx.obj = PlannerContext(
        config=config,
        tasks=tasks,
        categories=categories,
        tracker=ProductivityTracker(daily_stats, config.today),
        dashboard=DashboardAggregator(tasks, categories, daily_stats),
        user_id=user,
    )


@app.command("tasks")
def list_tasks(
    ctx: typer.Context,
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter by status (todo, in_progress, completed)"),
):
    """
    List your tasks, most urgent first

    Examples:
      planner tasks
      planner tasks --status todo
    """
    planner: PlannerContext = ctx.obj
    try:
        found = planner.tasks.list_for_user(planner.user_id, status=status)
    except TempoError as e:
        _fail(f"Error listing tasks: {e}")

    if not found:
        console.print("[yellow]No tasks found[/yellow]")
        return

    now = planner.config.now()
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Task", min_width=30)
    table.add_column("Priority", justify="center", width=8)
    table.add_column("Category", width=14)
    table.add_column("Due", width=14)
    table.add_column("Status", width=14)

    for task in found:
        table.add_row(
            str(task.id),
            task.title,
            format_priority(task.priority),
            task.category_name,
            format_due(task, now),
            STATUS_ICONS.get(task.status, task.status),
        )

    console.print(table)


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Task title"),
    category: str = typer.Option(..., "--category", "-c", help="Category name (created if missing)"),
    priority: Optional[int] = typer.Option(None, "--priority", "-p", help="Priority (1-4, 4 is urgent)"),
    due: Optional[datetime] = typer.Option(
        None, "--due", "-d",
        formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"],
        help="Due date/time (ISO format)",
    ),
):
    """
    Add a new task

    Examples:
      planner add "Write report" --category Work
      planner add "Pay rent" -c Home --due 2026-04-01T09:00 -p 3
    """
    planner: PlannerContext = ctx.obj
    title = title.strip()
    if not title:
        _fail("Task title is required and cannot be empty")

    if priority is None or not 1 <= priority <= 4:
        priority = planner.config.get("default_task_priority", "preferences", 1)

    try:
        existing = {c.name.lower(): c for c in planner.categories.list_for_user(planner.user_id)}
        target = existing.get(category.strip().lower())
        if target is None:
            target = planner.categories.create(planner.user_id, category.strip())
            console.print(f"[dim]Created category '{target.name}'[/dim]")

        task_id = planner.tasks.create(
            user_id=planner.user_id,
            title=title,
            category_id=target.id,
            priority=priority,
            due_date=due,
        )
        planner.tracker.record_task_created(planner.user_id)
    except TempoError as e:
        _fail(f"Error adding task: {e}")

    _refresh_productivity(planner)

    console.print(f"[green]✓[/green] Added task #{task_id}: {title}")
    if due:
        console.print(f"  Due: {due.strftime('%A, %B %d')}")
    console.print(f"  Priority: {format_priority(priority)}")


@app.command()
def done(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID to mark as completed"),
):
    """
    Mark a task as completed

    Example:
      planner done 5
    """
    planner: PlannerContext = ctx.obj
    try:
        task = planner.tasks.get(planner.user_id, task_id)
        if task is None:
            _fail(f"Task #{task_id} not found")
        if task.is_completed():
            console.print(f"[yellow]Task #{task_id} is already completed[/yellow]")
            return

        planner.tasks.update(task_id, {"status": "completed", "completed_at": planner.config.now()})
        planner.tracker.record_task_completed(planner.user_id)
    except TempoError as e:
        _fail(f"Error completing task: {e}")

    console.print(f"[green]✓[/green] Completed: {task.title}")
    stats = _refresh_productivity(planner)
    if stats is not None:
        console.print(f"  Score {stats.productivity_score}, streak {stats.streak_days}")


@app.command()
def stats(ctx: typer.Context):
    """Show today's productivity score and streak"""
    planner: PlannerContext = ctx.obj
    try:
        today = planner.tracker.recompute_derived(planner.user_id)
    except TempoError as e:
        _fail(f"Error fetching statistics: {e}")

    console.print(render_stats(today))


@app.command()
def history(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Number of days to show"),
):
    """Show daily counters and scores for the last few days"""
    planner: PlannerContext = ctx.obj
    if days is None:
        days = planner.config.get("history_days", "preferences", 7)

    try:
        rows = planner.tracker.history(planner.user_id, days)
    except TempoError as e:
        _fail(f"Error fetching history: {e}")

    if not rows:
        console.print("[yellow]No activity recorded yet[/yellow]")
        return

    console.print(render_history(rows))


@app.command()
def log(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID the time was spent on"),
    minutes: int = typer.Argument(..., min=0, help="Minutes worked"),
    session_type: str = typer.Option("work", "--type", "-t", help="Session type (work or break)"),
):
    """
    Log a finished timer session against a task

    Only work sessions add to the task's time spent.

    Example:
      planner log 5 25
    """
    planner: PlannerContext = ctx.obj
    if session_type not in ("work", "break"):
        _fail(f"Unknown session type '{session_type}' (use work or break)")

    try:
        task = planner.tasks.get(planner.user_id, task_id)
        if task is None:
            _fail(f"Task #{task_id} not found")
        if session_type == "work" and minutes > 0:
            planner.tasks.add_time_spent(planner.user_id, task_id, minutes * 60)
            task = planner.tasks.get(planner.user_id, task_id)
    except TempoError as e:
        _fail(f"Error logging time: {e}")

    console.print(f"[green]✓[/green] Logged {minutes} min ({session_type}) on: {task.title}")
    console.print(f"  Total: {task.time_spent // 60} min")


@app.command()
def dashboard(ctx: typer.Context):
    """Show task counts, today's completions, streak and score"""
    planner: PlannerContext = ctx.obj
    try:
        data = planner.dashboard.aggregate(planner.user_id, planner.config.now())
    except TempoError as e:
        _fail(f"Error building dashboard: {e}")

    console.print(render_dashboard(data))


@app.command()
def prioritize(ctx: typer.Context):
    """
    Re-prioritize open tasks

    Overdue tasks become urgent, tasks due soon are raised, and
    work-category tasks are raised during work hours.
    """
    planner: PlannerContext = ctx.obj
    name = planner.config.get("prioritizer", "preferences", "heuristic")
    try:
        strategy = get_prioritizer(name, planner.tasks, planner.config)
        updates = strategy.prioritize(planner.user_id, planner.config.now())
    except (TempoError, ValueError) as e:
        _fail(f"Error prioritizing tasks: {e}")

    console.print(f"[green]✓[/green] Updated {len(updates)} task priorities")
    for update in updates:
        console.print(
            f"  [dim]#{update.task_id}[/dim] {update.title}: "
            f"{format_priority(update.old_priority)} → {format_priority(update.new_priority)}"
        )


if __name__ == "__main__":
    app()
