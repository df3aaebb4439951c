# taskbridge/cli.py

import asyncio
import json
import sys
from datetime import timezone

import click

from . import build_default_registry
from .config import Config
from .exceptions import PlatformError
from .models import Platform, Priority, Task, TaskFilter, TaskStatus, User
from .utils import progress_bar


def _open_client(platform_type):
    registry = build_default_registry()
    return registry.create(platform_type, Config.platform_config(platform_type))


def _run(coro):
    """Run a coroutine, turning platform errors into exit status 1."""
    try:
        return asyncio.run(coro)
    except PlatformError as e:
        ctx = click.get_current_context(silent=True)
        if ctx is not None and (ctx.find_root().obj or {}).get("json"):
            click.echo(json.dumps(e.to_dict()), err=True)
        else:
            click.echo(str(e), err=True)
        sys.exit(1)


def _format_task(task):
    assignee = task.assignee.display_name() if task.assignee else "unassigned"
    return f"{task.id:<12} [{task.status}] ({task.priority}) {task.title} - {assignee}"


def _assignee(platform_type, user_id):
    """A bare user reference; adapters address it by its platform id."""
    if not user_id:
        return None
    return User(id=user_id, platform=Platform(platform_type))


def _due_date(value):
    return value.replace(tzinfo=timezone.utc) if value else None


DUE_DATE = click.DateTime(formats=["%Y-%m-%d"])


platform_argument = click.argument(
    "platform_type",
    metavar="PLATFORM",
    type=click.Choice(build_default_registry().supported_platforms()),
)


@click.group()
@click.option("--json", "as_json", is_flag=True, help="Print errors as JSON.")
@click.pass_context
def cli(ctx, as_json):
    """Work with tasks on Jira and Linear through one interface"""
    ctx.ensure_object(dict)
    ctx.obj["json"] = as_json


@cli.command()
def platforms():
    """List supported platforms and whether credentials are configured."""
    registry = build_default_registry()
    configured = Config.configured_platforms()
    for platform_type in registry.supported_platforms():
        factory = registry.get_factory(platform_type)
        state = "configured" if platform_type in configured else "not configured"
        click.echo(f"{platform_type:<8} {factory.name:<8} {state}")


@cli.command()
def health():
    """Check connectivity for every configured platform."""
    configured = Config.configured_platforms()
    if not configured:
        click.echo("No platforms configured.")
        return

    async def check_all():
        results = {}
        for platform_type in progress_bar(configured, desc="Checking platforms"):
            try:
                async with _open_client(platform_type) as client:
                    await client.health_check()
                results[platform_type] = None
            except PlatformError as e:
                results[platform_type] = e
        return results

    results = _run(check_all())
    for platform_type, error in results.items():
        click.echo(f"{platform_type:<8} {'OK' if error is None else error}")
    if any(error is not None for error in results.values()):
        sys.exit(1)


@cli.command()
@platform_argument
def whoami(platform_type):
    """Show the authenticated user."""

    async def fetch():
        async with _open_client(platform_type) as client:
            return await client.get_current_user()

    user = _run(fetch())
    click.echo(f"{user.display_name()} <{user.email}> ({user.id})")


@cli.command()
@platform_argument
def projects(platform_type):
    """List projects visible to the authenticated user."""

    async def fetch():
        async with _open_client(platform_type) as client:
            return await client.list_projects()

    for project in _run(fetch()):
        click.echo(f"{project.id:<12} {project.display_name()}")


@cli.command()
@platform_argument
@click.option("--status", type=click.Choice([s.value for s in TaskStatus]))
@click.option("--assignee", default="", help='User to filter by; "me" for yourself.')
@click.option("--project", "project_id", default="", help="Project key or id.")
@click.option("--label", "labels", multiple=True, help="Require this label.")
@click.option("--query", default="", help="Free-text search.")
@click.option("--limit", default=0, type=int, help="Maximum number of tasks.")
@click.option("--offset", default=0, type=int, help="Number of tasks to skip.")
def tasks(platform_type, status, assignee, project_id, labels, query, limit, offset):
    """List tasks matching the given filters."""
    task_filter = TaskFilter(
        platform=Platform(platform_type),
        status=TaskStatus(status) if status else None,
        assignee=assignee,
        project_id=project_id,
        labels=list(labels),
        query=query,
        limit=limit,
        offset=offset,
    )

    async def fetch():
        async with _open_client(platform_type) as client:
            return await client.list_tasks(task_filter)

    results = _run(fetch())
    for task in results:
        click.echo(_format_task(task))
    click.echo(f"{len(results)} task(s)")


@cli.command()
@platform_argument
@click.argument("task_id")
def show(platform_type, task_id):
    """Show one task as JSON."""

    async def fetch():
        async with _open_client(platform_type) as client:
            return await client.get_task(task_id)

    task = _run(fetch())
    click.echo(json.dumps(task.to_dict(), indent=2))


@cli.command()
@platform_argument
@click.argument("title")
@click.option("--project", "project_id", default=None, help="Project key or id.")
@click.option("--description", default="")
@click.option(
    "--priority",
    type=click.Choice([p.value for p in Priority]),
    default=Priority.MEDIUM.value,
)
@click.option("--label", "labels", multiple=True, help="Add this label.")
@click.option("--assignee", default=None, help="Platform user id to assign.")
@click.option("--due", type=DUE_DATE, default=None, help="Due date (YYYY-MM-DD).")
def create(
    platform_type, title, project_id, description, priority, labels, assignee, due
):
    """Create a task."""
    task = Task(
        title=title,
        platform=Platform(platform_type),
        description=description,
        priority=Priority(priority),
        project_id=project_id,
        labels=list(labels),
        assignee=_assignee(platform_type, assignee),
        due_date=_due_date(due),
    )

    async def submit():
        async with _open_client(platform_type) as client:
            return await client.create_task(task)

    created = _run(submit())
    click.echo(f"Created {_format_task(created)}")


@cli.command()
@platform_argument
@click.argument("task_id")
@click.option("--title", default=None)
@click.option("--description", default=None)
@click.option("--status", type=click.Choice([s.value for s in TaskStatus]))
@click.option("--priority", type=click.Choice([p.value for p in Priority]))
@click.option("--label", "labels", multiple=True, help="Add this label.")
@click.option("--assignee", default=None, help="Platform user id to assign.")
@click.option("--due", type=DUE_DATE, default=None, help="Due date (YYYY-MM-DD).")
def update(
    platform_type, task_id, title, description, status, priority, labels, assignee, due
):
    """Update fields of an existing task."""

    async def submit():
        async with _open_client(platform_type) as client:
            task = await client.get_task(task_id)
            if title is not None:
                task.set_title(title)
            if description is not None:
                task.set_description(description)
            if status:
                task.set_status(status)
            if priority:
                task.set_priority(priority)
            for label in labels:
                task.add_label(label)
            if assignee:
                task.set_assignee(_assignee(platform_type, assignee))
            if due:
                task.due_date = _due_date(due)
            return await client.update_task(task)

    updated = _run(submit())
    click.echo(f"Updated {_format_task(updated)}")


@cli.command()
@platform_argument
@click.argument("task_id")
def delete(platform_type, task_id):
    """Delete a task."""

    async def submit():
        async with _open_client(platform_type) as client:
            await client.delete_task(task_id)

    _run(submit())
    click.echo(f"Deleted {task_id}")


if __name__ == "__main__":
    cli()
