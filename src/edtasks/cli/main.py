"""EdTasks CLI, a terminal client for the task API.

Usage:
    edtasks signup me@school.edu --role teacher     # Create a teacher account
    edtasks signup kid@school.edu --teacher-id <id> # Create a student account
    edtasks login me@school.edu                     # Print a token to export
    edtasks tasks                                   # List visible tasks
    edtasks add "Essay" "Draft the intro"           # Create a task
    edtasks update 42 --progress completed          # Change one of your tasks
    edtasks delete 42                               # Delete one of your tasks
    edtasks config                                  # Show runtime flags

Authenticated commands read the token from --token or EDTASKS_TOKEN.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:5000"


def _api_url() -> str:
    return os.environ.get("EDTASKS_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the EdTasks backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous click handler."""
    return asyncio.run(coro)


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("EDTASKS_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set EDTASKS_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _unwrap(r: httpx.Response) -> dict:
    """Return the envelope's data, or print the failure message and exit."""
    try:
        body = r.json()
    except ValueError:
        body = {"success": False, "message": r.text or r.reason_phrase}
    if r.is_error or not body.get("success", False):
        click.secho(f"Error ({r.status_code}): {body.get('message', 'request failed')}", fg="red", err=True)
        for detail in body.get("errors", []):
            click.secho(f"  - {detail}", fg="red", err=True)
        sys.exit(1)
    return body.get("data") or {}


def _progress_color(progress: str) -> str:
    colors = {
        "not-started": "white",
        "in-progress": "yellow",
        "completed": "green",
    }
    return colors.get(progress, "white")


def _print_task(t: dict) -> None:
    owner = (t.get("owner") or {}).get("email", "?")
    due = (t.get("dueDate") or "-")[:10]
    progress = click.style(f"{t['progress']:12s}", fg=_progress_color(t["progress"]))
    click.echo(f"  #{t['id']:<5d} {progress}  due {due:10s}  {owner:28s}  {t['title'][:50]}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="edtasks")
def main():
    """EdTasks: student and teacher task lists from the terminal."""


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--role", type=click.Choice(["student", "teacher"]), default="student")
@click.option("--teacher-id", help="Your teacher's user id (students only)")
def signup(email: str, password: str, role: str, teacher_id: Optional[str]):
    """Create an account and print its token."""
    body = {"email": email, "password": password, "role": role}
    if teacher_id:
        body["teacherId"] = teacher_id
    data = _run(_post_json("/auth/signup", body))
    _print_session(data)


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print a token."""
    data = _run(_post_json("/auth/login", {"email": email, "password": password}))
    _print_session(data)


async def _post_json(path: str, body: dict) -> dict:
    async with _client() as c:
        r = await c.post(path, json=body)
        return _unwrap(r)


def _print_session(data: dict) -> None:
    user = data["user"]
    click.secho(f"Logged in as {user['email']} ({user['role']})", fg="green")
    click.echo(f"  user id: {user['id']}")
    if user.get("teacher"):
        click.echo(f"  teacher: {user['teacher']['email']}")
    click.echo()
    click.echo(f"export EDTASKS_TOKEN={data['token']}")


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@main.command()
@click.option("--token", help="Bearer token (or set EDTASKS_TOKEN)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def tasks(token: Optional[str], as_json: bool):
    """List every task you can see, newest first."""
    _run(_tasks_impl(_require_token(token), as_json))


async def _tasks_impl(token: str, as_json: bool):
    async with _client(token) as c:
        data = _unwrap(await c.get("/tasks"))

    items = data.get("tasks", [])
    if as_json:
        click.echo(json.dumps(items, indent=2))
        return
    if not items:
        click.echo("No tasks found.")
        return
    click.secho(f"Tasks ({len(items)}):", bold=True)
    for t in items:
        _print_task(t)


@main.command()
@click.argument("title")
@click.argument("description")
@click.option("--due", "due_date", help="Due date, ISO format (e.g. 2026-11-01)")
@click.option(
    "--progress",
    type=click.Choice(["not-started", "in-progress", "completed"]),
    default=None,
)
@click.option("--token", help="Bearer token (or set EDTASKS_TOKEN)")
def add(title: str, description: str, due_date: Optional[str],
        progress: Optional[str], token: Optional[str]):
    """Create a task you own."""
    body = {"title": title, "description": description}
    if due_date:
        body["dueDate"] = due_date
    if progress:
        body["progress"] = progress
    _run(_write_impl("POST", "/tasks", body, _require_token(token), "Created"))


@main.command()
@click.argument("task_id", type=int)
@click.option("--title")
@click.option("--description")
@click.option("--due", "due_date", help="Due date, ISO format")
@click.option("--clear-due", is_flag=True, help="Remove the due date")
@click.option(
    "--progress",
    type=click.Choice(["not-started", "in-progress", "completed"]),
    default=None,
)
@click.option("--token", help="Bearer token (or set EDTASKS_TOKEN)")
def update(task_id: int, title: Optional[str], description: Optional[str],
           due_date: Optional[str], clear_due: bool, progress: Optional[str],
           token: Optional[str]):
    """Change fields on one of your tasks."""
    body: dict = {}
    if title is not None:
        body["title"] = title
    if description is not None:
        body["description"] = description
    if due_date is not None:
        body["dueDate"] = due_date
    if clear_due:
        body["dueDate"] = None
    if progress is not None:
        body["progress"] = progress
    if not body:
        click.secho("Nothing to update.", fg="yellow", err=True)
        sys.exit(1)
    _run(_write_impl("PUT", f"/tasks/{task_id}", body, _require_token(token), "Updated"))


async def _write_impl(method: str, path: str, body: dict, token: str, verb: str):
    async with _client(token) as c:
        data = _unwrap(await c.request(method, path, json=body))
    task = data["task"]
    click.secho(f"{verb} task #{task['id']}", fg="green")
    _print_task(task)


@main.command()
@click.argument("task_id", type=int)
@click.option("--token", help="Bearer token (or set EDTASKS_TOKEN)")
def delete(task_id: int, token: Optional[str]):
    """Delete one of your tasks."""
    _run(_delete_impl(task_id, _require_token(token)))


async def _delete_impl(task_id: int, token: str):
    async with _client(token) as c:
        _unwrap(await c.delete(f"/tasks/{task_id}"))
    click.secho(f"Deleted task #{task_id}", fg="green")


# ---------------------------------------------------------------------------
# Runtime config
# ---------------------------------------------------------------------------


@main.command("config")
def show_config():
    """Show the runtime flags the server exposes to clients."""
    data = _run(_config_impl())
    click.echo(f"  AI model:       {data.get('aiModel')}")
    click.echo(f"  GPT-5 mini on:  {data.get('enableGpt5Mini')}")


async def _config_impl() -> dict:
    async with _client() as c:
        return _unwrap(await c.get("/config"))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
