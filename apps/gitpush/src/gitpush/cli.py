"""CLI for gitpush."""

import asyncio
import logging
from pathlib import Path

import click
from dotenv import load_dotenv
from gh import get_token

from .codec import decode_entry
from .errors import ConfigIncomplete, ContentFormatError, FetchFailed
from .explorer import Explorer, ExplorerSnapshot, ExplorerState
from .models import PreviewState, RepositoryConfig
from .store import CONFIG_FILE, HISTORY_FILE, ConfigStore, History, HistoryStore, default_home
from .sync import RepositorySync
from .uploader import Uploader

logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    """Setup logging."""
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def require_config(ctx: click.Context) -> RepositoryConfig:
    """Stored config, or exit when it is missing a field."""
    config = ctx.obj["config_store"].load() or RepositoryConfig()
    try:
        return config.require_complete()
    except ConfigIncomplete as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Run: gitpush config set --username ... --repo ... --token ...", err=True)
        raise SystemExit(1)


def echo_preview(preview: PreviewState) -> None:
    click.echo(f"{preview.name}  ({preview.path})")
    click.echo(f"Source: {preview.html_url}")
    click.echo()
    if preview.is_text:
        click.echo(preview.text if preview.text and preview.text.strip() else "(no content)")
    else:
        click.echo(f"Image preview: {len(preview.image_src or '')} chars data URI")


def echo_snapshot(snapshot: ExplorerSnapshot) -> None:
    if snapshot.state == ExplorerState.FAILED:
        click.echo(f"Error: {snapshot.error}", err=True)
        raise SystemExit(1)
    if snapshot.state == ExplorerState.PREVIEWING and snapshot.preview:
        echo_preview(snapshot.preview)
        return
    click.echo(f"/{snapshot.current_path}  ({len(snapshot.entries)} entries)")
    for entry in snapshot.entries:
        marker = "/" if entry.is_dir else ""
        click.echo(f"  {entry.name}{marker}")


# ============ CLI Group ============

@click.group()
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="GITPUSH_HOME",
    help="Directory for config and history",
)
@click.option("--api-url", envvar="GITPUSH_API_URL", help="Custom GitHub API base URL")
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
@click.pass_context
def cli(ctx: click.Context, home: Path | None, api_url: str | None, verbose: int) -> None:
    """Browse and publish files to a GitHub repository."""
    load_dotenv()
    setup_logging(verbose)
    home = home or default_home()
    ctx.ensure_object(dict)
    ctx.obj["config_store"] = ConfigStore(home / CONFIG_FILE)
    ctx.obj["history_store"] = HistoryStore(home / HISTORY_FILE)
    ctx.obj["sync"] = RepositorySync(base_url=api_url)
    ctx.obj["verbose"] = verbose


# ============ Config Commands ============

@cli.group()
def config():
    """Manage repository credentials."""


@config.command("set")
@click.option("-u", "--username", help="Repository owner")
@click.option("-r", "--repo", "repository", help="Repository name")
@click.option("-t", "--token", help="Personal access token (falls back to GH_TOKEN/GITHUB_TOKEN)")
@click.option("-b", "--branch", help="Branch")
@click.option("--use-gh-cli", is_flag=True, help="Use gh cli credentials")
@click.pass_context
def config_set(ctx, username, repository, token, branch, use_gh_cli):
    """Save repository credentials."""
    store = ctx.obj["config_store"]
    current = store.load() or RepositoryConfig()
    if not token and not current.token:
        token = get_token(None, use_gh_cli=use_gh_cli)
    updates = {
        "username": username,
        "repository": repository,
        "token": token,
        "branch": branch,
    }
    config = current.model_copy(update={k: v for k, v in updates.items() if v})
    store.save(config)
    if config.is_complete:
        click.echo(f"Connected to {config.slug} ({config.branch})")
    else:
        click.echo(f"Saved. Still missing: {', '.join(config.missing_fields())}")


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Show stored credentials (token masked)."""
    config = ctx.obj["config_store"].load() or RepositoryConfig()
    click.echo(f"Username:   {config.username}")
    click.echo(f"Repository: {config.repository}")
    click.echo(f"Branch:     {config.branch}")
    click.echo(f"Token:      {config.masked_token}")
    click.echo(f"Configured: {'yes' if config.is_complete else 'no'}")


# ============ Sync Commands ============

@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.option("-p", "--path", "destination", default="", help="Destination directory in the repository")
@click.pass_context
def push(ctx, files, destination):
    """Upload files, creating or updating them."""
    config = require_config(ctx)
    uploader = Uploader(ctx.obj["sync"], History(ctx.obj["history_store"]))
    verbose = ctx.obj["verbose"]

    async def run() -> int:
        failures = 0
        for file_path in files:
            outcome, _ = await uploader.upload(file_path, config, destination)
            if outcome.success:
                click.echo(f"{file_path.name}: {outcome.message} {outcome.url}")
                if verbose and outcome.commit_sha:
                    click.echo(f"  commit {outcome.commit_sha}")
            else:
                failures += 1
                status = f" (HTTP {outcome.status_code})" if verbose and outcome.status_code else ""
                click.echo(f"{file_path.name}: {outcome.message}{status}", err=True)
        return failures

    failures = asyncio.run(run())
    if failures:
        raise SystemExit(1)


@cli.command()
@click.argument("path", default="")
@click.pass_context
def ls(ctx, path):
    """List a directory, or preview a file."""
    config = require_config(ctx)
    explorer = Explorer(ctx.obj["sync"], config)
    echo_snapshot(asyncio.run(explorer.submit(path)))


@cli.command()
@click.argument("path")
@click.pass_context
def cat(ctx, path):
    """Preview a single file."""
    config = require_config(ctx)
    sync = ctx.obj["sync"]

    try:
        entry = asyncio.run(sync.get_file(config, path))
        preview = PreviewState.from_decoded(entry, decode_entry(entry))
    except (FetchFailed, ContentFormatError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    echo_preview(preview)


@cli.command()
@click.option("--clear", is_flag=True, help="Clear upload history")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def history(ctx, clear, yes):
    """Show or clear upload history."""
    require_config(ctx)
    records = History(ctx.obj["history_store"])

    if clear:
        if yes or click.confirm("Are you sure you want to clear your upload history?"):
            records.clear()
            click.echo("History cleared.")
        return

    if not len(records):
        click.echo("No uploads yet.")
        return

    for record in records:
        when = record.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        if record.status == "success":
            click.echo(f"{when}  ok     {record.name}  {record.url}")
        else:
            click.echo(f"{when}  error  {record.name}  {record.error_message}")


if __name__ == "__main__":
    cli()
