"""
CLI interface for mailgrid-ui.

Drives the same operations as the GUI from the command line. Campaign
requests are JSON files in the GUI payload format (camelCase keys):

    {"envPath": "smtp.json", "csvPath": "recipients.csv",
     "templateHTML": "<p>Hello {{ .name }}</p>", "subject": "Hello"}
"""

import json
import sys
from pathlib import Path

import click
import yaml

from mailgrid_ui import __version__
from mailgrid_ui.errors import MailgridUIError
from mailgrid_ui.utils import print_error, print_info, print_success


@click.group()
@click.version_option(version=__version__, prog_name="mailgrid-ui")
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level")
@click.pass_context
def main(ctx, verbose: bool):
    """
    mailgrid-ui - Run, preview and schedule email campaigns.
    """
    from mailgrid_ui.config import get_mailgrid_ui_home, load_config
    from mailgrid_ui.utils import setup_logging

    ctx.ensure_object(dict)
    try:
        config = load_config()
    except MailgridUIError as e:
        # init must still work with a broken config
        ctx.obj["config_error"] = str(e)
        return

    ctx.obj["config"] = config
    level = "DEBUG" if verbose else config.log_level
    setup_logging(
        config.get_log_file_path(get_mailgrid_ui_home()),
        log_level=level,
        log_format=config.log_format,
        console_output=verbose,
    )


def _get_service(ctx):
    from mailgrid_ui.service import MailgridService

    if "config" not in ctx.obj:
        print_error(f"Config not loaded: {ctx.obj.get('config_error', 'Unknown error')}")
        print_info("Run 'mailgrid-ui init --force' to write a fresh configuration file.")
        raise SystemExit(1)
    return MailgridService(temp_dir=ctx.obj["config"].temp_dir)


def _load_request(path: Path):
    from mailgrid_ui.schemas import UIRequest

    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}")
    if not isinstance(payload, dict):
        raise click.BadParameter(f"{path} must contain a JSON object")
    return UIRequest.from_dict(payload)


def _run_operation(operation, success_message: str) -> None:
    try:
        operation()
    except (MailgridUIError, ValueError) as e:
        print_error(str(e))
        raise SystemExit(1)
    print_success(success_message)


request_argument = click.argument(
    "request_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


@main.command("run")
@request_argument
@click.option("--dry-run", is_flag=True, help="Render and validate without sending")
@click.pass_context
def run(ctx, request_file: Path, dry_run: bool):
    """
    Execute a campaign described by REQUEST_FILE.

    Examples:

        mailgrid-ui run campaign.json

        mailgrid-ui run campaign.json --dry-run
    """
    service = _get_service(ctx)
    request = _load_request(request_file)
    if dry_run:
        request.dry_run = True
    _run_operation(lambda: service.run(request), "Campaign executed successfully")


@main.command("preview")
@request_argument
@click.option("--port", type=int, default=None, help="Preview server port (default 8080)")
@click.pass_context
def preview(ctx, request_file: Path, port):
    """Start the preview server for REQUEST_FILE."""
    service = _get_service(ctx)
    request = _load_request(request_file)
    if port:
        request.preview_port = port
    _run_operation(lambda: service.preview(request), "Preview server started")


@main.command("schedule")
@request_argument
@click.option("--at", "schedule_at", default=None, help="RFC3339 time to send at")
@click.option("--interval", default=None, help="Repeat interval (e.g. 1h)")
@click.option("--cron", default=None, help="Cron expression")
@click.option("--db", "db_path", default=None, help="Scheduler database path")
@click.pass_context
def schedule(ctx, request_file: Path, schedule_at, interval, cron, db_path):
    """Schedule the campaign in REQUEST_FILE."""
    service = _get_service(ctx)
    request = _load_request(request_file)
    if schedule_at:
        request.schedule_at = schedule_at
    if interval:
        request.interval = interval
    if cron:
        request.cron = cron
    if db_path:
        request.scheduler_db = db_path
    _run_operation(lambda: service.schedule_job(request), "Campaign scheduled successfully")


@main.group("jobs")
def jobs_group():
    """Inspect and cancel scheduled jobs."""
    pass


@jobs_group.command("list")
@click.option("--db", "db_path", default="", help="Scheduler database path (default mailgrid.db)")
@click.option("--json", "as_json", is_flag=True, help="Print job records as JSON")
@click.pass_context
def jobs_list(ctx, db_path: str, as_json: bool):
    """List scheduled jobs."""
    service = _get_service(ctx)
    try:
        jobs = service.list_jobs(db_path)
    except MailgridUIError as e:
        print_error(str(e))
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(jobs, indent=2, default=str))
        return
    for job in jobs:
        click.echo("  " + "  ".join(f"{k}={v}" for k, v in job.items()))


@jobs_group.command("cancel")
@click.argument("job_id")
@click.option("--db", "db_path", default="", help="Scheduler database path (default mailgrid.db)")
@click.pass_context
def jobs_cancel(ctx, job_id: str, db_path: str):
    """Cancel the scheduled job JOB_ID."""
    service = _get_service(ctx)
    _run_operation(lambda: service.cancel_job(job_id, db_path), f"Job {job_id} cancelled")


@main.command("scheduler")
@click.option("--db", "db_path", default="", help="Scheduler database path (default mailgrid.db)")
@click.pass_context
def scheduler(ctx, db_path: str):
    """Run the scheduler daemon in the foreground."""
    service = _get_service(ctx)
    print_info("Scheduler running (Ctrl+C to stop)")
    _run_operation(lambda: service.run_scheduler(db_path), "Scheduler stopped")


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize mailgrid-ui configuration."""
    from mailgrid_ui.config import MailgridUIConfig, get_mailgrid_ui_home

    home = get_mailgrid_ui_home()
    home.mkdir(parents=True, exist_ok=True)

    cfg_path = home / "config.yaml"
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    cfg_path.write_text(yaml.safe_dump(MailgridUIConfig().to_dict(), sort_keys=False))
    click.echo(f"Initialized mailgrid-ui config at {cfg_path}")


if __name__ == "__main__":
    sys.exit(main())
