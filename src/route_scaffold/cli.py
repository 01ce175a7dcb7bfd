"""CLI entry point for route-scaffold."""

import logging
from pathlib import Path

import click

from route_scaffold.config import GeneratorConfig
from route_scaffold.errors import GeneratorError
from route_scaffold.generator.pipeline import GenerationReport, generate
from route_scaffold.parser.swagger import load_apidoc


class _EchoHandler(logging.Handler):
    """Send log records through click.echo, warnings and errors to stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        click.echo(self.format(record), err=record.levelno >= logging.WARNING)


def _setup_logging(verbose: bool) -> None:
    root = logging.getLogger("route_scaffold")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = _EchoHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _echo_report(report: GenerationReport) -> None:
    for rel in report.staged:
        click.echo(f"  Staged {rel}")
    for result in report.endpoints:
        if result.ok:
            state = "changed" if result.file.changed else "unchanged"
            click.echo(f"  {result.endpoint} -> {result.rel} ({state})")
        else:
            click.echo(f"  {result.endpoint} -> FAILED: {result.error}", err=True)

    if report.dry_run:
        for file in report.changed_files():
            click.echo(file.diff(), nl=False)
        return

    for rel in report.written:
        click.echo(f"  Wrote {rel}")
    if report.manifest_updated:
        click.echo("  Updated package.json")


@click.group(context_settings={"auto_envvar_prefix": "ROUTE_SCAFFOLD"})
@click.version_option(package_name="route-scaffold")
@click.option("-v", "--verbose", is_flag=True, help="Log every step.")
def main(verbose: bool):
    """Route Scaffold: generate and update express-openapi route modules from API docs."""
    _setup_logging(verbose)


@main.command("generate")
@click.option("-a", "--api-doc", required=True, help="Path to the OpenAPI v2 document (YAML or JSON).")
@click.option("-t", "--target-folder", default=".", type=click.Path(file_okay=False, path_type=Path), help="Project folder to generate into.")
@click.option("--write-policy", default="all-or-nothing", type=click.Choice(["all-or-nothing", "keep-going"]), help="What to write when an endpoint fails.")
@click.option("--bootstrap-file", default="src/index.js", help="Module holding the api version init hook, relative to the target.")
@click.option("--init-hook", default="initializeApiVersions", help="Function that registers the api versions.")
@click.option("--app-identifier", default="app", help="Name of the express app passed to each api version.")
@click.option("--dry-run", is_flag=True, help="Show the diffs, write nothing.")
def generate_cmd(api_doc: str, target_folder: Path, write_policy: str, bootstrap_file: str, init_hook: str, app_identifier: str, dry_run: bool):
    """Generate route modules for every endpoint of an API document."""
    config = GeneratorConfig(
        target=target_folder,
        bootstrap_file=bootstrap_file,
        init_hook=init_hook,
        app_identifier=app_identifier,
        write_policy=write_policy,
    )

    click.echo(f"Parsing {api_doc}...")
    try:
        apidoc = load_apidoc(api_doc)
        click.echo(f"Found {len(apidoc.endpoints())} endpoints.")
        click.echo(f"Generating into {config.target}" + (" (dry run)" if dry_run else "") + "...")
        report = generate(apidoc, config, dry_run=dry_run)
    except (GeneratorError, OSError) as e:
        raise click.ClickException(str(e)) from e

    _echo_report(report)
    if not report.ok:
        raise click.ClickException(f"{len(report.failures)} endpoint(s) failed")
    click.echo(f"Done! api version {report.tag}")

