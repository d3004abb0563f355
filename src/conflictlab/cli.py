import signal
import sys

# Handle Ctrl+C gracefully before any other imports
signal.signal(signal.SIGINT, lambda *_: sys.exit(130))

import logging
import click
import typer

from . import config
from .config import load_config
from .elasticsearch.client import (
	ElasticsearchError,
	get_elasticsearch_client,
)
from .reset import run_reset
from .scenario import Scenario, parse_scenario
from .verify import print_report, verify_conflict
from .workflow import preflight, run_setup

app = typer.Typer(help="Provision and reset a data stream with a log.offset mapping conflict.")


@app.callback()
def _global_options(
	env: str = typer.Option(None, "--env", help="Path to a .env file to load"),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
):
	if env:
		config.set_dotenv_path(env)
	if verbose:
		logging.basicConfig(
			level=logging.DEBUG,
			format="%(asctime)s %(levelname)s %(name)s: %(message)s",
			stream=sys.stderr,
		)


def _fail(message):
	typer.echo(typer.style(f"Error: {message}", fg=typer.colors.RED), err=True)
	raise typer.Exit(1)


def require_elasticsearch(scenario=None, lenient=False):
	"""Load config and build a client; resolve the scenario against CONFLICTLAB_SCENARIO."""
	cfg = load_config()
	if lenient:
		cfg.strict = False
	try:
		resolved = parse_scenario(scenario.value if scenario else cfg.scenario)
	except ValueError as e:
		_fail(str(e))
	return get_elasticsearch_client(cfg), cfg, resolved


@app.command()
def setup(
	scenario: Scenario = typer.Option(None, "--scenario", "-s", help="How to produce the conflict"),
	lenient: bool = typer.Option(False, "--lenient", help="Warn and continue when a request is rejected"),
):
	"""Create the ILM policy, templates and a data stream with a log.offset conflict."""
	client, cfg, resolved = require_elasticsearch(scenario, lenient)
	try:
		run_setup(client, cfg, resolved)
	except ElasticsearchError as e:
		_fail(e)


@app.command()
def reset(
	scenario: Scenario = typer.Option(None, "--scenario", "-s", help="How to produce the conflict"),
	yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
	lenient: bool = typer.Option(False, "--lenient", help="Warn and continue when a request is rejected"),
):
	"""Delete the data stream and @custom templates, then recreate the conflict."""
	client, cfg, resolved = require_elasticsearch(scenario, lenient)

	def ask():
		if yes:
			return "y"
		try:
			return typer.prompt("Continue with reset? (y/n)", default="", show_default=False)
		except click.Abort:
			# EOF on stdin counts as a declined prompt
			typer.echo("")
			return ""

	try:
		run_reset(client, cfg, resolved, ask)
	except ElasticsearchError as e:
		_fail(e)


@app.command()
def status(
	scenario: Scenario = typer.Option(None, "--scenario", "-s", help="Verdict to apply"),
):
	"""Report backing indices, document count and log.offset types without changing anything."""
	client, cfg, resolved = require_elasticsearch(scenario)
	try:
		preflight(client, cfg)
		report = verify_conflict(client, resolved)
	except ElasticsearchError as e:
		_fail(e)
	print_report(report)


def main():
	if len(sys.argv) == 1:
		# No arguments: show help
		command = typer.main.get_command(app)
		ctx = click.Context(command)
		typer.echo(command.get_help(ctx), err=True)
		return 0
	try:
		app()
	except typer.Exit:
		raise
	except Exception as e:
		typer.echo(typer.style(
			f"Fatal error: {type(e).__name__}: {e}",
			fg=typer.colors.RED
		), err=True)
		sys.exit(1)

if __name__ == "__main__":
	main()
