# Human-facing output helpers

import typer


def header(title):
	typer.echo("")
	typer.echo("========================================")
	typer.echo(title)
	typer.echo("========================================")


def info(message):
	typer.echo(f"{typer.style('[INFO]', fg=typer.colors.GREEN)} {message}")


def warn(message):
	typer.echo(f"{typer.style('[WARN]', fg=typer.colors.YELLOW)} {message}")


def plain(message=""):
	typer.echo(message)


def success(message):
	typer.echo(typer.style(message, fg=typer.colors.GREEN))
