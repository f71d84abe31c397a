"""Configuration CLI commands."""

import typer
from pydantic import ValidationError

from flowboard.global_config import (
    get_config,
    get_config_dir,
    get_data_dir,
    save_config,
    update_config,
)
from flowboard.interfaces.cli.common import print_error, print_success

app = typer.Typer(help="Configuration commands")


@app.command("show")
def show() -> None:
    """Show the current configuration."""
    config = get_config()
    for key, value in config.model_dump().items():
        typer.echo(f"{key} = {value if value is not None else '-'}")
    typer.echo(f"config file = {get_config_dir() / 'config.json'}")
    typer.echo(f"board file dir = {get_data_dir(config)}")


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change one setting."""
    try:
        config = update_config(get_config(), key, value)
    except KeyError:
        print_error(f"Unknown setting '{key}'")
        raise typer.Exit(1)
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)
    save_config(config)
    print_success(f"{key} = {getattr(config, key)}")
