"""
Command-line interface for the Sunrise DA adapter.

This script loads the adapter configuration and exposes the DA operations
(submit, get, get-ids, max-blob-size) for manual use against a Sunrise
blob service.
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from sunrise_da.core.config import AdapterConfig, load_config
from sunrise_da.core.da import SunriseDA, SunriseDAError

DEFAULT_CONFIG_PATH = Path("config.json")

logger = logging.getLogger("sunrise_da.cli")

# Create Typer app
app = typer.Typer(help="Sunrise DA adapter")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to the JSON config file (default: ./config.json if present)"
    ),
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help="Path to a .env file with SUNRISE_* variables"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Load configuration shared by all commands."""
    _setup_logging(verbose)

    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH

    try:
        config = load_config(config_path)
    except (OSError, ValueError, ValidationError) as e:
        typer.echo(f"❌ Invalid configuration: {str(e)}", err=True)
        raise typer.Exit(code=1)

    ctx.obj = config


def _adapter(ctx: typer.Context) -> SunriseDA:
    config: AdapterConfig = ctx.obj
    return SunriseDA(config)


@app.command("show-config")
def show_config(ctx: typer.Context):
    """Print the effective configuration as JSON."""
    config: AdapterConfig = ctx.obj
    typer.echo(config.model_dump_json(indent=2))


@app.command("max-blob-size")
def max_blob_size(ctx: typer.Context):
    """Print the maximum blob size in bytes."""
    with _adapter(ctx) as da:
        typer.echo(str(da.max_blob_size()))


@app.command()
def submit(
    ctx: typer.Context,
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to publish as blobs"),
):
    """Publish files as one batch and print their identifiers."""
    blobs = [path.read_bytes() for path in files]

    with _adapter(ctx) as da:
        try:
            ids = da.submit(blobs)
        except SunriseDAError as e:
            typer.echo(f"❌ Submission failed: {str(e)}", err=True)
            raise typer.Exit(code=1)

    for id_ in ids:
        typer.echo(f"{id_.hex()}  {id_.decode('utf-8')}")


@app.command()
def get(
    ctx: typer.Context,
    ids: List[str] = typer.Argument(..., help="Locators (or hex identifiers with --hex)"),
    hex_ids: bool = typer.Option(False, "--hex", help="Treat identifiers as hex-encoded bytes"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory to write fetched blobs into"
    ),
):
    """Fetch blobs by identifier."""
    try:
        raw_ids = [bytes.fromhex(value) for value in ids] if hex_ids else [value.encode("utf-8") for value in ids]
    except ValueError as e:
        typer.echo(f"❌ Invalid hex identifier: {str(e)}", err=True)
        raise typer.Exit(code=1)

    with _adapter(ctx) as da:
        try:
            blobs = da.get(raw_ids)
        except SunriseDAError as e:
            typer.echo(f"❌ Fetch failed: {str(e)}", err=True)
            raise typer.Exit(code=1)

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    for index, (value, blob) in enumerate(zip(ids, blobs)):
        if output_dir is not None:
            target = output_dir / f"blob_{index}.bin"
            target.write_bytes(blob)
            typer.echo(f"{value}: {len(blob)} bytes -> {target}")
        else:
            typer.echo(f"{value}: {len(blob)} bytes")


@app.command("get-ids")
def get_ids(ctx: typer.Context, height: int = typer.Argument(..., help="Block height")):
    """Print the identifiers for a block height as hex."""
    with _adapter(ctx) as da:
        try:
            ids = da.get_ids(height)
        except SunriseDAError as e:
            typer.echo(f"❌ {str(e)}", err=True)
            raise typer.Exit(code=1)

    for id_ in ids:
        typer.echo(id_.hex())


if __name__ == "__main__":
    app()
