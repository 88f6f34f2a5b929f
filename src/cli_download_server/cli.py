"""Command line interface for the download server."""

from dataclasses import replace
from pathlib import Path

import click

from cli_download_server.compression import compress_files
from cli_download_server.config import ServerConfig, validate_port
from cli_download_server.errors import CliDownloadServerError
from cli_download_server.logging_setup import configure_logging
from cli_download_server.main import serve
from cli_download_server.registry import load_bundled_registry, load_registry_from_path

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def user_output(message: str) -> None:
    """Write a status message for humans to stderr."""
    click.echo(message, err=True)


def _load_config() -> ServerConfig:
    try:
        return ServerConfig.from_env()
    except CliDownloadServerError as err:
        user_output(f"✗ {err}")
        raise SystemExit(1) from err


@click.group(name="cli-download-server", context_settings=CONTEXT_SETTINGS)
def cli() -> None:
    """Serve gzip-stored command line tools over HTTP."""
    pass


@cli.command("serve")
@click.option("--host", default=None, help="Interface to bind (default: SERVER_HOST)")
@click.option("--port", default=None, help="Port to listen on (default: SERVER_PORT)")
def serve_command(host: str | None, port: str | None) -> None:
    """Compress new files, load metadata and start the HTTP server."""
    config = _load_config()
    overrides: dict[str, object] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        try:
            overrides["port"] = validate_port(port)
        except CliDownloadServerError as err:
            raise click.BadParameter(str(err), param_hint="--port") from err
    config = replace(config, **overrides)  # type: ignore[arg-type]

    configure_logging(config.debug)
    try:
        serve(config)
    except CliDownloadServerError as err:
        user_output(f"✗ Startup failed: {err}")
        raise SystemExit(1) from err


@cli.command("compress")
@click.option(
    "--dir",
    "store_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Artifact directory (default: FILE_SERVER_DIR)",
)
def compress_command(store_dir: Path | None) -> None:
    """Gzip every uncompressed file at the top level of the artifact directory."""
    if store_dir is None:
        store_dir = _load_config().file_server_dir
    configure_logging(debug=False)

    compressed = compress_files(store_dir)
    for path in compressed:
        click.echo(str(path))
    user_output(f"✓ Compressed {len(compressed)} file(s) in {store_dir}")


@cli.command("list-files")
@click.option(
    "--metadata",
    "metadata_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Descriptor document (default: the bundled one)",
)
def list_files_command(metadata_path: Path | None) -> None:
    """Print the files described by the metadata document."""
    try:
        if metadata_path is not None:
            registry = load_registry_from_path(metadata_path)
        else:
            registry = load_bundled_registry()
    except CliDownloadServerError as err:
        user_output(f"✗ {err}")
        raise SystemExit(1) from err

    for descriptor in registry.sorted_descriptors():
        click.echo(f"{descriptor.name}\t{descriptor.platform}\t{descriptor.mime}\t{descriptor.size}")
