"""
CLI command that prepends a header line to an object.

Usage:
    storage-splitter add-header BUCKET OBJECT HEADER [OPTIONS]
"""

import click

from .common import build_utils, common_options, load_config, prepare_environment, run_or_exit


@click.command(name="add-header")
@click.argument("bucket")
@click.argument("object_name", metavar="OBJECT")
@click.argument("header")
@click.option(
    "-o",
    "--output",
    "output_name",
    default=None,
    help="Name of the new object (default: OBJECT_w_header).",
)
@common_options
def add_header(
    bucket: str,
    object_name: str,
    header: str,
    output_name: str | None,
    config_path: str | None,
    storage_type: str | None,
    log_level: str,
    system_env: bool,
):
    """
    Create a copy of OBJECT with HEADER as its first line.

    The copy is composed server-side, so the source content is never
    downloaded. Prints the name of the new object.

    Example:
        storage-splitter add-header my-bucket exports/users.csv "id,name,email"
    """
    prepare_environment(log_level, system_env)
    config = load_config(config_path, storage_type, bucket)
    utils = build_utils(config, object_name)

    click.echo(run_or_exit(utils.add_header(header, output_name=output_name)))
