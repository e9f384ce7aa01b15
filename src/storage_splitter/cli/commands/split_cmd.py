"""
CLI commands that split an object, or only show how it would be split.

Usage:
    storage-splitter split BUCKET OBJECT [OPTIONS]
    storage-splitter plan BUCKET OBJECT [OPTIONS]
"""

import click

from .common import build_utils, common_options, load_config, prepare_environment, run_or_exit

split_size_option = click.option(
    "--split-size",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum size in bytes of each output object (default from configuration).",
)


@click.command(name="split")
@click.argument("bucket")
@click.argument("object_name", metavar="OBJECT")
@split_size_option
@click.option(
    "--max-concurrent",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of segment copies in flight.",
)
@common_options
def split(
    bucket: str,
    object_name: str,
    split_size: int | None,
    max_concurrent: int | None,
    config_path: str | None,
    storage_type: str | None,
    log_level: str,
    system_env: bool,
):
    """
    Split OBJECT into objects no larger than the split size without breaking lines.

    Output objects are named OBJECT-<index>-of-<count> and printed one per
    line. An object that already fits is printed unchanged.

    Example:
        storage-splitter split my-bucket exports/users.csv --split-size 500000000
    """
    prepare_environment(log_level, system_env)
    config = load_config(config_path, storage_type, bucket)
    if max_concurrent:
        config.split.max_concurrent_copies = max_concurrent
    utils = build_utils(config, object_name)

    for name in run_or_exit(utils.split(split_size)):
        click.echo(name)


@click.command(name="plan")
@click.argument("bucket")
@click.argument("object_name", metavar="OBJECT")
@split_size_option
@common_options
def plan(
    bucket: str,
    object_name: str,
    split_size: int | None,
    config_path: str | None,
    storage_type: str | None,
    log_level: str,
    system_env: bool,
):
    """
    Print the byte ranges a split of OBJECT would produce, without writing anything.

    Each row holds the segment index, start offset, end offset and length.
    """
    prepare_environment(log_level, system_env)
    config = load_config(config_path, storage_type, bucket)
    utils = build_utils(config, object_name)

    async def _plan():
        return await utils.get_split_ranges(await utils.get_file_size(), split_size)

    for index, byte_range in enumerate(run_or_exit(_plan())):
        click.echo(f"{index}\t{byte_range.start}\t{byte_range.end}\t{byte_range.length}")
