import click

from .. import __version__
from .commands.header_cmd import add_header
from .commands.split_cmd import plan, split


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(
    __version__, "-v", "--version", help="Show the CLI version and exit."
)
def cli():
    """Split and prepend headers to large text objects in cloud storage."""
    pass


cli.add_command(split)
cli.add_command(plan)
cli.add_command(add_header)


def main():
    cli()


if __name__ == "__main__":
    main()
