"""
sep001/cli/__init__.py

sep001 CLI: root Click command group.

Registered in pyproject.toml as:

    [project.scripts]
    sep001 = "sep001.cli:cli"
"""

import click

from sep001.cli.decode import decode_command


@click.group()
@click.version_option(package_name="sep001")
def cli() -> None:
    """
    sep001: SEP-001 Compact envelope tools.

    \b
    Commands:
      decode    Fetch, verify and resolve a SEP-001 envelope by CID.

    \b
    Quick start:
      sep001 decode bafkrei...
      sep001 decode bafkrei... --format json
      sep001 decode bafkrei... --api-url http://ipfs:5001 --quiet && echo "authentic"
    """
    pass


cli.add_command(decode_command)
