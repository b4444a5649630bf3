"""
mtg_resolver/__main__.py: Entry point for running CLI as module
Allows: python -m mtg_resolver <command>
"""

from mtg_resolver.cli.main import cli

if __name__ == '__main__':
    cli()
