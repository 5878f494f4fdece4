"""CLI entrypoint: Typer app definition and command registration"""

import typer

from vaultpress._logging import configure_logging
from vaultpress.cli.commands import backlinks_cmd, check_cmd, links_cmd, render_cmd


app = typer.Typer(name="vaultpress", no_args_is_help=True, help="Obsidian-flavored Markdown vault renderer")


@app.callback()
def main():
    """Obsidian-flavored Markdown vault renderer."""
    configure_logging()


app.command(name="render")(render_cmd)
app.command(name="links")(links_cmd)
app.command(name="backlinks")(backlinks_cmd)
app.command(name="check")(check_cmd)
