"""Console script for bootanim_converter."""

import typer

from bootanim_converter.boot2vid.cli import boot2vid
from bootanim_converter.vid2boot.cli import vid2boot

__version__ = "0.1.0"

app = typer.Typer(help="Convert between Android bootanimation.zip files and videos.")

app.command(name="boot2vid")(boot2vid)
app.command(name="vid2boot")(vid2boot)


@app.command()
def version():
    """Display version information."""
    typer.echo(f"Bootanimation Converter v{__version__}")
    raise typer.Exit()


if __name__ == "__main__":
    app()
