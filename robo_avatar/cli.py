"""robo-avatar CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from robo_avatar.config import AvatarConfig
from robo_avatar.fingerprint import digest, selectors
from robo_avatar.generator import default_generator
from robo_avatar.identicon import identicon_png
from robo_avatar.layers import resolve_layers
from robo_avatar.log import setup_logging
from robo_avatar.sprites import save_atlas

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Logging level (default from env)"),
):
    setup_logging(log_level or AvatarConfig.from_env().log_level)


@app.command()
def generate(text: str, out: Path = typer.Option(..., help="Output PNG path")):
    avatar = default_generator().avatar(text)
    out.write_bytes(avatar.png)
    typer.echo(f"{avatar.etag} -> {out} ({len(avatar.png)} bytes)")


@app.command()
def inspect(text: str):
    value = digest(text)
    picked = selectors(value)
    typer.echo(f"digest: {value.hex()}")
    typer.echo(f"selectors: {' '.join(str(v) for v in picked.as_tuple())}")
    for placement in resolve_layers(picked):
        typer.echo(
            f"{placement.layer.value:>9}: style={placement.style} "
            f"color={placement.color} origin={placement.origin}"
        )


@app.command()
def identicon(text: str, out: Path = typer.Option(..., help="Output PNG path")):
    out.write_bytes(identicon_png(text))
    typer.echo(f"identicon {text} -> {out}")


@app.command("build-atlas")
def build_atlas(out: Path):
    save_atlas(str(out))
    typer.echo(f"atlas -> {out}")


if __name__ == "__main__":
    app()
