
from __future__ import annotations
import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import typer

from pqdigest import registry
from pqdigest.backends import load_adapters, load_backend
from pqdigest.config import KEYGEN_VECTOR_FILE, SIGVER_VECTOR_FILE, Settings, load_settings
from pqdigest.errors import PQDigestError
from pqdigest.params import PUBLIC_KEY_SIZE, SEED_SIZE, SIGNATURE_SIZE
from pqdigest import conformance as harness
from pqdigest import lifecycle
from pqdigest.fetch import fetch_vectors
from pqdigest.sample import generate_sample

EXIT_INVALID = 1
EXIT_ERROR = 2

app = typer.Typer(add_completion=False, help="ML-DSA-65 digest signing and ACVP conformance")


@dataclass
class CliState:
    settings: Settings
    backend_name: str
    _backend: object = None

    def backend(self):
        if self._backend is None:
            self._backend = load_backend(self.backend_name, self.settings)
        return self._backend


@contextmanager
def _fatal_on_error() -> Iterator[None]:
    """Operational errors abort the command with EXIT_ERROR."""
    try:
        yield
    except PQDigestError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_ERROR)


@app.callback()
def main(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(
        None, "--backend", help="Backend name (default: $PQDIGEST_BACKEND or dilithium-py)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    settings = load_settings()
    logging.getLogger("pqdigest").setLevel(logging.DEBUG if verbose else logging.WARNING)
    ctx.obj = CliState(settings=settings, backend_name=backend or settings.backend)


@app.command()
def keygen(
    ctx: typer.Context,
    output: Path = typer.Option(..., "--output", help="Output directory for pk.bin and sk.bin"),
) -> None:
    """Generate an ML-DSA-65 keypair; writes the public key and the 32-byte seed."""
    with _fatal_on_error():
        result = lifecycle.keygen(output, ctx.obj.backend(), rng=os.urandom)
    typer.echo(f"Public key:  {result.public_key_path} ({PUBLIC_KEY_SIZE} bytes)")
    typer.echo(f"Seed:        {result.seed_path} ({SEED_SIZE} bytes)")


@app.command()
def sign(
    ctx: typer.Context,
    key: Path = typer.Option(..., "--key", help="Path to seed file (sk.bin, 32 bytes)"),
    hash_hex: str = typer.Option(..., "--hash", help="Hex-encoded 32-byte hash (0x prefix optional)"),
    output: Path = typer.Option(..., "--output", help="Output path for the signature"),
) -> None:
    """Sign a 32-byte hash with ML-DSA-65."""
    with _fatal_on_error():
        lifecycle.sign(key, hash_hex, output, ctx.obj.backend())
    typer.echo(f"Signature written to {output} ({SIGNATURE_SIZE} bytes)")


@app.command()
def verify(
    ctx: typer.Context,
    key: Path = typer.Option(..., "--key", help="Path to public key (pk.bin)"),
    hash_hex: str = typer.Option(..., "--hash", help="Hex-encoded 32-byte hash (0x prefix optional)"),
    sig: Path = typer.Option(..., "--sig", help="Path to signature file"),
) -> None:
    """Verify an ML-DSA-65 signature against a 32-byte hash."""
    with _fatal_on_error():
        ok = lifecycle.verify(key, hash_hex, sig, ctx.obj.backend())
    if ok:
        typer.echo("Valid")
        return
    typer.echo("Invalid")
    raise typer.Exit(EXIT_INVALID)


@app.command()
def sample(ctx: typer.Context) -> None:
    """Print a fresh PK_HEX / MSG_HASH / SIG_HEX sample."""
    with _fatal_on_error():
        result = generate_sample(ctx.obj.backend(), rng=os.urandom)
    for line in result.lines():
        typer.echo(line)


@app.command("conformance")
def conformance_cmd(
    ctx: typer.Context,
    keygen_file: Optional[Path] = typer.Option(None, "--keygen", help="ACVP keyGen JSON"),
    sigver_file: Optional[Path] = typer.Option(None, "--sigver", help="ACVP sigVer JSON"),
    jobs: Optional[int] = typer.Option(None, "--jobs", min=1, help="Worker threads (default: $PQDIGEST_JOBS or 1)"),
    junit: Optional[Path] = typer.Option(None, "--junit", help="Write a JUnit XML report here"),
) -> None:
    """Replay ACVP ML-DSA-65 keyGen/sigVer vectors against the backend."""
    state: CliState = ctx.obj
    settings = state.settings
    if keygen_file is None and sigver_file is None and settings.vector_dir is not None:
        candidate = settings.vector_file(KEYGEN_VECTOR_FILE)
        keygen_file = candidate if candidate.exists() else None
        candidate = settings.vector_file(SIGVER_VECTOR_FILE)
        sigver_file = candidate if candidate.exists() else None

    with _fatal_on_error():
        reports = harness.run_conformance(
            state.backend(),
            keygen_path=keygen_file,
            sigver_path=sigver_file,
            jobs=jobs or settings.jobs,
        )
        if junit is not None:
            try:
                harness.write_junit(reports, junit)
            except OSError as exc:
                raise PQDigestError(f"failed to write JUnit report {junit}: {exc}") from exc

    failed = False
    for rep in reports:
        for line in rep.diagnostics:
            typer.echo(line, err=True)
        typer.echo(rep.summary())
        failed = failed or not rep.ok
    if junit is not None:
        typer.echo(f"Wrote JUnit: {junit}")
    if failed:
        raise typer.Exit(EXIT_INVALID)


@app.command("fetch-vectors")
def fetch_vectors_cmd(
    dest: Path = typer.Option(Path("test-vectors"), "--dest", help="Directory for keyGen.json and sigVer.json"),
) -> None:
    """Download the official ACVP ML-DSA vectors (first run only needs network)."""
    with _fatal_on_error():
        written = fetch_vectors(dest)
    for path in written.values():
        typer.echo(f"- {path}")


@app.command("list-backends")
def list_backends() -> None:
    """List registered backends."""
    load_adapters()
    for name in registry.names():
        typer.echo(f"- {name}")


def app_main():
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    app()

if __name__ == "__main__":
    app_main()
