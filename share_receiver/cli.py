"""
Command line interface for the share receiver.

    share-receiver serve             run the HTTP service
    share-receiver verify FILE       verify one submission from a JSON file
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from .app import create_app
from .chain import ATTESTATION_LOGIC_ABI, LogDecoder, OnChainLogFetcher
from .config import load_settings
from .exceptions import ConfigurationError, InfrastructureError
from .pipeline import VerificationPipeline
from .signing import AddressComparison

app = typer.Typer(help="Verify shared attestation submissions.")
logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


@app.command()
def serve(
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Path to a .env file"),
):
    """Run the HTTP service on the configured PORT."""
    try:
        settings = load_settings(str(env_file) if env_file else None)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    _configure_logging(settings.log_level)
    logger.info(f"Share receiver listening on {settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


@app.command()
def verify(
    submission_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON submission"),
    provider: str = typer.Option(..., "--provider", envvar="WEB3_PROVIDER", help="Blockchain RPC URL"),
    address_comparison: AddressComparison = typer.Option(
        AddressComparison.CHECKSUM, "--address-comparison", envvar="ADDRESS_COMPARISON"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", envvar="LOG_LEVEL"),
):
    """Verify a submission file; exit 0 if accepted, 1 if rejected, 2 on failure."""
    _configure_logging(log_level)

    try:
        body = json.loads(submission_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        typer.echo(f"Error: could not read {submission_file}: {e}", err=True)
        raise typer.Exit(code=2)

    fetcher = OnChainLogFetcher(provider, LogDecoder(ATTESTATION_LOGIC_ABI))
    pipeline = VerificationPipeline(fetcher, address_comparison=address_comparison)

    async def _verify():
        try:
            return await pipeline.verify(body)
        finally:
            await fetcher.close()

    try:
        result = asyncio.run(_verify())
    except InfrastructureError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(json.dumps(result.response_body(), indent=2))
    if not result.is_accepted:
        typer.echo(f"Rejected at stage: {result.stage.value}", err=True)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
