"""
HTTP surface of the share receiver.
"""
import json
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ._rate_limited_log import rate_limited_log
from .chain import ATTESTATION_LOGIC_ABI, LogDecoder, OnChainLogFetcher
from .config import ReceiverSettings
from .exceptions import InfrastructureError
from .pipeline import VerificationPipeline
from .version import __version__

logger = logging.getLogger(__name__)


class ShareJSONResponse(JSONResponse):
    """JSON response that falls back to ASCII escapes for text UTF-8 cannot carry"""

    def render(self, content: Any) -> bytes:
        try:
            return super().render(content)
        except UnicodeEncodeError:
            return json.dumps(content, allow_nan=False, separators=(",", ":")).encode("ascii")


def build_pipeline(settings: ReceiverSettings) -> VerificationPipeline:
    """Wire the pipeline and its collaborators from settings"""
    decoder = LogDecoder(ATTESTATION_LOGIC_ABI)
    fetcher = OnChainLogFetcher(settings.web3_provider, decoder, timeout=settings.rpc_timeout)
    return VerificationPipeline(fetcher, address_comparison=settings.address_comparison)


def create_app(
    settings: Optional[ReceiverSettings] = None,
    pipeline: Optional[VerificationPipeline] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings used to build the pipeline when none is given
        pipeline: Pre-built pipeline (takes precedence over settings)

    Returns:
        Configured FastAPI app

    Raises:
        ValueError: If neither settings nor pipeline is provided
    """
    if pipeline is None:
        if settings is None:
            raise ValueError("Either settings or pipeline must be provided")
        pipeline = build_pipeline(settings)

    app = FastAPI(title="share-receiver", version=__version__, default_response_class=ShareJSONResponse)
    app.state.pipeline = pipeline

    @app.exception_handler(InfrastructureError)
    async def _infrastructure_error(request: Request, exc: InfrastructureError) -> ShareJSONResponse:
        rate_limited_log(f"Verification aborted: {exc}", level="error", logger_instance=logger)
        return ShareJSONResponse(status_code=502, content={"detail": "Blockchain node request failed"})

    @app.post("/api/receive")
    async def receive(request: Request) -> ShareJSONResponse:
        try:
            body = await request.json()
        except ValueError:
            logger.debug("Request body is not valid JSON")
            body = None

        result = await request.app.state.pipeline.verify(body)
        status_code = 200 if result.is_accepted else 400
        return ShareJSONResponse(status_code=status_code, content=result.response_body())

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app
