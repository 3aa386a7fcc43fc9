"""
FastAPI application exposing upload, reports and reset over HTTP.

Routes:
    POST /upload                  multipart field "file"
    GET  /report/accounts         account -> card -> balance
    GET  /report/bad-transactions malformed rows, verbatim
    GET  /report/collections      accounts with a negative transaction
    POST /reset                   clear the snapshot
    GET  /metrics                 Prometheus exposition
"""

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from transaction_processor.config import Settings
from transaction_processor.core.errors import MalformedInput, StoreUnavailable
from transaction_processor.engine import TransactionEngine
from transaction_processor.observability.logger import get_logger
from transaction_processor.observability.metrics import generate_metrics, get_content_type

logger = get_logger(__name__)


def create_app(
    engine: TransactionEngine | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        engine: Engine to serve (built from settings when omitted)
        settings: Settings for CORS and engine construction (from env when omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings.from_env()
    engine = engine or TransactionEngine.from_settings(settings)

    app = FastAPI(title="Transaction Processor")
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MalformedInput)
    async def handle_malformed_input(request: Request, exc: MalformedInput):
        logger.warning(f"Rejected upload: {exc}", extra={"path": request.url.path})
        return JSONResponse(
            status_code=400,
            content={"error": "Failed to process transactions", "detail": str(exc)},
        )

    @app.exception_handler(StoreUnavailable)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailable):
        logger.error(f"Store unavailable: {exc}", extra={"path": request.url.path})
        return JSONResponse(
            status_code=503,
            content={"error": "Transaction store unavailable", "detail": exc.message},
        )

    @app.post("/upload")
    def upload(file: UploadFile = File(...)):
        result = engine.ingest(file.file, source=file.filename or "upload")
        return {"message": "Transactions processed successfully", **result.model_dump()}

    @app.get("/report/accounts")
    def account_report():
        return engine.account_report()

    @app.get("/report/bad-transactions")
    def malformed_report():
        return engine.malformed_report()

    @app.get("/report/collections")
    def collections_report():
        return engine.collections_report()

    @app.post("/reset")
    def reset():
        engine.reset()
        return {"message": "System reset successfully"}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_metrics(), media_type=get_content_type())

    return app
