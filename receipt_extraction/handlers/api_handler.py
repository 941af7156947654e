"""
HTTP handler for receipt extraction service.

Exposes POST /api/receipt/extract for multipart uploads. Run it with
server_handler.py or any ASGI server.
"""

import logging
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.models import ExtractionResult, FailureKind, TransportHint
from ..core.processor import INTERNAL_ERROR_MESSAGE, ReceiptExtractor
from ..utils.config import Settings
from ..utils.logger import get_logger


# Multipart framing around the file itself
MULTIPART_OVERHEAD_BYTES = 1024 * 1024


def create_app(extractor: Optional[ReceiptExtractor] = None,
               settings: Optional[Settings] = None,
               logger: Optional[logging.Logger] = None) -> FastAPI:
    """
    Build the FastAPI application.
    
    Args:
        extractor: Pipeline instance (if None, one is built from settings)
        settings: Runtime settings (if None, read from the environment)
        logger: Logger instance for logging output
    """
    log = get_logger(logger)
    if extractor is None:
        settings = settings or Settings.from_env()
        extractor = ReceiptExtractor(settings=settings, logger=log)
    settings = extractor.settings
    request_limit = settings.upload_policy.max_size_bytes + MULTIPART_OVERHEAD_BYTES
    
    app = FastAPI(title="Receipt Extraction API", version=__version__)
    app.state.extractor = extractor
    
    origins = list(settings.cors_allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    @app.middleware("http")
    async def limit_request_size(request: Request, call_next):
        length = request.headers.get("content-length", "")
        if request.method == "POST" and length.isdigit() and int(length) > request_limit:
            log.warning(f"Rejected request body of {length} bytes (limit {request_limit})")
            result = ExtractionResult.error(
                f"File size exceeds maximum allowed size of {settings.upload_policy.max_size_mb}MB",
                FailureKind.PAYLOAD_TOO_LARGE,
            )
            return JSONResponse(status_code=result.http_status, content=result.to_dict())
        return await call_next(request)
    
    @app.get("/health")
    def health_check():
        return {"status": "ok"}
    
    @app.post("/api/receipt/extract")
    def extract_receipt(file: Optional[UploadFile] = File(None)):
        try:
            if file is None:
                data, filename, content_type = b"", "", None
            else:
                data = file.file.read()
                filename, content_type = file.filename or "", file.content_type
                log.info(f"Processing receipt upload: {filename}")

            result = app.state.extractor.extract(
                data, TransportHint.RAW_BINARY, filename=filename, content_type=content_type
            )
        except Exception as e:
            log.error(f"Error processing receipt extraction request: {e}", exc_info=True)
            result = ExtractionResult.error(INTERNAL_ERROR_MESSAGE, FailureKind.INTERNAL)
        
        return JSONResponse(status_code=result.http_status, content=result.to_dict())
    
    return app


app = create_app()
