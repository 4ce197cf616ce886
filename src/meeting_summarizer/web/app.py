"""FastAPI web application exposing the summarizer endpoints."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, Request, UploadFile, status as http_status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.templating import Jinja2Templates

from meeting_summarizer.core import AppSettings, load_app_settings
from meeting_summarizer.core.errors import (
    DeliveryError,
    UpstreamError,
    ValidationError,
)
from meeting_summarizer.core.models import (
    DeliveryResult,
    EmailDraft,
    EmailEnvelope,
    Transcript,
)
from meeting_summarizer.ingestion import TranscriptSource
from meeting_summarizer.intelligence import (
    LLMClient,
    SummarizationService,
    build_llm_client,
)
from meeting_summarizer.sharing import compose_envelope
from meeting_summarizer.transport import EmailDeliveryClient, build_delivery_client

LOGGER = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_DEFAULT_ENV_FILE = _PROJECT_ROOT / ".env"


class SummarizePayload(BaseModel):
    """Body of ``POST /summarize``."""

    model_config = ConfigDict(populate_by_name=True)

    transcript: str = ""
    custom_prompt: str | None = Field(default=None, alias="customPrompt")


class SendEmailPayload(BaseModel):
    """Body of ``POST /send-email``."""

    model_config = ConfigDict(populate_by_name=True)

    recipients: list[str] = Field(default_factory=list)
    subject: str = ""
    message: str = ""
    summary: str = ""
    custom_prompt: str | None = Field(default=None, alias="customPrompt")
    transcript_length: int = Field(default=0, ge=0, alias="transcriptLength")


def create_app(
    settings: AppSettings | None = None,
    *,
    llm_client: LLMClient | None = None,
    delivery_client: EmailDeliveryClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``llm_client`` and ``delivery_client`` replace the clients otherwise built
    from ``settings``.
    """
    app_settings = settings or load_app_settings(env_file=_DEFAULT_ENV_FILE)
    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
    app = FastAPI(title="AI Meeting Summarizer")

    summarizer = SummarizationService(
        llm_client if llm_client is not None else build_llm_client(app_settings.llm)
    )
    delivery = delivery_client or build_delivery_client(app_settings.smtp)
    source = TranscriptSource()

    @app.exception_handler(ValidationError)
    async def handle_validation_error(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return _error_response(http_status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            http_status.HTTP_400_BAD_REQUEST, _format_request_errors(exc)
        )

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(
        request: Request, exc: UpstreamError
    ) -> JSONResponse:
        return _error_response(
            http_status.HTTP_502_BAD_GATEWAY, f"Failed to generate summary: {exc}"
        )

    @app.exception_handler(DeliveryError)
    async def handle_delivery_error(
        request: Request, exc: DeliveryError
    ) -> JSONResponse:
        return _error_response(
            http_status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to send email: {exc}"
        )

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "provider": summarizer.provider_id,
                "delivery_mode": delivery.mode.value,
            },
        )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "provider": summarizer.provider_id,
            "deliveryMode": delivery.mode.value,
        }

    @app.post("/transcripts")
    async def upload_transcript(
        file: UploadFile = File(...),  # noqa: B008
    ) -> dict[str, Any]:
        raw = await file.read()
        transcript = source.load(raw, file.content_type, source_name=file.filename)
        return _serialize_transcript(transcript)

    @app.post("/summarize")
    async def summarize(payload: SummarizePayload) -> dict[str, Any]:
        transcript = source.from_text(payload.transcript)
        summary = await asyncio.to_thread(
            summarizer.generate, transcript, payload.custom_prompt
        )
        return {"summary": summary.current_text}

    @app.post("/send-email")
    async def send_email(payload: SendEmailPayload) -> dict[str, Any]:
        draft = EmailDraft(
            recipients=tuple(payload.recipients),
            subject=payload.subject,
            message=payload.message.strip(),
        )
        envelope = compose_envelope(
            draft,
            payload.summary,
            payload.transcript_length,
            payload.custom_prompt,
        )
        result = await asyncio.to_thread(delivery.send, envelope)
        return _serialize_delivery(result)

    return app


def _error_response(status_code: int, message: str) -> JSONResponse:
    LOGGER.info("Request failed with %d: %s", status_code, message)
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_request_errors(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part != "body"
        )
        message = str(error.get("msg", "invalid value"))
        problems.append(f"{location}: {message}" if location else message)
    return "Invalid request: " + "; ".join(problems)


def _serialize_transcript(transcript: Transcript) -> dict[str, Any]:
    return {
        "transcript": transcript.text,
        "length": transcript.length,
        "sourceName": transcript.source_name,
    }


def _serialize_preview(envelope: EmailEnvelope) -> dict[str, Any]:
    return {
        "to": list(envelope.to),
        "subject": envelope.subject,
        "content": envelope.text_body,
    }


def _serialize_delivery(result: DeliveryResult) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": True,
        "message": result.message,
        "recipients": list(result.recipients),
    }
    if result.demo:
        payload["demo"] = True
        if result.preview is not None:
            payload["emailPreview"] = _serialize_preview(result.preview)
    return payload


__all__ = ["create_app"]
