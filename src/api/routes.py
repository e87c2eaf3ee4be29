"""HTTP routes: bulk availability, single-domain availability, name search."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from adapters.uploads import decode_upload
from api.errors import error_response, internal_error_response, success_response
from core.domain.errors import InputError
from core.domain.models import SearchQuery
from core.services.aggregator import Aggregator
from core.services.bulk_pipeline import BulkInput, BulkPipeline
from core.services.search import SearchService

router = APIRouter(prefix="/api")


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InputError("Invalid JSON body") from exc


async def read_bulk_input(request: Request) -> BulkInput | None:
    """Extract the raw bulk input according to the request's content type."""

    content_type = (request.headers.get("content-type") or "").lower()

    if "application/json" in content_type:
        body = await _read_json(request)
        if not isinstance(body, dict):
            return None
        domains = body.get("domains")
        if isinstance(domains, list):
            return [str(d) for d in domains if d is not None]
        text = body.get("text")
        if isinstance(text, str):
            return text
        return None

    if "multipart/form-data" in content_type:
        form = await request.form()
        upload = form.get("file")
        text = form.get("text")
        if isinstance(upload, UploadFile):
            data = await upload.read()
            return decode_upload(data, filename=upload.filename, content_type=upload.content_type)
        if isinstance(text, str):
            return text
        return None

    if "text/plain" in content_type:
        raw = await request.body()
        return raw.decode("utf-8", errors="replace")

    raise InputError("Unsupported content type")


@router.post("/availability/bulk")
async def bulk_availability(request: Request) -> JSONResponse:
    pipeline: BulkPipeline = request.app.state.bulk_pipeline
    try:
        raw = await read_bulk_input(request)
        report = await pipeline.process_bulk(raw)
    except InputError:
        raise
    except Exception as exc:  # noqa: BLE001 - outermost boundary
        return internal_error_response(request, exc)
    return success_response(report.to_wire())


@router.get("/availability")
async def domain_availability(
    request: Request,
    domain: str = Query(..., min_length=1, max_length=253),
) -> JSONResponse:
    aggregator: Aggregator = request.app.state.aggregator
    try:
        result = await aggregator.compare_prices(domain)
    except InputError:
        raise
    except Exception as exc:  # noqa: BLE001 - outermost boundary
        return internal_error_response(request, exc)
    return success_response(result.to_wire())


@router.post("/search")
async def search_domains(request: Request) -> JSONResponse:
    service: SearchService = request.app.state.search_service
    try:
        body = await _read_json(request)
        try:
            query = SearchQuery.model_validate(body)
        except ValidationError as exc:
            raise InputError("Invalid search query") from exc
        result = await service.search(query)
    except InputError:
        raise
    except Exception as exc:  # noqa: BLE001 - outermost boundary
        return internal_error_response(request, exc)
    return success_response(result.to_wire())


@router.get("/search")
async def search_method_not_allowed() -> JSONResponse:
    return error_response(
        "Method not allowed. Use POST to search for domains.",
        status.HTTP_405_METHOD_NOT_ALLOWED,
    )
