"""Listing visibility endpoint - render a listing or a single field for a role."""

import json
from typing import Any, Optional

from pydantic import ValidationError

from src.models.listing import Listing
from src.models.visibility import parse_field, parse_role, parse_status
from src.services.field_formatter import render_field
from src.services.listing_view import render_listing_view
from src.services.visibility_policy import resolve_visibility
from src.utils.errors import ListingVisibilityError
from src.utils.logging import correlation_context, get_structured_logger, log_timing, setup_logging
from src.utils.logging_config import LoggingConfig

setup_logging()
logger = get_structured_logger(__name__)


def _response(status_code: int, payload: dict, correlation_id: Optional[str] = None) -> dict:
    headers = {"Content-Type": "application/json"}
    if correlation_id:
        headers[LoggingConfig.LOG_CORRELATION_ID_HEADER] = correlation_id
    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json.dumps(payload, ensure_ascii=False)
    }


def _header(request: dict, name: str) -> Optional[str]:
    headers = request.get("headers", {}) or {}
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def _parse_body(request: dict) -> Any:
    raw_body = request.get("body") or "{}"
    if isinstance(raw_body, (bytes, bytearray)):
        raw_body = raw_body.decode('utf-8')
    if isinstance(raw_body, str):
        return json.loads(raw_body)
    return raw_body


def render_request(body: dict) -> dict:
    """
    Render the payload of a visibility request.

    {"role", "listing"} renders the whole listing; {"role", "field", "value",
    "status"} renders one field and reports its resolved level.
    """
    role = parse_role(body.get("role"))

    if "listing" in body:
        listing = Listing.model_validate(body["listing"])
        return render_listing_view(listing, role).model_dump(mode="json")

    field = parse_field(body.get("field"))
    status = parse_status(body.get("status"))
    return {
        "field": field.value,
        "level": resolve_visibility(field, role, status).value,
        "value": render_field(field, body.get("value"), role, status),
    }


def handler(request):
    """Handle a visibility render request (Vercel request dict)."""
    with correlation_context(_header(request, LoggingConfig.LOG_CORRELATION_ID_HEADER)) as correlation_id:
        if (request.get("method") or "POST").upper() != "POST":
            return _response(405, {"error": "method not allowed"}, correlation_id)

        try:
            body = _parse_body(request)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Invalid JSON body", error=str(e))
            return _response(400, {"error": "invalid JSON body"}, correlation_id)

        if not isinstance(body, dict):
            return _response(400, {"error": "request body must be a JSON object"}, correlation_id)

        try:
            with log_timing("render_visibility_request", logger=logger):
                payload = render_request(body)
            return _response(200, payload, correlation_id)

        except ValidationError as e:
            logger.warning("Invalid listing payload", error_count=e.error_count())
            return _response(
                422,
                {
                    "error": "invalid listing",
                    "details": [
                        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                        for err in e.errors()
                    ]
                },
                correlation_id
            )
        except ListingVisibilityError as e:
            logger.warning("Rejected visibility request", error_type=type(e).__name__, error=str(e))
            return _response(400, {"error": str(e), "error_type": type(e).__name__}, correlation_id)
        except Exception as e:
            logger.error(f"Error rendering visibility request: {e}", exc_info=True)
            return _response(500, {"error": "internal server error"}, correlation_id)
