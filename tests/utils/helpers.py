"""Test helper functions."""

import json
from typing import Dict, Any, Optional


def create_vercel_request(
    method: str = "POST",
    path: str = "/api/listings/visibility",
    body: Any = None,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    if body is None:
        body = {}

    if headers is None:
        headers = {
            "content-type": "application/json"
        }

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": json.dumps(body, ensure_ascii=False) if isinstance(body, (dict, list)) else body,
        "query": {}
    }
