"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from src.models.visibility import ListingStatus, UserRole
from src.services.visibility_policy import NEGOTIATION_OVERRIDES, POLICY_MATRIX

SERVICE_NAME = "listing-visibility"


def health_payload() -> dict:
    """Report liveness along with the size of the loaded policy tables."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "policy": {
            "fields": len(POLICY_MATRIX),
            "roles": len(UserRole),
            "states": len(ListingStatus),
            "negotiation_overrides": sum(len(fields) for fields in NEGOTIATION_OVERRIDES.values()),
        },
    }


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def _send_json(self, status_code: int, payload: dict) -> None:
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode('utf-8'))

    def do_GET(self):
        self._send_json(200, health_payload())

    def do_POST(self):
        self.do_GET()
