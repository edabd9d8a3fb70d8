"""B2 API errors."""
import json
from typing import Optional


class B2APIError(Exception):
    """
    Exception raised for non-2xx responses from the B2 API.
    
    B2 reports failures as {"status": 400, "code": "bad_request", "message": "..."};
    `code` and `message` are filled from that body when it parses.
    """
    
    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        self.code: Optional[str] = None
        self.message = body
        try:
            data = json.loads(body) if body else None
        except ValueError:
            data = None
        if isinstance(data, dict):
            self.code = data.get('code')
            self.message = data.get('message') or body
        super().__init__(f"HTTP {status}: {body}")
