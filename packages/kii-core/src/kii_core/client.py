import json
import logging
import requests
from typing import Dict, Any, Optional

from .errors import KiiRemoteError, KiiSerializationError, KiiTransportError

logger = logging.getLogger(__name__)

USER_AGENT = "kii-iot-python/0.1.0"
JSON_CONTENT_TYPE = "application/json"

class KiiClient:
    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                body: Any = None) -> bytes:
        """
        Send a single request and return the raw response body.

        Args:
            method: HTTP method (e.g., "POST")
            url: Absolute URL of the endpoint
            headers: Extra request headers
            body: JSON-serializable request body, or None for an empty body

        Returns:
            bytes: The full response body for any status in 200-399

        Raises:
            KiiSerializationError: body could not be encoded as JSON
            KiiTransportError: the connection failed
            KiiRemoteError: the server answered with any other status
        """
        if headers is None:
            headers = {}

        data = None
        if body is not None:
            try:
                data = json.dumps(body)
            except (TypeError, ValueError) as e:
                raise KiiSerializationError(f"Failed to encode request body for {url}: {e}") from e

        # Set default headers if not provided
        if "Content-Type" not in headers:
            headers["Content-Type"] = JSON_CONTENT_TYPE

        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, headers=headers, data=data)
        except requests.RequestException as e:
            logger.error(f"Request {method} {url} failed: {e}")
            raise KiiTransportError(str(e)) from e

        content = response.content
        logger.debug(f"body: {response.text}")

        if 200 <= response.status_code < 400:
            return content

        logger.warning(f"{method} {url} rejected with status {response.status_code}")
        raise KiiRemoteError(response.text, status_code=response.status_code)

    def request_json(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                     body: Any = None) -> Dict[str, Any]:
        """
        Send a request and return the decoded JSON response.

        An empty body is a serialization failure, even on a success status.
        """
        content = self.request(method, url, headers, body)
        if not content:
            logger.error(f"Empty response body for URL: {url}")
            raise KiiSerializationError(f"Expected a JSON response from {url}, got an empty body")
        try:
            return json.loads(content)
        except ValueError as e:
            # Better error details for JSON parsing issues
            logger.error(f"JSON Parse Error for URL: {url}")
            logger.error(f"Response Text: {content[:500]!r}...")
            raise KiiSerializationError(f"Failed to parse JSON response: {e}") from e
