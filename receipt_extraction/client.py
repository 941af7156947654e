"""
Client for deployed receipt extraction endpoints.
"""

import base64
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests

from .core.exceptions import ClientRequestError


API_MODE = "api"
GATEWAY_MODE = "gateway"


class ReceiptApiClient:
    """
    Uploads receipt images to either deployment face.
    
    In "api" mode the image is posted as multipart form field "file" to
    /api/receipt/extract. In "gateway" mode it is sent as base64 text to
    /receipt/extract with the X-File-Content-Encoding header, the way browsers
    reach the Lambda function through API Gateway.
    """

    def __init__(self, base_url: str, mode: str = API_MODE, timeout: float = 90,
                 session: Optional[requests.Session] = None):
        if mode not in (API_MODE, GATEWAY_MODE):
            raise ValueError(f"Unknown mode '{mode}'. Choose from: {API_MODE}, {GATEWAY_MODE}")
        self.base_url = base_url.rstrip("/")
        self.mode = mode
        self.timeout = timeout
        self.session = session or requests.Session()

    def extract_file(self, image_path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(image_path)
        return self.extract_bytes(path.read_bytes(), path.name)

    def extract_bytes(self, data: bytes, filename: str) -> Dict[str, Any]:
        """
        Upload an image and return the decoded ExtractionResult body.
        
        Args:
            data: Image bytes
            filename: Name reported to the server
            
        Returns:
            The JSON body, for both Success and Error results
            
        Raises:
            ClientRequestError: If the endpoint cannot be reached or does not answer with JSON
        """
        try:
            if self.mode == API_MODE:
                content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
                response = self.session.post(
                    f"{self.base_url}/api/receipt/extract",
                    files={"file": (filename, data, content_type)},
                    timeout=self.timeout,
                )
            else:
                response = self.session.post(
                    f"{self.base_url}/receipt/extract",
                    data=base64.b64encode(data).decode("ascii"),
                    headers={
                        "Content-Type": "text/plain",
                        "X-File-Content-Encoding": "base64",
                        "X-File-Name": filename,
                    },
                    timeout=self.timeout,
                )
        except requests.exceptions.RequestException as e:
            raise ClientRequestError(f"Failed to reach receipt endpoint: {str(e)}") from e
        
        try:
            return response.json()
        except ValueError:
            try:
                response.raise_for_status()
            except requests.exceptions.HTTPError as e:
                raise ClientRequestError(f"Receipt endpoint returned an error: {str(e)}") from e
            raise ClientRequestError(
                f"Receipt endpoint returned a non-JSON response (HTTP {response.status_code})"
            )
