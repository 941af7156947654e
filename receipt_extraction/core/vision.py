"""
OpenAI vision API wrapper.
"""

import base64
import logging
from typing import Optional

import openai
from openai import OpenAI

from .exceptions import UpstreamError
from ..utils.config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS
from ..utils.logger import get_logger


class VisionClient:
    """
    Sends one image plus an instruction to an OpenAI chat model.
    
    No retries are made here: a failed or timed out call surfaces as
    UpstreamError and the caller decides whether to resubmit.
    """

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL,
                 timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
                 max_tokens: int = DEFAULT_MAX_TOKENS,
                 client: Optional[OpenAI] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the vision client.
        
        Args:
            api_key: OpenAI API key
            model: Chat model with image input support
            timeout_seconds: Hard limit for a single request
            max_tokens: Completion token cap
            client: Preconfigured OpenAI client (tests)
            logger: Logger instance for logging output
        """
        if not api_key:
            raise ValueError("OpenAI API key is required for the vision client")
        self.model = model
        self.max_tokens = max_tokens
        self.logger = get_logger(logger)
        self.client = client or OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)

    @staticmethod
    def to_data_url(image_bytes: bytes, mime_type: str) -> str:
        encoded = base64.b64encode(image_bytes).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"

    def invoke(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        """
        Ask the model about an image.
        
        Args:
            image_bytes: Raw image data
            mime_type: MIME type sent with the image
            prompt: Instruction text
            
        Returns:
            The model's reply text
            
        Raises:
            UpstreamError: On transport, auth or model failure, timeout, or an empty reply
        """
        self.logger.info(f"Sending request to OpenAI vision API (model={self.model}, {len(image_bytes)} bytes)")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": self.to_data_url(image_bytes, mime_type),
                                    "detail": "high"
                                }
                            }
                        ]
                    }
                ],
                max_tokens=self.max_tokens,
                temperature=0.1
            )
        except openai.APITimeoutError as e:
            raise UpstreamError(f"OpenAI request timed out: {e}") from e
        except openai.APIError as e:
            raise UpstreamError(f"OpenAI API error: {e}") from e
        
        if not response.choices:
            raise UpstreamError("No content received from OpenAI API")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise UpstreamError("No content received from OpenAI API")
        return content
