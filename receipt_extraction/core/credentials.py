"""
Sources for the OpenAI API key and a process-wide cache around them.
"""

import json
import logging
import threading
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import UpstreamError
from ..utils.logger import get_logger


SECRET_JSON_KEYS = ("OPENAI_API_KEY", "api_key")


class StaticCredentialSource:
    """Returns a key that was supplied up front (settings, CLI flag, tests)."""

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key

    def fetch(self) -> Optional[str]:
        return self.api_key


class SecretsManagerCredentialSource:
    """
    Reads the key from AWS Secrets Manager.
    
    The secret id comes from Settings.openai_api_key_secret. A missing id is a
    configuration error: it is logged and reported as "no credential" so the
    caller degrades to mock data instead of failing every request.
    """

    def __init__(self, secret_id: Optional[str],
                 client: Any = None, logger: Optional[logging.Logger] = None):
        self.secret_id = secret_id
        self._client = client
        self.logger = get_logger(logger)

    def _secrets_client(self):
        if self._client is None:
            self._client = boto3.client("secretsmanager")
        return self._client

    def fetch(self) -> Optional[str]:
        if not self.secret_id:
            self.logger.error("OPENAI_API_KEY_SECRET not configured")
            return None
        
        try:
            response = self._secrets_client().get_secret_value(SecretId=self.secret_id)
        except (ClientError, BotoCoreError) as e:
            raise UpstreamError(f"Failed to retrieve OpenAI API key: {e}") from e
        
        return _unwrap_secret(response.get("SecretString"))


def _unwrap_secret(secret: Optional[str]) -> Optional[str]:
    """Accept either the bare key or a JSON object holding it."""
    if not secret:
        return None
    secret = secret.strip()
    if secret.startswith("{"):
        try:
            payload = json.loads(secret)
        except json.JSONDecodeError:
            return secret
        if isinstance(payload, dict):
            for key in SECRET_JSON_KEYS:
                value = payload.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
            return None
    return secret


class CachedCredential:
    """
    Resolves a credential at most once per process.
    
    Successful lookups (including "not configured") are cached for the life of
    the process. Failed lookups raise and are retried on the next call.
    """

    def __init__(self, source):
        self._source = source
        self._lock = threading.Lock()
        self._resolved = False
        self._value: Optional[str] = None

    def get(self) -> Optional[str]:
        if self._resolved:
            return self._value
        with self._lock:
            if not self._resolved:
                self._value = self._source.fetch()
                self._resolved = True
        return self._value
