"""
Recovers a JSON object from free-form vision model replies.
"""

import json
import logging
from typing import Any, Dict, Optional

from ..utils.logger import get_logger


RAW_RESPONSE_KEY = "raw_response"


def parse_extraction_response(text: str, logger: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    Decode the JSON object embedded in a model reply.
    
    The span from the first "{" to the last "}" is decoded as a JSON object,
    which tolerates prose or markdown fences around it. Key order is kept.
    
    Args:
        text: Raw model reply
        logger: Logger instance for logging output
        
    Returns:
        The decoded mapping, or {"raw_response": text} when no object can be decoded
    """
    log = get_logger(logger)
    text = text or ""
    start = text.find("{")
    end = text.rfind("}")
    
    if start != -1 and end > start:
        try:
            parsed = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            log.warning(f"Failed to parse model response as JSON: {e}")
            log.debug(f"Unparsed model response: {text}")
        else:
            if isinstance(parsed, dict):
                return parsed
            log.warning("Model response JSON is not an object")
    else:
        log.warning("No JSON object found in model response")
    
    return {RAW_RESPONSE_KEY: text}
