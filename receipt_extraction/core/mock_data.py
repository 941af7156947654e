"""
Placeholder receipt returned when no vision credential is configured.
"""

from datetime import datetime
from typing import Dict, Optional


PLACEHOLDER_API_KEY = "your-openai-api-key-here"
MOCK_NOTE = "Mock data - configure OpenAI API key for real extraction"


def is_credential_configured(api_key: Optional[str]) -> bool:
    """False for a missing, blank or placeholder key."""
    if api_key is None:
        return False
    api_key = api_key.strip()
    return bool(api_key) and api_key != PLACEHOLDER_API_KEY


def build_mock_receipt(now: Optional[datetime] = None) -> Dict[str, str]:
    """Return the demo receipt, dated at the moment of the call."""
    now = now or datetime.now()
    return {
        "business_name": "Demo Coffee Shop",
        "date": now.strftime("%Y-%m-%d"),
        "time": now.strftime("%H:%M"),
        "total": "15.47",
        "item_1": "Large Coffee - $4.50",
        "item_2": "Blueberry Muffin - $3.25",
        "item_3": "Sandwich - $7.72",
        "subtotal": "15.47",
        "tax": "0.00",
        "payment_method": "Credit Card",
        "receipt_number": "12345",
        "note": MOCK_NOTE,
    }
