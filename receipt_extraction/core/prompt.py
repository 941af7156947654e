"""
The fixed instruction sent to the vision model with every receipt image.
"""

EXTRACTION_PROMPT = """You are an expert at analyzing receipts and invoices. Carefully examine this image and extract ALL visible text and data.

Extract the following information if available:
- Business information: name, address, phone number, website
- Transaction details: date, time, receipt/invoice number, order number
- All line items: product names, quantities, individual prices
- Financial details: subtotal, tax amounts, discounts, tips, final total
- Payment information: payment method, card type, last four digits
- Any other visible text, numbers, or codes (barcodes, reference numbers)

Guidelines:
1. For unclear or partially visible text, choose the most probable reading
2. Use descriptive keys (e.g., "item_1_name", "item_1_quantity", "item_1_price")
3. Number repeated items sequentially
4. Keep every value as a string, including amounts and quantities; keep currency symbols if present
5. Write dates in YYYY-MM-DD format

Respond ONLY with one flat JSON object with string keys and string values, no nesting. Example:
{
  "business_name": "Coffee Corner",
  "business_address": "123 Main Street, City, State 12345",
  "transaction_date": "2024-12-28",
  "transaction_time": "14:35",
  "receipt_number": "R12345",
  "item_1_name": "Large Cappuccino",
  "item_1_quantity": "1",
  "item_1_price": "$4.50",
  "subtotal": "$4.50",
  "tax": "$0.36",
  "total": "$4.86",
  "payment_method": "Credit Card"
}"""


def build_extraction_prompt() -> str:
    """Return the extraction instruction. Identical on every call."""
    return EXTRACTION_PROMPT
