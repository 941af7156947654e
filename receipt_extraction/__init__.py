"""
Receipt Extraction Service

A service for extracting structured fields from receipt and invoice images
using the OpenAI vision API. Runs as an HTTP service or as an AWS Lambda
function behind API Gateway.
"""

__version__ = "0.1.0"
