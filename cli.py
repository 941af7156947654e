"""
Command-line interface for receipt extraction service.

This module extracts receipt fields from a local image, either in-process or
through a deployed endpoint.
"""

import json
import mimetypes
import sys
import argparse
from pathlib import Path

from dotenv import load_dotenv

from receipt_extraction.client import API_MODE, GATEWAY_MODE, ReceiptApiClient
from receipt_extraction.core.credentials import CachedCredential, StaticCredentialSource
from receipt_extraction.core.models import TransportHint
from receipt_extraction.core.processor import ReceiptExtractor
from receipt_extraction.utils.config import Settings
from receipt_extraction.utils.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract receipt fields from an image using the OpenAI vision API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  receipt-extract receipt.jpg
  receipt-extract receipt.png --output result.json
  receipt-extract receipt.png --endpoint http://localhost:8000
  receipt-extract receipt.png --endpoint https://abc.execute-api.us-east-1.amazonaws.com/prod --mode gateway

Environment Variables:
  OPENAI_API_KEY - OpenAI API key (mock data is returned when unset)
  OPENAI_MODEL - Vision model name (default: gpt-4.1-mini)
        """
    )
    parser.add_argument("image", help="Path to the receipt image")
    parser.add_argument("--api-key", help="OpenAI API key (overrides OPENAI_API_KEY)")
    parser.add_argument("--endpoint", help="Base URL of a deployed service instead of running locally")
    parser.add_argument(
        "--mode",
        choices=[API_MODE, GATEWAY_MODE],
        default=API_MODE,
        help="Upload style for --endpoint (default: api)"
    )
    parser.add_argument("--output", help="Write the result JSON to this file")
    return parser


def main(argv=None) -> int:
    """Main CLI entry point for receipt extraction."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    logger = setup_logger("receipt-extraction")
    
    image_path = Path(args.image)
    if not image_path.is_file():
        logger.error(f"Image not found: {image_path}")
        return 1
    
    try:
        if args.endpoint:
            logger.info(f"Uploading {image_path.name} to {args.endpoint} ({args.mode} mode)")
            body = ReceiptApiClient(args.endpoint, mode=args.mode).extract_file(image_path)
            succeeded = body.get("processingStatus") == "Success"
        else:
            credential = None
            if args.api_key:
                credential = CachedCredential(StaticCredentialSource(args.api_key))
            extractor = ReceiptExtractor(
                settings=Settings.from_env(),
                credential=credential,
                logger=logger,
            )
            result = extractor.extract(
                image_path.read_bytes(),
                TransportHint.RAW_BINARY,
                filename=image_path.name,
                content_type=mimetypes.guess_type(image_path.name)[0],
            )
            body = result.to_dict()
            succeeded = result.is_success
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        return 1
    
    rendered = json.dumps(body, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(rendered + "\n", encoding="utf-8")
        logger.info(f"Result written to {args.output}")
    print(rendered)
    return 0 if succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
