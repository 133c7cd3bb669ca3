"""
AWS Lambda handler for the Quote Rating & Financing API.

Serves the quoting UI behind API Gateway (REST or HTTP API events). The
rating itself happens in QuoteProcessor; this module only unwraps the
event, maps engine errors to status codes and adds CORS headers.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging
import os

from quote_engine import QuoteProcessor
from quote_engine.processor import ENDPOINTS, describe_request, describe_result

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Reused across warm invocations
processor = QuoteProcessor()

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def _response(status_code, payload):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}


def _route(event):
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("path") or event.get("rawPath", "")
    return method, path


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Routes:
    - POST /calculate_quote  rate a quote configuration
    - GET /api               endpoint and request body description
    - GET /health            liveness
    - OPTIONS *              CORS preflight
    """
    http_method, path = _route(event)
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    if path == "/calculate_quote" and http_method == "POST":
        return handle_calculate_quote(event)
    if path == "/health" and http_method == "GET":
        return _response(200, {"status": "healthy", "environment": ENVIRONMENT})
    if path == "/api" and http_method == "GET":
        return handle_api_info()
    return _response(404, {"error": "Not found", "path": path})


def handle_api_info():
    return _response(
        200,
        {
            "status": "ok",
            "message": "Quote Rating & Financing API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": ENDPOINTS,
        },
    )


def _quote_request(event):
    """Decode the request body; None when it is empty."""
    body = event.get("body", "")
    if not isinstance(body, str):
        return body
    if not body:
        return None
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def handle_calculate_quote(event):
    """Rate a quote configuration; an unknown plan yields status 'incomplete'."""
    try:
        input_data = _quote_request(event)
        if not input_data or "config" not in input_data:
            return _response(400, {"error": "No quote configuration provided", "status": "failed"})

        logger.info(f"Rating quote ({ENVIRONMENT}): {describe_request(input_data)}")
        result = processor.process_from_dict(input_data)
        logger.info(f"Rated {describe_result(result)}")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"Quote request is not valid JSON: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Invalid quote configuration: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Internal details stay in the log
        logger.error(f"Quote rating failed: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred while rating the quote", "status": "failed"})
