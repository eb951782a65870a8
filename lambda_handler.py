"""
AWS Lambda handler for the Facility Billing Engine API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import json
import logging
import os
import re
from datetime import date

from billing_engine import BillingProcessor, ClientNotFoundError, InMemoryConfigurationStore
from billing_engine.processor import preview_from_dict

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# JSON file seeding the configuration store (optional)
BILLING_DATA_FILE = os.environ.get("BILLING_DATA_FILE")

# Initialize processor (reused across warm invocations)
processor = BillingProcessor(
    InMemoryConfigurationStore.from_json_file(BILLING_DATA_FILE)
    if BILLING_DATA_FILE
    else InMemoryConfigurationStore()
)

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization,X-Company-Id",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}

PREVIEW_PATH = re.compile(r"^/clients/(?P<client_id>[^/]+)/billing-preview(?P<delta>/delta)?$")


def _response(status_code, body):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(body)}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - GET /clients/{client_id}/billing-preview
    - GET /clients/{client_id}/billing-preview/delta
    - POST /billing_preview
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    preview_match = PREVIEW_PATH.match(path)
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    elif preview_match and http_method == "GET":
        return handle_billing_preview(event, preview_match.group("client_id"), bool(preview_match.group("delta")))
    elif path == "/billing_preview" and http_method == "POST":
        return handle_inline_preview(event)
    else:
        return _response(404, {"error": "Not found", "path": path})


def handle_health():
    """Health check endpoint."""
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Facility Billing Engine API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {
                "billing_preview": "/clients/{client_id}/billing-preview [GET]",
                "billing_delta": "/clients/{client_id}/billing-preview/delta [GET]",
                "inline_preview": "/billing_preview [POST]",
                "health": "/health [GET]",
            },
        },
    )


def handle_billing_preview(event, client_id, delta):
    """Stored-configuration preview or delta report for one client."""
    params = event.get("queryStringParameters") or {}
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    company_id = headers.get("x-company-id") or params.get("company_id", "")
    today = date.today()

    try:
        year = int(params.get("year", today.year))
        month = int(params.get("month", today.month))

        logger.info(f"Generating {'delta report' if delta else 'billing preview'}: client={client_id} period={year}-{month:02d}")

        if delta:
            result = processor.delta_report_to_dict(client_id, company_id, year, month)
        else:
            result = processor.preview_to_dict(client_id, company_id, year, month)

        return _response(200, result)

    except ClientNotFoundError as e:
        logger.error(f"Client not found: {e.client_id}")
        return _response(404, {"error": "Client not found", "status": "not_found"})

    except ValueError as e:
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during processing", "status": "failed"})


def handle_inline_preview(event):
    """Billing preview from a client snapshot in the request body."""
    try:
        # Parse request body
        body = event.get("body", "")
        if isinstance(body, str):
            if not body:
                return _response(400, {"error": "No input data provided", "status": "failed"})
            # Handle base64 encoded body (API Gateway)
            if event.get("isBase64Encoded"):
                import base64

                body = base64.b64decode(body).decode("utf-8")
            input_data = json.loads(body)
        else:
            input_data = body

        client_name = input_data.get("client", {}).get("name", "Unknown")
        logger.info(f"Processing inline billing preview: {client_name}")

        result = preview_from_dict(input_data)

        logger.info(f"Inline billing preview generated: {client_name}")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except ClientNotFoundError as e:
        logger.error(f"Client not found: {e.client_id}")
        return _response(404, {"error": "Client not found", "status": "not_found"})

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors (missing fields, invalid enum values, etc.)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during processing", "status": "failed"})
