from datetime import date

from flask import Flask, request, jsonify
from flask_cors import CORS
from billing_engine import BillingProcessor, ClientNotFoundError, InMemoryConfigurationStore
from billing_engine.processor import preview_from_dict
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# JSON file seeding the configuration store (optional)
BILLING_DATA_FILE = os.environ.get("BILLING_DATA_FILE")

app = Flask(__name__)

# Enable CORS for all routes
CORS(app)


def _load_store() -> InMemoryConfigurationStore:
    if BILLING_DATA_FILE:
        logger.info(f"Loading billing configuration from {BILLING_DATA_FILE}")
        return InMemoryConfigurationStore.from_json_file(BILLING_DATA_FILE)
    return InMemoryConfigurationStore()


# Initialize the billing processor
processor = BillingProcessor(_load_store())


def _period_from_args():
    """Read year/month query parameters, defaulting to the current month."""
    today = date.today()
    try:
        year = int(request.args.get("year", today.year))
        month = int(request.args.get("month", today.month))
    except ValueError:
        raise ValueError("year and month must be integers")
    return year, month


def _company_id():
    return request.headers.get("X-Company-Id") or request.args.get("company_id", "")


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Facility Billing Engine API",
        "version": "1.0",
        "endpoints": {
            "billing_preview": "/clients/<client_id>/billing-preview [GET]",
            "billing_delta": "/clients/<client_id>/billing-preview/delta [GET]",
            "inline_preview": "/billing_preview [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/clients/<client_id>/billing-preview", methods=["GET"])
def billing_preview(client_id):
    """
    Billing preview for one client and month (?year=2026&month=3)
    """
    try:
        year, month = _period_from_args()
        logger.info(f"Generating billing preview: client={client_id} period={year}-{month:02d}")

        result = processor.preview_to_dict(client_id, _company_id(), year, month)

        logger.info(f"Billing preview generated: client={client_id} total={result['total']}")
        return jsonify(result), 200

    except ClientNotFoundError as e:
        logger.error(f"Client not found: {e.client_id}")
        return jsonify({"error": "Client not found", "status": "not_found"}), 404

    except ValueError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": str(e), "status": "validation_failed"}), 400

    except Exception as e:
        logger.error(f"Billing preview error: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to generate billing preview", "status": "failed"}), 500


@app.route("/clients/<client_id>/billing-preview/delta", methods=["GET"])
def billing_delta(client_id):
    """
    Compare the requested month with the previous month, per facility
    """
    try:
        year, month = _period_from_args()
        logger.info(f"Generating delta report: client={client_id} period={year}-{month:02d}")

        result = processor.delta_report_to_dict(client_id, _company_id(), year, month)
        return jsonify(result), 200

    except ClientNotFoundError as e:
        logger.error(f"Client not found: {e.client_id}")
        return jsonify({"error": "Client not found", "status": "not_found"}), 404

    except ValueError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": str(e), "status": "validation_failed"}), 400

    except Exception as e:
        logger.error(f"Delta report error: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to generate delta report", "status": "failed"}), 500


@app.route("/billing_preview", methods=["POST"])
def inline_billing_preview():
    """
    Billing preview from a client snapshot posted in the request body
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        client_name = input_data.get("client", {}).get("name", "Unknown")
        logger.info(f"Processing inline billing preview: {client_name}")

        result = preview_from_dict(input_data)

        logger.info(f"Inline billing preview generated: {client_name}")
        return jsonify(result), 200

    except ClientNotFoundError as e:
        logger.error(f"Client not found: {e.client_id}")
        return jsonify({"error": "Client not found", "status": "not_found"}), 404

    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": f"Validation error: {str(e)}",
            "status": "validation_failed"
        }), 400

    except Exception as e:
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
