from flask import Flask, request, jsonify
from flask_cors import CORS
from quote_engine import QuoteProcessor
from quote_engine.processor import ENDPOINTS, describe_request, describe_result
import os
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for the quoting UI
CORS(app)

processor = QuoteProcessor()


@app.route("/api", methods=["GET"])
def api_info():
    """Describe the quote endpoints and the request body /calculate_quote expects"""
    return jsonify({
        "status": "ok",
        "message": "Quote Rating & Financing API",
        "version": "1.0",
        "endpoints": ENDPOINTS,
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/calculate_quote", methods=["POST"])
def calculate_quote():
    """
    Rate one quote: plan price after discounts and promotions, device
    financing against the shared EC limit, add-ons, fees and taxes.

    Body: {"config": {...}, "catalogs": {...}?}. An unknown plan is not an
    error; the response is {"status": "incomplete"}.
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data or "config" not in input_data:
            return jsonify({
                "error": "No quote configuration provided",
                "status": "failed"
            }), 400

        logger.info(f"Rating quote: {describe_request(input_data)}")

        result = processor.process_from_dict(input_data)

        logger.info(f"Rated {describe_result(result)}")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Rejected quote configuration (bad enum, negative price, zero lines)
        logger.error(f"Invalid quote configuration: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        logger.error(f"Quote rating failed: {str(e)}", exc_info=True)
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
