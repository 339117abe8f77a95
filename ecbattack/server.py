"""
Vulnerable server exposing an ECB oracle over HTTP

POST /api/encrypt  {"input": "base64"}  ->  {"ciphertext": "base64"}
GET  /status
"""

import base64
import binascii
import logging

from flask import Flask, jsonify, request

logger = logging.getLogger(__name__)


def create_app(oracle) -> Flask:
    """Build a Flask app answering encryption queries with `oracle`."""
    app = Flask(__name__)

    @app.route('/api/encrypt', methods=['POST'])
    def encrypt_message():
        """
        Encrypt attacker input (the secret is appended server side)
        Request: {"input": "base64"}
        Response: {"ciphertext": "base64"}
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or 'input' not in data:
            return jsonify({"error": "Missing 'input' field"}), 400

        try:
            attacker_input = base64.b64decode(data['input'], validate=True)
        except (binascii.Error, TypeError, ValueError):
            return jsonify({"error": "'input' must be base64"}), 400

        ciphertext = oracle(attacker_input)
        logger.debug("encrypted %d input bytes", len(attacker_input))
        return jsonify({"ciphertext": base64.b64encode(ciphertext).decode()})

    @app.route('/status', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            "status": "running",
            "service": "ECB Oracle",
            "block_size": getattr(oracle, "block_size", None),
        })

    return app
