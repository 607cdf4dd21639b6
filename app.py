# app.py
import base64
import binascii
import json
import os

from flask import Flask, jsonify, render_template, request

import compressor
from config import Config, configure_logging
from container import SYMBOL_MODES
from errors import HuffvaultError

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class BadRequest(Exception):
    pass


def _read_upload():
    """
    Return (file_bytes, fields) from either a JSON body with a base64 ``file``
    or a multipart form with a ``file`` part.
    """
    if request.files.get("file") is not None:
        return request.files["file"].read(), request.form
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "file" not in data:
        raise BadRequest("missing 'file'")
    try:
        return base64.b64decode(data["file"], validate=True), data
    except (binascii.Error, TypeError, ValueError):
        raise BadRequest("'file' is not valid base64") from None


def _password(fields):
    password = fields.get('password')
    if password is None:
        return ''
    if not isinstance(password, str):
        raise BadRequest("'password' must be a string")
    return password


def _is_bare_table(data):
    return isinstance(data, dict) and 'encodedData' in data and 'codes' in data


def create_app(overrides=None):
    app = Flask(
        __name__,
        static_url_path='/static',
        template_folder=os.path.join(BASE_DIR, "templates"),
        static_folder=os.path.join(BASE_DIR, "static"),
    )
    app.config.from_object(Config)
    app.config.from_prefixed_env("HUFFVAULT")
    if overrides:
        app.config.update(overrides)
    configure_logging(app.config["LOG_LEVEL"])

    @app.errorhandler(HuffvaultError)
    def handle_huffvault_error(e):
        app.logger.warning("%s: %s", type(e).__name__, e.detail or e.user_message)
        return jsonify({'error': e.user_message}), e.status

    @app.errorhandler(BadRequest)
    def handle_bad_request(e):
        return jsonify({'error': str(e)}), 400

    # Root -> render UI
    @app.route('/')
    def index():
        return render_template('index.html', modes=SYMBOL_MODES)

    @app.route('/api/compress', methods=['POST'])
    def compress():
        file_bytes, fields = _read_upload()
        password = _password(fields)
        symbols = fields.get('symbols') or app.config["DEFAULT_SYMBOLS"]
        if symbols not in SYMBOL_MODES:
            raise BadRequest(f"'symbols' must be one of {', '.join(SYMBOL_MODES)}")

        result = compressor.compress(file_bytes, password, symbols)
        payload = result.as_dict()
        payload['container'] = base64.b64encode(result.container).decode()
        payload['log'] = (
            f"Compressed {result.original_size} bytes to {result.compressed_size} bytes"
            f" ({len(result.code_table)} codes{', encrypted' if result.encrypted else ''})."
        )
        return jsonify(payload)

    def decode_bare_table(data):
        if not isinstance(data['codes'], dict) or not isinstance(data['encodedData'], str):
            raise BadRequest("'codes' must be an object and 'encodedData' a string")
        symbols = data.get('symbols') or "text"
        if symbols not in SYMBOL_MODES:
            raise BadRequest(f"'symbols' must be one of {', '.join(SYMBOL_MODES)}")
        original = compressor.decode_table(
            data['encodedData'], data['codes'], symbols, app.config["STRICT_DECODE"]
        )
        return jsonify({
            'decodedData': original.decode('utf-8', errors='replace'),
            'original_file': base64.b64encode(original).decode(),
            'log': f"Decoded {len(original)} bytes.",
        })

    @app.route('/api/decompress', methods=['POST'])
    def decompress():
        # Bare table form: {"encodedData": "...", "codes": {"97": "0", ...}}
        data = request.get_json(silent=True)
        if _is_bare_table(data):
            return decode_bare_table(data)

        file_bytes, fields = _read_upload()
        password = _password(fields)
        # The same JSON may also arrive as an uploaded file
        if request.files.get("file") is not None:
            try:
                uploaded = json.loads(file_bytes)
            except ValueError:
                uploaded = None
            if _is_bare_table(uploaded):
                return decode_bare_table(uploaded)

        original = compressor.decompress(file_bytes, password, app.config["STRICT_DECODE"])
        return jsonify({
            'original_file': base64.b64encode(original).decode(),
            'log': f"Decompressed {len(original)} bytes.",
        })

    # Clear log endpoint
    @app.route('/clear_log', methods=['POST'])
    def clear_log():
        return jsonify({"log": ""})

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host=application.config["HOST"], port=application.config["PORT"])
