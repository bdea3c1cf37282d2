from datetime import datetime
from os import getenv
import hmac
import logging
import re
from flask import Flask, Response, request
from dotenv import load_dotenv
from stackcode.imaging import (
    CODE_A_MARKER, BarcodeError, EncodingError,
    basic_marker, numeric_aware_marker, render_pair_png,
)

__version__ = "0.1.0"

load_dotenv()

class Config:
    """Application configuration."""
    SELF_ID = getenv("SELF_ID", "SELF")
    OWNER_TOKEN = getenv("OWNER_TOKEN")  # Optional, leaves /barcode open when unset
    MARKER_MODE = getenv("MARKER_MODE", "numeric")
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# At least five word characters in a row
TEXT_RE = re.compile(r"[\w\d]{5,}")

MARKER_FUNCTIONS = {
    "basic": basic_marker,
    "numeric": numeric_aware_marker,
}

def self_barcode_id():
    """Marked self identifier, encoded as given without case folding."""
    return CODE_A_MARKER + Config.SELF_ID

def check_config():
    """Validate configuration values, raising ValueError on bad ones."""
    if Config.MARKER_MODE not in MARKER_FUNCTIONS:
        raise ValueError(f"Unknown MARKER_MODE {Config.MARKER_MODE!r}, expected one of {sorted(MARKER_FUNCTIONS)}")

check_config()

def _marker_function():
    return MARKER_FUNCTIONS[Config.MARKER_MODE]

app = Flask(__name__)

@app.before_request
def log_post_json_requests():
    if request.method == "POST" and request.is_json:
        json_data = request.get_json()
        endpoint = request.endpoint or request.path
        logging.info(f"POST JSON Request to {endpoint} - Data: {json_data}")

@app.route("/")
def home_route():
    return f"Self id: {Config.SELF_ID}\nVersion: {__version__}"

def get_text():
    """Extract the payload text from the request."""
    if request.method == "POST" and request.is_json:
        source = request.get_json(silent=True)
        if not isinstance(source, dict):
            source = {}
        logging.debug(f"POST JSON request - Data: {source}")
    elif request.method == "POST":
        source = request.form
        logging.debug(f"POST form request - Data: {dict(source)}")
    else:
        source = request.args
        logging.debug(f"GET request - Query params: {dict(source)}")

    text = source.get('text', '')
    return text if isinstance(text, str) else str(text)

def _authorized():
    if not Config.OWNER_TOKEN:
        return True
    token = request.headers.get("X-Owner-Token", "")
    return hmac.compare_digest(token.encode(), Config.OWNER_TOKEN.encode())

def current_time():
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

@app.route("/barcode", methods=["GET", "POST"])
def barcode_route():
    """Generate and return the barcode pair image."""
    logging.debug(f"Barcode endpoint: {request.method} {request.url}")
    if not _authorized():
        logging.warning(f"Rejected barcode request from {request.remote_addr}")
        return Response("Forbidden", 403)

    text = get_text()
    if not TEXT_RE.search(text):
        logging.warning(f"Ignore wrong input {text!r}")
        return Response("Ignored: expected at least 5 word characters", 400)

    payload = _marker_function()(text)
    try:
        image = render_pair_png(self_barcode_id(), payload)
    except EncodingError as e:
        logging.info(f"Encode error for {text!r}: {e}")
        return Response(f"Encode error: {e}", 400)
    except BarcodeError as e:
        logging.exception(f"Barcode generation failed for {text!r}")
        return Response(f"Barcode error: {e}", 500)

    logging.debug("Barcode image generated successfully")
    return Response(image, 200, mimetype="image/png", headers={"X-Generated-At": current_time()})
