"""
Request pipeline shared by every route.

Order of installation is the order requests see it: security headers,
CORS, the ``/api`` rate limiter, then JSON and URL-encoded body parsing.
"""

import logging

from flask import Flask, abort, g, make_response, request
from flask_cors import CORS
from flask_limiter import RateLimitExceeded
from werkzeug.exceptions import BadRequest

from mine_safety import limiter
from mine_safety.core.forms import parse_nested_form

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


def set_security_headers(response):
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@limiter.request_filter
def _exempt_from_rate_limit() -> bool:
    """Only ``/api`` traffic is counted; CORS preflights never are."""
    return request.method == "OPTIONS" or not request.path.startswith("/api")


def rate_limit_exceeded(exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded for %s on %s", request.remote_addr, request.path)
    response = make_response(RATE_LIMIT_MESSAGE, 429)
    response.mimetype = "text/plain"
    return response


def parse_request_body():
    """Parse JSON eagerly so malformed bodies never reach a handler."""
    g.form = {}

    if request.is_json and request.get_data(cache=True):
        try:
            request.get_json()
        except BadRequest:
            logger.debug("Rejected malformed JSON body on %s", request.path)
            abort(400, description="Malformed JSON body")
    elif request.mimetype == "application/x-www-form-urlencoded":
        g.form = parse_nested_form(request.form)


def install_middleware(app: Flask) -> None:
    app.after_request(set_security_headers)

    CORS(app, origins=[app.config["CLIENT_URL"]], supports_credentials=True)

    limiter.init_app(app)
    app.register_error_handler(RateLimitExceeded, rate_limit_exceeded)

    app.before_request(parse_request_body)
