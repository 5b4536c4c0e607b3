from flask import current_app, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(
    get_remote_address,
    default_limits=[lambda: current_app.config["RATE_LIMIT_DEFAULT"]],
)

# POST/PUT/DELETE on jobs share one stricter bucket per client, on top of the default
job_write_limit = limiter.shared_limit(
    lambda: current_app.config["RATE_LIMIT_JOB_WRITES"],
    scope="job-writes",
    override_defaults=False,
)

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "base-uri 'self'",
    "img-src 'self' data:",
    "font-src 'self' https: data:",
    "style-src 'self' https: 'unsafe-inline'",
    "script-src 'self'",
    "object-src 'none'",
    "frame-ancestors 'self'",
])

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
}


def set_security_headers(response):
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    # swagger ui relies on inline scripts
    if request.blueprint != "flasgger":
        response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
    if current_app.config["HSTS_ENABLED"]:
        response.headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")
    return response


def init_security(app) -> None:
    limiter.init_app(app)
    app.after_request(set_security_headers)
