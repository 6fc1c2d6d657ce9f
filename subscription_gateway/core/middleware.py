import logging
import re
import time
from fastapi import Request

logger = logging.getLogger("subscription_gateway.requests")

# Inbound traffic from providers: /gateways/{identifier}/callback|webhook
GATEWAY_TRAFFIC = re.compile(r"^/gateways/(?P<gateway>[^/]+)/(?P<kind>callback|webhook)$")

QUIET_PATHS = {"/health"}


async def request_logger(request: Request, call_next):
    """Log each request with its status and duration; sets X-Process-Time.

    Only the path is logged: callback query strings carry the subscription token.
    """
    start = time.time()
    path = request.url.path
    match = GATEWAY_TRAFFIC.match(path)
    if match:
        logger.info(f"→ {match['kind']} from gateway {match['gateway']} ({request.method})")
    else:
        logger.debug(f"→ {request.method} {path}")

    response = await call_next(request)

    elapsed = time.time() - start
    level = logging.DEBUG if path in QUIET_PATHS else logging.INFO
    logger.log(level, f"← {request.method} {path} [{response.status_code}] ({elapsed:.3f}s)")

    response.headers["X-Process-Time"] = str(elapsed)
    if match:
        response.headers["X-Gateway"] = match["gateway"]
    return response
