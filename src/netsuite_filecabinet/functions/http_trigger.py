"""HTTP trigger blueprint — health check and NetSuite connectivity probe."""

import json
import logging

import azure.functions as func

from netsuite_filecabinet import __version__
from netsuite_filecabinet.config import load_config
from netsuite_filecabinet.suitetalk.client import client_from_config

logger = logging.getLogger(__name__)

SERVICE_NAME = "netsuite-filecabinet"

bp = func.Blueprint()


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Liveness endpoint for the FileCabinet adapter host.

    Answers from the worker alone without loading credentials or contacting
    NetSuite; use /api/connection to check the account itself.
    """
    logger.info("[health_check] liveness requested; version:%s", __version__)

    try:
        body = json.dumps({"status": "ok", "service": SERVICE_NAME, "version": __version__})
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[health_check] liveness response failed", exc_info=True)
        error_body = json.dumps({"status": "error", "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")


@bp.route(route="connection", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def connection_check(req: func.HttpRequest) -> func.HttpResponse:
    """Connectivity probe endpoint — one signed, read-only SuiteQL query.

    Requires a function key. Responds 200 when NetSuite accepted the signed
    request and 503 when it did not, with the probe result as the body.
    """
    logger.info("[connection_check] connectivity probe requested")

    try:
        config = load_config()
        result = client_from_config(config).test_connection()
        logger.info("[connection_check] probe complete; success:%s", result.success)

        status_code = 200 if result.success else 503
        body = json.dumps(result.to_dict())
        return func.HttpResponse(body, status_code=status_code, mimetype="application/json")

    except Exception:
        logger.error("[connection_check] connectivity probe failed", exc_info=True)
        error_body = json.dumps({"success": False, "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")
