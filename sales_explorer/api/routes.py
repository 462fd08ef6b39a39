"""
API endpoints for Retail Sales Explorer: paged sales table, filter options, summary totals.
"""

import re
import threading
from datetime import datetime, timezone
from flask import Flask, request, jsonify
from flask_cors import CORS
from typing import Any, Dict, Optional

from sales_explorer.models.query import ResultPage, SalesQuery, empty_filter_options
from sales_explorer.utils.logging import get_logger

log = get_logger(__name__)

ENDPOINTS = [
    "GET /",
    "GET /api/health",
    "GET /api/sales",
    "GET /api/sales/filters",
    "GET /api/sales/summary",
]


def build_sales_service(mode: Optional[str] = None, data_path: Optional[str] = None) -> Any:
    """
    Create the query service for the configured DATA_MODE ("memory" or "streaming").
    Raises FileNotFoundError when no data files exist.
    """
    from config.settings import DATA_MODE
    from sales_explorer.models.data_loader import SalesDataLoader
    loader = SalesDataLoader(data_path)
    if (mode or DATA_MODE) == "streaming":
        from sales_explorer.services.streaming_service import StreamingSalesService
        return StreamingSalesService(loader)
    from sales_explorer.services.sales_service import SalesService
    return SalesService.from_loader(loader)


def _empty_sales_body(query: Optional[SalesQuery] = None) -> Dict[str, Any]:
    if query is None:
        return ResultPage.empty().to_dict()
    return ResultPage.empty(query.page, query.page_size).to_dict()


def create_app(service: Optional[Any] = None) -> Flask:
    """
    Flask app over `service` (SalesService or StreamingSalesService). Without one, the
    service is built from data/ on first request; if data is missing, sales endpoints answer 503.
    """
    from config.settings import CORS_ORIGIN_PATTERNS, CORS_ORIGINS

    app = Flask(__name__)
    CORS(
        app,
        origins=list(CORS_ORIGINS) + [re.compile(p) for p in CORS_ORIGIN_PATTERNS],
        supports_credentials=True,
    )
    state = {"service": service}
    build_lock = threading.Lock()

    def _require_service():
        # One build even when the first requests arrive together
        with build_lock:
            if state["service"] is None:
                try:
                    state["service"] = build_sales_service()
                except FileNotFoundError as e:
                    log.error("Sales data not available: %s", e)
                    return None
            return state["service"]

    @app.before_request
    def log_request():
        log.debug("%s %s - Origin: %s", request.method, request.path, request.headers.get("Origin", "none"))

    @app.after_request
    def security_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    @app.route("/", methods=["GET"])
    def index() -> tuple:
        return jsonify({
            "status": "OK",
            "message": "Retail Sales Explorer API",
            "endpoints": {
                "health": "/api/health",
                "sales": "/api/sales",
                "filters": "/api/sales/filters",
                "summary": "/api/sales/summary",
            },
        }), 200

    @app.route("/api/health", methods=["GET"])
    def health_check() -> tuple:
        return jsonify({
            "status": "healthy",
            "message": "Retail Sales Explorer API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), 200

    @app.route("/api/sales", methods=["GET"])
    def sales() -> tuple:
        """
        Paged sales rows. Query: search, customerRegion, gender, ageRange, productCategory, tags,
        paymentMethod, orderStatus, storeLocation, dateRange (comma-separated values),
        sortBy=date|quantity|customerName, sortOrder=asc|desc, page, pageSize (max 100).
        """
        query = SalesQuery.from_args(request.args)
        try:
            svc = _require_service()
            if svc is None:
                return jsonify({"error": "Data not available", **_empty_sales_body(query)}), 503
            return jsonify(svc.query(query).to_dict()), 200
        except Exception as e:
            log.exception("Error in /api/sales")
            return jsonify({
                "error": "Failed to fetch sales data",
                "message": str(e),
                **_empty_sales_body(query),
            }), 500

    @app.route("/api/sales/filters", methods=["GET"])
    def filter_options() -> tuple:
        """Distinct values for the filter menus."""
        try:
            svc = _require_service()
            if svc is None:
                return jsonify({"error": "Data not available", **empty_filter_options()}), 503
            options = svc.get_filter_options()
            return jsonify({key: options.get(key) or [] for key in empty_filter_options()}), 200
        except Exception as e:
            log.exception("Error in /api/sales/filters")
            return jsonify({
                "error": "Failed to fetch filter options",
                "message": str(e),
                **empty_filter_options(),
            }), 500

    @app.route("/api/sales/summary", methods=["GET"])
    def sales_summary() -> tuple:
        """Totals (units, sales amount, discount) over rows matching the same search/filters as /api/sales."""
        query = SalesQuery.from_args(request.args)
        empty = {"recordCount": 0, "totalUnits": 0, "totalSales": 0.0, "totalDiscount": 0.0}
        try:
            svc = _require_service()
            if svc is None:
                return jsonify({"error": "Data not available", **empty}), 503
            return jsonify(svc.summarize(query)), 200
        except Exception as e:
            log.exception("Error in /api/sales/summary")
            return jsonify({"error": "Failed to compute summary", "message": str(e), **empty}), 500

    @app.errorhandler(404)
    def not_found(_error) -> tuple:
        return jsonify({
            "status": 404,
            "error": "Not Found",
            "message": f"Route {request.method} {request.path} not found",
            "availableEndpoints": ENDPOINTS,
        }), 404

    @app.errorhandler(500)
    def internal_error(_error) -> tuple:
        return jsonify({"status": 500, "error": "Internal Server Error"}), 500

    return app
