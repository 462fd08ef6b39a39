"""
Retail Sales Explorer - Entry point.
Run with data in data/:  python -m sales_explorer.main
"""

import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from dotenv import load_dotenv

# .env must be loaded before config.settings reads the environment
load_dotenv(os.path.join(ROOT, ".env"))


def main() -> int:
    from config import settings
    from sales_explorer.api.routes import build_sales_service, create_app
    from sales_explorer.utils.logging import configure_logging, get_logger

    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    log = get_logger("sales_explorer")

    log.info("Starting Retail Sales Explorer (data mode: %s)", settings.DATA_MODE)
    try:
        service = build_sales_service()
    except FileNotFoundError as e:
        log.error("Server initialization failed: %s", e)
        return 1

    app = create_app(service)
    port = int(os.environ.get("PORT", 5000))
    log.info("API at http://127.0.0.1:%d/api/sales", port)
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "false").lower() == "true")
    return 0


if __name__ == "__main__":
    sys.exit(main())
