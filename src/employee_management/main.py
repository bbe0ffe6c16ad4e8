from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from .api import EXTENSION_KEY, LOCAL_ORIGINS, install_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_admin, list_tables

from .auth.controller import register as register_auth
from .departments.controller import register as register_departments
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .performance.controller import register as register_performance
from .positions.controller import register as register_positions
from .recruitment.controller import register as register_recruitment

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    configure_logging(app.config["DEBUG"])

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_admin(db_config)
            logger.info("demo admin ready")

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            token_ttl_hours=int(getattr(settings, "TOKEN_TTL_HOURS", 24)),
        )

    app.extensions[EXTENSION_KEY] = container
    install_error_handlers(app)
    frontend_url = getattr(settings, "FRONTEND_URL", "").rstrip("/")
    CORS(
        app,
        origins=[o for o in (frontend_url, *LOCAL_ORIGINS) if o],
        supports_credentials=True,
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.route("/", methods=["GET"], endpoint="health")
    def health():
        return "Employee Management System API is running..."

    register_auth(app, container)
    register_employees(app, container)
    register_departments(app, container)
    register_positions(app, container)
    register_leaves(app, container)
    register_performance(app, container)
    register_payroll(app, container)
    register_recruitment(app, container)

    return app
