from flask import Flask

from crudkeys.config import configure_logging


def create_app() -> Flask:
    """Application factory."""
    configure_logging()
    app = Flask(__name__)

    # Register blueprints
    from crudkeys.api.employees import bp as employees_bp
    from crudkeys.api.products import bp as products_bp

    app.register_blueprint(employees_bp, url_prefix="/api/employees")
    app.register_blueprint(products_bp, url_prefix="/api/products")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    return app
