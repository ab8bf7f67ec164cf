from flask import Flask


def register_blueprints(app: Flask) -> None:
    from mine_safety.api import api_bp
    from mine_safety.web.views import views_bp

    app.register_blueprint(views_bp)
    app.register_blueprint(api_bp, url_prefix="/api")
