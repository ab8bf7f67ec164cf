from flask import Blueprint

from mine_safety.auth.routes import auth_bp

from .alerts import alerts_bp
from .health import health_bp
from .resources import behavior_bp, checklist_bp, hazards_bp, incidents_bp
from .videos import videos_bp

api_bp = Blueprint("api", __name__)

# Route groups, each under /api/<prefix>
ROUTE_GROUPS = (
    ("/auth", auth_bp),
    ("/checklist", checklist_bp),
    ("/videos", videos_bp),
    ("/hazards", hazards_bp),
    ("/incidents", incidents_bp),
    ("/alerts", alerts_bp),
    ("/behavior", behavior_bp),
    ("/health", health_bp),
)

for prefix, blueprint in ROUTE_GROUPS:
    api_bp.register_blueprint(blueprint, url_prefix=prefix)
