"""Application factory for the storefront."""
from __future__ import annotations

from flask import Flask, render_template, request, url_for

from .auth.session import session_manager
from .config import Config
from .extensions import db
from .logging_service import log_manager

COMPONENTS = (
    "Storefront",
    "Catalog",
    "Auth",
    "Session",
    "Guard",
    "Cart",
    "Checkout",
    "Profile",
    "Wishlist",
    "Newsletter",
    "Admin",
    "Content",
    "Logging",
)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_object(config_class)

    db.init_app(app)
    log_manager.init_app(app)
    session_manager.init_app(app)

    from .admin import bp as admin_bp
    from .auth import bp as auth_bp
    from .cart import bp as cart_bp
    from .checkout import bp as checkout_bp
    from .index import bp as index_bp
    from .logging import bp as logging_bp
    from .newsletter import bp as newsletter_bp
    from .pages import bp as pages_bp
    from .profile import bp as profile_bp
    from .shop import bp as shop_bp
    from .wishlist import bp as wishlist_bp

    app.register_blueprint(index_bp)
    app.register_blueprint(shop_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(pages_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(checkout_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(wishlist_bp)
    app.register_blueprint(newsletter_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(logging_bp, url_prefix="/logs")

    with app.app_context():
        db.create_all()
        if app.config.get("SEED_CATALOG"):
            from .catalog.services import ensure_catalog_defaults

            ensure_catalog_defaults()

    for component in COMPONENTS:
        log_manager.register_component(component)

    @app.context_processor
    def inject_globals() -> dict[str, object]:
        """Inject shared template variables."""
        from .admin.quick_nav import build_quick_nav
        from .cart.services import summarize_cart

        store = session_manager.current()
        user = store.user
        return {
            "environment": app.config.get("ENVIRONMENT", "development"),
            "session_state": store.state,
            "current_user": user,
            "cart": summarize_cart(user.id) if user else None,
            "admin_quick_nav": build_quick_nav(store.state, app.config, url_for),
        }

    @app.errorhandler(404)
    def not_found(error):
        log_manager.record(
            component="Storefront",
            action="not-found",
            level="warn",
            result="not-found",
            title="Page not found",
            user_summary="A visitor requested a page that does not exist.",
            technical_details=f"{request.method} {request.path} matched no route.",
        )
        return render_template("errors/not_found.html", title="Page not found"), 404

    return app
