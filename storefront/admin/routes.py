"""Routes for the back-office.

Every view here sits behind the guard and then requires an administrator.
"""
from __future__ import annotations

from flask import redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from ..auth.guard import guarded, require_admin
from ..catalog.services import (
    CatalogError,
    create_product,
    delete_product,
    effective_price,
    format_currency,
    get_product,
    list_categories,
    list_products,
    update_product,
)
from ..extensions import db
from ..logging_service import log_manager
from ..newsletter.services import NewsletterError, list_subscribers, subscribe
from . import bp
from .services import dashboard_metrics, list_all_orders, list_users, recent_orders


def _serialize_product(product) -> dict[str, object]:
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "price": format_currency(product.price),
        "effective_price": format_currency(effective_price(product)),
        "flags": [
            label
            for label, enabled in (
                ("new", product.is_new),
                ("popular", product.is_popular),
                ("sale", product.is_sale),
            )
            if enabled
        ],
    }


def _serialize_order(order) -> dict[str, object]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "customer": order.full_name,
        "total": format_currency(order.total_amount),
        "status": order.status,
        "shipping_method": order.shipping_method,
        "placed": order.created_at.strftime("%b %d, %Y"),
        "line_count": len(order.items),
    }


def _product_fields(form) -> dict[str, object]:
    return {
        "name": form.get("name", ""),
        "price": form.get("price", ""),
        "category": form.get("category", ""),
        "description": form.get("description", ""),
        "image_url": form.get("image_url", ""),
        "subcategory": form.get("subcategory"),
        "is_new": "is_new" in form,
        "is_popular": "is_popular" in form,
        "is_sale": "is_sale" in form,
        "discount_percentage": form.get("discount_percentage", "0"),
    }


def _log_save_failure(action: str, exc: SQLAlchemyError) -> None:
    log_manager.record(
        component="Admin",
        action=action,
        level="error",
        result="error",
        title="Product could not be saved",
        user_summary="The product could not be saved.",
        technical_details=f"admin.{action} raised {exc.__class__.__name__}: {exc}",
    )


@bp.route("")
@bp.route("/dashboard")
@guarded
def dashboard():
    """Render the back-office overview."""

    require_admin()
    log_manager.record(
        component="Admin",
        action="view-dashboard",
        title="Admin dashboard opened",
        user_summary="Back-office overview displayed.",
        technical_details="admin.dashboard rendered catalog and order metrics.",
    )
    return render_template(
        "admin/dashboard.html",
        title="Admin — Dashboard",
        metrics=dashboard_metrics(),
        orders=[_serialize_order(order) for order in recent_orders()],
        active_nav="admin",
    )


def _render_products(feedback: dict[str, str] | None = None, status: int = 200):
    return (
        render_template(
            "admin/products.html",
            title="Admin — Products",
            products=[_serialize_product(product) for product in list_products()],
            categories=list_categories(),
            feedback=feedback,
            form=request.form,
            active_nav="admin",
        ),
        status,
    )


@bp.route("/products", methods=["GET", "POST"])
@guarded
def products():
    """List products and create new ones."""

    require_admin()
    if request.method == "GET":
        log_manager.record(
            component="Admin",
            action="view-products",
            title="Product management opened",
            user_summary="Product catalog listed for management.",
            technical_details="admin.products rendered the product table.",
        )
        return _render_products()

    try:
        product = create_product(**_product_fields(request.form))
    except CatalogError as exc:
        db.session.rollback()
        return _render_products({"type": "error", "message": str(exc)}, 400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        _log_save_failure("create-product", exc)
        return _render_products(
            {"type": "error", "message": "We were unable to save the product. Try again."}, 500
        )

    log_manager.record(
        component="Admin",
        action="create-product",
        title="Product created",
        user_summary=f"{product.name} added to the catalog.",
        technical_details=f"catalog.create_product persisted product_id={product.id}",
    )
    return redirect(url_for("admin.products"))


def _render_edit(product, form, feedback: dict[str, str] | None = None, status: int = 200):
    return (
        render_template(
            "admin/product_edit.html",
            title=f"Admin — Edit {product.name}",
            product=product,
            form=form,
            categories=list_categories(),
            feedback=feedback,
            active_nav="admin",
        ),
        status,
    )


@bp.route("/products/<int:product_id>/edit", methods=["GET", "POST"])
@guarded
def edit(product_id: int):
    """Show and save the edit form for one product."""

    require_admin()
    product = get_product(product_id)
    if product is None:
        return _render_products({"type": "error", "message": f"Product {product_id} not found."}, 404)

    if request.method == "GET":
        form = {
            "name": product.name,
            "price": str(product.price),
            "category": product.category,
            "subcategory": product.subcategory or "",
            "image_url": product.image_url,
            "description": product.description,
            "discount_percentage": str(product.discount_percentage),
            "is_new": product.is_new,
            "is_popular": product.is_popular,
            "is_sale": product.is_sale,
        }
        return _render_edit(product, form)

    try:
        product = update_product(product_id, **_product_fields(request.form))
    except CatalogError as exc:
        db.session.rollback()
        return _render_edit(product, request.form, {"type": "error", "message": str(exc)}, 400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        _log_save_failure("update-product", exc)
        return _render_edit(
            product,
            request.form,
            {"type": "error", "message": "We were unable to save the product. Try again."},
            500,
        )

    log_manager.record(
        component="Admin",
        action="update-product",
        title="Product updated",
        user_summary=f"{product.name} was updated.",
        technical_details=f"catalog.update_product saved product_id={product_id}",
    )
    return redirect(url_for("admin.products"))


@bp.route("/products/<int:product_id>/delete", methods=["POST"])
@guarded
def delete(product_id: int):
    """Remove a product from the catalog."""

    require_admin()
    try:
        product = delete_product(product_id)
    except CatalogError as exc:
        db.session.rollback()
        return _render_products({"type": "error", "message": str(exc)}, 404)

    log_manager.record(
        component="Admin",
        action="delete-product",
        title="Product deleted",
        user_summary=f"{product.name} removed from the catalog.",
        technical_details=f"catalog.delete_product removed product_id={product_id}",
    )
    return redirect(url_for("admin.products"))


@bp.route("/orders")
@guarded
def orders():
    """List every order in the store."""

    require_admin()
    return render_template(
        "admin/orders.html",
        title="Admin — Orders",
        orders=[_serialize_order(order) for order in list_all_orders()],
        active_nav="admin",
    )


@bp.route("/users")
@guarded
def users():
    """List registered accounts."""

    require_admin()
    accounts = [
        {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "full_name": user.full_name or "",
            "is_admin": user.is_admin,
            "joined": user.created_at.strftime("%b %d, %Y"),
        }
        for user in list_users()
    ]
    return render_template(
        "admin/users.html", title="Admin — Users", accounts=accounts, active_nav="admin"
    )


def _render_subscribers(feedback: dict[str, str] | None = None, status: int = 200):
    return (
        render_template(
            "admin/subscribers.html",
            title="Admin — Subscribers",
            subscribers=[subscriber.serialize() for subscriber in list_subscribers()],
            feedback=feedback,
            active_nav="admin",
        ),
        status,
    )


@bp.route("/subscribers", methods=["GET", "POST"])
@guarded
def subscribers():
    """List newsletter subscribers and add one by hand."""

    require_admin()
    if request.method == "GET":
        return _render_subscribers()

    try:
        subscriber, created = subscribe(request.form.get("email", ""))
    except NewsletterError as exc:
        return _render_subscribers({"type": "error", "message": str(exc)}, 400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        log_manager.record(
            component="Admin",
            action="add-subscriber",
            level="error",
            result="error",
            title="Subscriber could not be added",
            user_summary="The subscriber could not be saved.",
            technical_details=f"newsletter.subscribe raised {exc.__class__.__name__}: {exc}",
        )
        return _render_subscribers(
            {"type": "error", "message": "We were unable to add the subscriber. Try again."}, 500
        )

    if not created:
        return _render_subscribers(
            {"type": "error", "message": f"{subscriber.email} is already subscribed."}, 400
        )
    log_manager.record(
        component="Admin",
        action="add-subscriber",
        title="Subscriber added",
        user_summary=f"{subscriber.email} was added to the newsletter.",
        technical_details=f"newsletter.subscribe persisted subscriber_id={subscriber.id}",
    )
    return redirect(url_for("admin.subscribers"))
