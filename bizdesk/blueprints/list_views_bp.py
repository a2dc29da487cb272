"""
bizdesk — Business Dashboard BFF
Entity list views & mutations Blueprint.

Provides, for users / projects / services / notifications / shop products:
    - List view: search, categorical filters, sort, pagination, summary tiles
    - Summary tiles over the unfiltered list
    - Record detail and edit-form pre-population
    - Create / update / delete through the mutation protocol
    - Project requirement document upload
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from bizdesk.blueprints import (
    ENTITY_NAMES,
    acting_role,
    collaborators,
    json_body,
    uploaded_file,
)
from bizdesk.services import list_views
from bizdesk.services.entities import get_entity
from bizdesk.services.mutation import MutationService
from bizdesk.services.normalizer import render_record
from bizdesk.services.payloads import editable_fields
from bizdesk.services.uploads import upload_requirement
from bizdesk.utils.errors import E, api_error

logger = logging.getLogger(__name__)

list_views_bp = Blueprint("list_views_bp", __name__, url_prefix="/api/v1")

_ENTITY = f"<any({ENTITY_NAMES}):entity>"


def _service(entity):
    spec = get_entity(entity)
    return MutationService(
        spec,
        collaborators()[entity],
        redirect_delay=current_app.config["REDIRECT_DELAY_SECONDS"],
    )


# ═══════════════════════════════════════════════════════════════════════════
#  LIST VIEWS
# ═══════════════════════════════════════════════════════════════════════════

@list_views_bp.route(f"/{_ENTITY}", methods=["GET"])
def list_entity(entity):
    """Filtered, sorted, paginated list plus summary tiles."""
    spec = get_entity(entity)
    payload, state = list_views.list_view(
        spec,
        collaborators()[entity],
        request.args,
        default_per_page=current_app.config["DEFAULT_PAGE_SIZE"],
        max_per_page=current_app.config["MAX_PAGE_SIZE"],
    )
    if state.error:
        return api_error(E.UPSTREAM, state.error, details={"entity": entity})
    return jsonify(payload)


@list_views_bp.route(f"/{_ENTITY}/summary", methods=["GET"])
def entity_summary(entity):
    """Summary tiles over the unfiltered list."""
    payload = list_views.summary_view(get_entity(entity), collaborators()[entity])
    if payload["error"]:
        return api_error(E.UPSTREAM, payload["error"], details={"entity": entity})
    return jsonify(payload)


@list_views_bp.route(f"/{_ENTITY}/<int:record_id>", methods=["GET"])
def get_record(entity, record_id):
    """Single normalized record."""
    record = _service(entity).fetch(record_id)
    return jsonify(render_record(record))


@list_views_bp.route(f"/{_ENTITY}/<int:record_id>/form", methods=["GET"])
def edit_form(entity, record_id):
    """Edit form pre-populated with the fields the acting role may change."""
    record, values = _service(entity).load_for_edit(record_id, acting_role())
    return jsonify({
        "item": render_record(record),
        "values": values,
        "editable": list(editable_fields(entity, acting_role())),
    })


# ═══════════════════════════════════════════════════════════════════════════
#  MUTATIONS
# ═══════════════════════════════════════════════════════════════════════════

@list_views_bp.route(f"/{_ENTITY}", methods=["POST"])
def create_record(entity):
    """Validate and create; the UI navigates away after ``redirect_after`` seconds."""
    service = _service(entity)
    record = service.create(json_body())
    return jsonify({
        "item": render_record(record),
        "message": f"{service.spec.label} created successfully",
        "redirect_after": service.redirect_delay,
    }), 201


@list_views_bp.route(f"/{_ENTITY}/<int:record_id>", methods=["PUT"])
def update_record(entity, record_id):
    """Validate the editable subset and update."""
    service = _service(entity)
    record = service.update(record_id, json_body(), acting_role())
    return jsonify({
        "item": render_record(record),
        "message": f"{service.spec.label} updated successfully",
    })


@list_views_bp.route(f"/{_ENTITY}/<int:record_id>", methods=["DELETE"])
def delete_record(entity, record_id):
    """Delete after the UI's confirmation step; the client drops the row by id."""
    _service(entity).delete(record_id)
    return jsonify({"deleted": True, "id": record_id})


@list_views_bp.route("/projects/<int:project_id>/requirement", methods=["POST"])
def upload_project_requirement(project_id):
    """Forward a requirements PDF to the backend."""
    file, size = uploaded_file()
    if file is None:
        return api_error(E.VALIDATION_REQUIRED, "Please select a file to upload")
    result = upload_requirement(
        collaborators()["projects"],
        project_id,
        filename=file.filename,
        stream=file.stream,
        mimetype=file.mimetype,
        size=size,
        allowed_types=current_app.config["UPLOAD_ALLOWED_TYPES"],
        max_mb=current_app.config["UPLOAD_MAX_MB"],
    )
    return jsonify({"uploaded": True, "result": result}), 201
