"""
File uploads: project requirement documents and shop product images.

Type and size are checked locally before anything is sent; the file is then
forwarded to the backend as multipart form data.
"""

from __future__ import annotations

import logging

from bizdesk.core.exceptions import CollaboratorError, ValidationError

logger = logging.getLogger(__name__)


def validate_upload(
    filename: str | None,
    mimetype: str | None,
    size: int,
    *,
    allowed_types: tuple = (),
    max_mb: int = 5,
) -> None:
    if not filename:
        raise ValidationError("Please select a file to upload", details={"file": "required"})
    if allowed_types and mimetype not in allowed_types:
        raise ValidationError(
            f"Invalid file type. Allowed types: {', '.join(allowed_types)}",
            details={"file": "type"},
        )
    if size > max_mb * 1024 * 1024:
        raise ValidationError(f"File size exceeds {max_mb}MB limit", details={"file": "size"})


def upload_requirement(
    api,
    project_id: int,
    *,
    filename: str,
    stream,
    mimetype: str,
    size: int,
    allowed_types: tuple = (),
    max_mb: int = 5,
):
    """Validate and forward a project's requirements document."""
    validate_upload(filename, mimetype, size, allowed_types=allowed_types, max_mb=max_mb)
    try:
        result = api.upload_requirement(project_id, (filename, stream, mimetype))
    except CollaboratorError:
        logger.exception("Requirement upload for project %s failed", project_id,
                         extra={"entity": "projects", "record_id": project_id})
        raise
    logger.info("Uploaded requirement %s for project %s (%d bytes)", filename, project_id, size)
    return result


def upload_product_image(
    api,
    product_id: int,
    *,
    filename: str,
    stream,
    mimetype: str,
    size: int,
    allowed_types: tuple = (),
    max_mb: int = 5,
):
    """Validate and forward a shop product's image."""
    validate_upload(filename, mimetype, size, allowed_types=allowed_types, max_mb=max_mb)
    try:
        result = api.upload_product_image(product_id, (filename, stream, mimetype))
    except CollaboratorError:
        logger.exception("Image upload for product %s failed", product_id,
                         extra={"entity": "shop", "record_id": product_id})
        raise
    logger.info("Uploaded image %s for product %s (%d bytes)", filename, product_id, size)
    return result
