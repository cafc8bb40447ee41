"""Validation for pose images sent to the scoring API."""

import base64
import binascii
import os

from fastapi import UploadFile, HTTPException, status

# Allowed image MIME types
ALLOWED_IMAGE_TYPES = {
    'image/jpeg': '.jpg',
    'image/jpg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp',
}

# Max file size: 10MB per image
MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024


def validate_image_file(file: UploadFile) -> None:
    """Validate image file type and size."""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed types: {', '.join(ALLOWED_IMAGE_TYPES.keys())}"
        )

    file.file.seek(0, os.SEEK_END)
    file_size = file.file.tell()
    file.file.seek(0)

    if file_size > MAX_IMAGE_SIZE_BYTES:
        size_mb = file_size / (1024 * 1024)
        max_mb = MAX_IMAGE_SIZE_BYTES / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image too large ({size_mb:.1f}MB). Maximum size: {max_mb}MB"
        )

    if file_size == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image file is empty"
        )


def validate_frame_data(frame: str) -> str:
    """
    Checks a webcam frame (data URL or bare base64) and returns the base64 payload.
    The scoring API only wants the payload.
    """
    payload = frame.split(",", 1)[1] if frame.startswith("data:") else frame
    payload = payload.strip()
    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Frame is not valid base64 image data"
        )
    if not decoded:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Frame is empty"
        )
    if len(decoded) > MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Frame too large"
        )
    return payload
