"""Multipart form parsing and logo upload checks."""

from __future__ import annotations

import io
import json
from dataclasses import dataclass, field
from email.parser import BytesParser
from email.policy import HTTP
from typing import Any, Dict, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .config import ALLOWED_LOGO_TYPES, MAX_LOGO_BYTES
from .errors import AssetError, LogoTooLargeError, RequestError
from .models import LogoAsset

PIL_FORMAT_TYPES = {"JPEG": "image/jpeg", "PNG": "image/png"}


@dataclass(frozen=True)
class UploadedFile:
    field_name: str
    filename: str
    content_type: str
    data: bytes


@dataclass
class FormSubmission:
    fields: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, UploadedFile] = field(default_factory=dict)


def parse_multipart(content_type: str, body: bytes) -> FormSubmission:
    if not content_type.lower().startswith("multipart/form-data"):
        raise RequestError("Request must be multipart/form-data.")

    header = f"Content-Type: {content_type}\r\nMIME-Version: 1.0\r\n\r\n".encode("latin-1")
    message = BytesParser(policy=HTTP).parsebytes(header + body)
    if not message.is_multipart():
        raise RequestError("Multipart body could not be parsed.")

    submission = FormSubmission()
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        if not name:
            continue
        payload = part.get_payload(decode=True) or b""
        filename = part.get_filename()
        if filename is not None:
            submission.files[name] = UploadedFile(
                field_name=name,
                filename=filename,
                content_type=part.get_content_type(),
                data=payload,
            )
        else:
            charset = part.get_content_charset() or "utf-8"
            try:
                submission.fields[name] = payload.decode(charset)
            except (LookupError, UnicodeDecodeError) as exc:
                raise RequestError(f"Field '{name}' is not valid text.") from exc
    return submission


def inspect_logo(data: bytes, content_type: Optional[str] = None, max_bytes: int = MAX_LOGO_BYTES) -> LogoAsset:
    """Check a logo upload and read its pixel size.

    ``content_type`` is the declared MIME type; when omitted it is taken from
    the decoded image.
    """
    if content_type is not None and content_type not in ALLOWED_LOGO_TYPES:
        raise AssetError("Invalid file type. Only JPG and PNG allowed.")
    if len(data) > max_bytes:
        raise LogoTooLargeError(f"Maximum file size is {max_bytes // (1024 * 1024)}MB")
    if not data:
        raise AssetError("Uploaded logo is empty.")

    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            width, height = image.size
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise AssetError("Logo image could not be decoded.") from exc

    detected = PIL_FORMAT_TYPES.get(image_format or "")
    if detected is None:
        raise AssetError("Invalid file type. Only JPG and PNG allowed.")
    return LogoAsset(data=data, mime_type=detected, width=width, height=height)


def parse_invoice_submission(
    content_type: str,
    body: bytes,
    max_logo_bytes: int = MAX_LOGO_BYTES,
) -> Tuple[Any, Optional[LogoAsset]]:
    """Split a ``data`` + ``logo`` form into the JSON document and the logo."""
    submission = parse_multipart(content_type, body)

    raw = submission.fields.get("data")
    if raw is None:
        raise RequestError("Form field 'data' is required.")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RequestError(f"{exc.msg} (line {exc.lineno}, column {exc.colno})") from exc

    upload = submission.files.get("logo")
    logo = None
    # Browsers send an empty part when no file was chosen.
    if upload is not None and upload.data:
        logo = inspect_logo(upload.data, upload.content_type, max_bytes=max_logo_bytes)
    return data, logo
