from __future__ import annotations

import io

from flask import send_file
from PIL import Image

from .decoding import encode_png


def send_png(img: Image.Image, status: int = 200, headers: dict[str, str] | None = None):
    response = send_file(io.BytesIO(encode_png(img)), mimetype="image/png")
    response.status_code = status
    if headers:
        response.headers.update(headers)
    return response
