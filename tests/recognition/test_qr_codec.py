from __future__ import annotations

import pytest

from src.ministry_system.ministry_system.core.exceptions import ValidationError
from src.ministry_system.ministry_system.recognition.qr import decode_qr, render_qr_png

pytest.importorskip("pyzbar.pyzbar")


def test_rendered_access_key_png_decodes_back():
    png = render_qr_png("KK-2026-123")

    assert png.startswith(b"\x89PNG")
    assert decode_qr(png) == "KK-2026-123"


def test_decode_rejects_non_images():
    with pytest.raises(ValidationError):
        decode_qr(b"not an image")
    with pytest.raises(ValidationError):
        decode_qr(b"")
