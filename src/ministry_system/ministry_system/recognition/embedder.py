from __future__ import annotations

import io

import face_recognition
import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.constants import EMBEDDING_DIMENSIONS
from ..core.exceptions import ValidationError
from .repository import FaceEmbedder


def load_rgb(image_bytes: bytes) -> np.ndarray:
    if not image_bytes:
        raise ValidationError("Image is required")
    try:
        img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
    except UnidentifiedImageError:
        raise ValidationError("Unsupported image format")
    return np.array(img)


class FaceRecognitionEmbedder(FaceEmbedder):
    """128-d face encodings from dlib via face_recognition."""

    def embed(self, image_bytes: bytes) -> list[float]:
        rgb = load_rgb(image_bytes)
        boxes = face_recognition.face_locations(rgb)
        if not boxes:
            raise ValidationError("No face detected in image")

        encodings = face_recognition.face_encodings(rgb, boxes)
        if not encodings:
            raise ValidationError("No face detected in image")

        vector = [float(v) for v in encodings[0]]
        if len(vector) != EMBEDDING_DIMENSIONS:
            raise ValidationError("Unexpected face encoding size")
        return vector
