"""
Recipeshare - Recipe image cropping.

Recipe images are square. The form may send the crop rectangle chosen in
the browser; without one the image is center-cropped.
"""

import io
import logging
from dataclasses import dataclass
from typing import Mapping

from PIL import Image, ImageOps, UnidentifiedImageError

from recipeshare.errors import ImageError

logger = logging.getLogger(__name__)

JPEG_QUALITY = 85


@dataclass(frozen=True)
class CropBox:
    """Crop rectangle in source-image pixels."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "CropBox | None":
        """
        Read crop_x/crop_y/crop_width/crop_height from a posted form.

        Returns None unless all four are present and numeric.
        """
        try:
            values = [float(form[f"crop_{key}"]) for key in ("x", "y", "width", "height")]
        except (KeyError, TypeError, ValueError):
            return None
        x, y, width, height = (round(v) for v in values)
        return cls(x=x, y=y, width=width, height=height)


def _square_box(image_size: tuple[int, int], box: CropBox | None) -> tuple[int, int, int, int]:
    img_w, img_h = image_size

    if box is None:
        side = min(img_w, img_h)
        left = (img_w - side) // 2
        top = (img_h - side) // 2
        return left, top, left + side, top + side

    left = max(0, min(box.x, img_w))
    top = max(0, min(box.y, img_h))
    side = min(box.width, box.height, img_w - left, img_h - top)
    if side <= 0:
        raise ImageError("Valitud pildiala on tühi")
    return left, top, left + side, top + side


def crop_image(data: bytes, box: CropBox | None = None, max_size: int = 800) -> bytes:
    """
    Crop an uploaded image to a square and re-encode it as JPEG.

    Images larger than `max_size` on a side are scaled down.
    Raises ImageError for anything Pillow cannot decode.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageError("Fail ei ole pilt") from e

    image = ImageOps.exif_transpose(image)
    image = image.crop(_square_box(image.size, box))

    if max(image.size) > max_size:
        image.thumbnail((max_size, max_size))

    if image.mode != "RGB":
        image = image.convert("RGB")

    out = io.BytesIO()
    image.save(out, format="JPEG", quality=JPEG_QUALITY)
    logger.debug(f"Cropped image to {image.size[0]}x{image.size[1]}")
    return out.getvalue()
