"""Build image-only PDF documents with pypdf."""

from __future__ import annotations

import io
from typing import Dict, Optional, Tuple

from PIL import Image
from pypdf import PdfWriter
from pypdf.generic import (
    DecodedStreamObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NumberObject,
    StreamObject,
)

from .types import EncodedPageImage

_IMAGE_NAME = "/Im0"


def _format_number(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text or "0"


def _image_dictionary(width: int, height: int, color_space: str) -> Dict[NameObject, object]:
    return {
        NameObject("/Type"): NameObject("/XObject"),
        NameObject("/Subtype"): NameObject("/Image"),
        NameObject("/Width"): NumberObject(int(width)),
        NameObject("/Height"): NumberObject(int(height)),
        NameObject("/ColorSpace"): NameObject(color_space),
        NameObject("/BitsPerComponent"): NumberObject(8),
    }


def split_alpha(image: Image.Image) -> Tuple[Image.Image, Optional[Image.Image]]:
    """Return the colour channels of ``image`` as ``L`` or ``RGB`` plus its alpha, if any."""

    if image.mode == "PA" or (image.mode == "P" and "transparency" in image.info):
        image = image.convert("RGBA")
    elif image.mode in ("1", "I", "I;16", "F"):
        image = image.convert("L")
    if image.mode not in ("L", "LA", "RGB", "RGBA"):
        image = image.convert("RGB")

    if image.mode in ("LA", "RGBA"):
        alpha = image.getchannel("A")
        color = image.convert("L" if image.mode == "LA" else "RGB")
        return color, (None if alpha.getextrema() == (255, 255) else alpha)
    return image, None


class DocumentAssembler:
    """Appends pages that each show a single image to a new document."""

    def __init__(self) -> None:
        self._writer = PdfWriter()

    @property
    def page_count(self) -> int:
        return len(self._writer.pages)

    def embed_jpeg(
        self, jpeg_bytes: bytes, pixel_width: int, pixel_height: int, *, grayscale: bool = False
    ) -> IndirectObject:
        """Store ``jpeg_bytes`` untouched as a DCTDecode image XObject."""

        image = StreamObject()
        image._data = bytes(jpeg_bytes)
        image.update(_image_dictionary(pixel_width, pixel_height, "/DeviceGray" if grayscale else "/DeviceRGB"))
        image[NameObject("/Filter")] = NameObject("/DCTDecode")
        return self._writer._add_object(image)

    def embed_pixels(self, image: Image.Image) -> IndirectObject:
        """Store ``image`` losslessly as a FlateDecode XObject; alpha goes into an ``/SMask``."""

        color, alpha = split_alpha(image)
        stream = self._flate_image(color, "/DeviceGray" if color.mode == "L" else "/DeviceRGB")
        if alpha is not None:
            stream[NameObject("/SMask")] = self._writer._add_object(self._flate_image(alpha, "/DeviceGray"))
        return self._writer._add_object(stream)

    @staticmethod
    def _flate_image(image: Image.Image, color_space: str) -> StreamObject:
        raw = DecodedStreamObject()
        raw.set_data(image.tobytes())
        raw.update(_image_dictionary(image.width, image.height, color_space))
        return raw.flate_encode()

    def add_placed_page(
        self,
        image_ref: IndirectObject,
        width_pt: float,
        height_pt: float,
        box: Optional[Tuple[float, float, float, float]] = None,
    ) -> None:
        """Add a ``width_pt`` x ``height_pt`` page drawing ``image_ref`` into ``box``.

        ``box`` is ``(x, y, width, height)`` in points and defaults to the
        whole page.
        """

        x, y, draw_width, draw_height = box or (0.0, 0.0, width_pt, height_pt)
        page = self._writer.add_blank_page(width=width_pt, height=height_pt)

        content = DecodedStreamObject()
        content.set_data(
            (
                f"q {_format_number(draw_width)} 0 0 {_format_number(draw_height)} "
                f"{_format_number(x)} {_format_number(y)} cm {_IMAGE_NAME} Do Q"
            ).encode("ascii")
        )
        content_ref = self._writer._add_object(content)

        page[NameObject("/Resources")] = DictionaryObject(
            {NameObject("/XObject"): DictionaryObject({NameObject(_IMAGE_NAME): image_ref})}
        )
        page[NameObject("/Contents")] = content_ref

    def add_image_page(
        self,
        jpeg_bytes: bytes,
        pixel_width: int,
        pixel_height: int,
        width_pt: float,
        height_pt: float,
        *,
        grayscale: bool = False,
    ) -> None:
        """Add a page of ``width_pt`` x ``height_pt`` points covered by one JPEG."""

        image_ref = self.embed_jpeg(jpeg_bytes, pixel_width, pixel_height, grayscale=grayscale)
        self.add_placed_page(image_ref, width_pt, height_pt)

    def add_encoded_page(self, image: EncodedPageImage) -> None:
        self.add_image_page(
            image.data, image.width, image.height, image.page_width_pt, image.page_height_pt
        )

    def set_metadata(self, metadata: Dict[str, Optional[str]]) -> None:
        self._writer.add_metadata({key: value or "" for key, value in metadata.items()})

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self._writer.write(buffer)
        return buffer.getvalue()


def fit_box(
    pixel_width: int, pixel_height: int, page_width: float, page_height: float
) -> Tuple[float, float, float, float]:
    """Largest ``(x, y, width, height)`` keeping the aspect ratio, centred on the page."""

    scale = min(page_width / pixel_width, page_height / pixel_height)
    width = pixel_width * scale
    height = pixel_height * scale
    return (page_width - width) / 2, (page_height - height) / 2, width, height


def stripped_metadata(producer: str) -> Dict[str, Optional[str]]:
    """Metadata for a rebuilt document: descriptive fields cleared, producer set."""

    return {
        "/Title": "",
        "/Author": "",
        "/Subject": "",
        "/Keywords": "",
        "/Producer": producer,
        "/Creator": producer,
    }


__all__ = ["DocumentAssembler", "fit_box", "split_alpha", "stripped_metadata"]
