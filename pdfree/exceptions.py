"""
Custom exceptions for PDFree.

Object-level errors derive from :class:`SkippableObjectError` and never leave
the page loop that raised them. Page-level rendering problems raise
:class:`EncodingFailureError` and are absorbed by the document loop. Only
:class:`NoExtractableImagesError` and the input/option errors reach callers.
"""


class PDFreeError(Exception):
    """Base exception for all PDFree errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDFree error occurred."


class InvalidPDFError(PDFreeError):
    """Raised when the input document cannot be parsed by any backend."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class InvalidOptionsError(PDFreeError, ValueError):
    """Raised when caller supplied options are out of range."""

    @property
    def default_message(self) -> str:
        return "Invalid processing options."


class SkippableObjectError(PDFreeError):
    """A single raster object could not be used; processing continues."""

    @property
    def default_message(self) -> str:
        return "Raster object skipped."


class UnsupportedBitDepthError(SkippableObjectError):
    """Raised for image streams that are not 8 bits per component."""

    def __init__(self, bits_per_component: int) -> None:
        self.bits_per_component = bits_per_component
        super().__init__(f"Unsupported bit depth: {bits_per_component} (only 8-bit is handled)")


class UnmatchedBufferError(SkippableObjectError):
    """Raised when a sample buffer matches no known channel layout."""

    @property
    def default_message(self) -> str:
        return "Sample buffer length does not match any channel layout."


class ResolutionTimeoutError(SkippableObjectError):
    """Raised when an image operand is not resolved before the deadline."""

    @property
    def default_message(self) -> str:
        return "Timed out resolving image operand."


class EncodingFailureError(PDFreeError):
    """Raised when a page cannot be rendered or encoded."""

    @property
    def default_message(self) -> str:
        return "Failed to render or encode page."


class NoExtractableImagesError(PDFreeError):
    """Raised when neither extraction strategy recovered a single image."""

    @property
    def default_message(self) -> str:
        return (
            "No extractable embedded images found in this PDF.\n\n"
            "Possible reasons:\n"
            "- The PDF contains vector graphics instead of images\n"
            "- Images are stored in a format that cannot be directly extracted\n"
            "- The PDF was created by rendering content as full pages\n\n"
            "Tip: Use the 'pdf-to-images' command instead to convert entire pages to images."
        )


class CompressionError(PDFreeError):
    """Raised when compression produces no usable document."""

    @property
    def default_message(self) -> str:
        return "Compression failed."


class ConversionError(PDFreeError):
    """Raised when a conversion to PDF cannot be completed."""

    @property
    def default_message(self) -> str:
        return "Conversion to PDF failed."
