import logging

import segno

from overlay_relay.core.exceptions import QRCodeError

logger = logging.getLogger(__name__)


class QRCodeService:
    """Render links (e.g. payment links) as PNG data URIs."""

    def __init__(self, scale: int = 6, border: int = 4) -> None:
        self._scale = scale
        self._border = border

    def to_data_uri(self, url: str) -> str:
        """
        Encode a URL as a QR code image.

        Args:
            url: Text to encode

        Returns:
            ``data:image/png;base64,...`` URI

        Raises:
            QRCodeError: If the URL is empty or cannot be encoded
        """
        if not url:
            raise QRCodeError("missing url")
        try:
            qr = segno.make_qr(url, error="m")
            return qr.png_data_uri(scale=self._scale, border=self._border)
        except (segno.DataOverflowError, ValueError) as e:
            logger.error(f"QR code generation failed: {e}")
            raise QRCodeError("qr error", details={"error": str(e)}) from e
