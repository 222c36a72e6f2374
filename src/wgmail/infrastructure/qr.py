"""Render WireGuard configuration text as a compact QR code PNG.

Comment lines are dropped before encoding so the symbol stays as small
as possible; the payload uses byte mode with the lowest error
correction level, and the image is written as an optimized 1-bit PNG.
"""

from __future__ import annotations

import io
from typing import TextIO

import qrcode
from qrcode.constants import ERROR_CORRECT_L
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage
from qrcode.util import MODE_8BIT_BYTE, QRData

from wgmail.domain.errors import QrEncodingError

COMMENT_PREFIX = "#"

# 4 px per module and an 8 px quiet zone
DEFAULT_BOX_SIZE = 4
DEFAULT_BORDER = 2


def strip_comments(raw_config: TextIO | str) -> str:
    """Return the configuration with comment lines removed and lines trimmed.

    Every retained line ends with exactly one ``\\n``.

    Examples:
        >>> strip_comments("  # comment\\nPrivateKey = abc\\n#another\\n")
        'PrivateKey = abc\\n'
    """
    stream = io.StringIO(raw_config) if isinstance(raw_config, str) else raw_config
    parts: list[str] = []
    for line in stream:
        line = line.strip()
        if line.startswith(COMMENT_PREFIX):
            continue
        parts.append(line)
        parts.append("\n")
    return "".join(parts)


def encode_config_qr(
    raw_config: TextIO | str,
    *,
    box_size: int = DEFAULT_BOX_SIZE,
    border: int = DEFAULT_BORDER,
) -> io.BytesIO:
    """Encode *raw_config* as a PNG QR code and return it as a rewound stream.

    Raises:
        QrEncodingError: The input could not be read or does not fit
            into a QR symbol.
    """
    try:
        payload = strip_comments(raw_config)
    except (OSError, UnicodeError) as exc:
        raise QrEncodingError(f"failed to read configuration: {exc}") from exc

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
        image_factory=PilImage,
    )
    try:
        qr.add_data(QRData(payload.encode("utf-8"), mode=MODE_8BIT_BYTE))
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise QrEncodingError(f"failed to encode configuration: {exc}") from exc

    buf = io.BytesIO()
    try:
        qr.make_image().save(buf, format="PNG", optimize=True)
    except OSError as exc:
        raise QrEncodingError(f"failed to write QR image: {exc}") from exc
    buf.seek(0)
    return buf
