"""
Image Decoding

Decodes base64 data URIs (data:image/png;base64,...) and stores them on a disk.
"""

import base64
import binascii
import logging
import posixpath
from typing import Optional

from datagate.common.utils import uniqid
from datagate.storage import Storage, get_disk

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"png", "jpeg"}


def parse_data_uri(img_str: str) -> Optional[tuple[str, bytes]]:
    """
    Split a base64 data URI into (extension, decoded bytes).

    Returns None when the payload does not have exactly one comma, the
    extension is not allowed, or the data is not valid base64.
    """
    parts = img_str.split(",")
    if len(parts) != 2:
        return None
    header, data = parts
    slash = header.find("/")
    semicolon = header.find(";")
    if slash < 0 or semicolon <= slash:
        return None
    extension = header[slash + 1:semicolon]
    if extension not in ALLOWED_EXTENSIONS:
        return None
    try:
        content = base64.b64decode(data)
    except (binascii.Error, ValueError):
        return None
    return extension, content


async def decoder_base64(
    img_str: str,
    path: str,
    suffix: str = "",
    disk: Optional[Storage] = None,
) -> Optional[str]:
    """
    Decode a base64 image and save it on the upload disk.

    Args:
        img_str: Data URI, e.g. "data:image/png;base64,iVBORw0..."
        path: Directory on the disk
        suffix: Appended to the generated file name
        disk: Target disk, defaults to the "upload" disk

    Returns:
        "<disk>/<path>/<uniqid><suffix>.<ext>", or None when the payload is rejected
    """
    parsed = parse_data_uri(img_str)
    if parsed is None:
        logger.warning("Rejected base64 image payload for path %s", path)
        return None
    extension, content = parsed

    disk = disk or get_disk()
    file_name = posixpath.join(path, f"{uniqid()}{suffix}.{extension}")
    await disk.put(file_name, content)
    logger.info("Stored %s image (%d bytes) at %s", extension, len(content), file_name)
    return posixpath.join(disk.name, file_name)
