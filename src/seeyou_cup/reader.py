"""Read .cup and .cupx files from disk into text.

SeeYou writes CUP files in whatever encoding the machine used, most often
Windows-1252. Bytes are decoded in this order: byte order mark, UTF-16
without a BOM, strict UTF-8, then CP-1252 if the result looks like text.

A .cupx file is a zip holding ``POINTS.CUP`` and a ``pics`` folder, or two
zips (points and pictures) written back to back.
"""

import io
import logging
import struct
import zipfile
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .errors import CupReadError

logger = logging.getLogger(__name__)

Encoding = Literal["utf-8", "utf-16-le", "utf-16-be", "cp1252", "utf-8-lossy"]

UTF16_SAMPLE_BYTES = 8192
SANITY_SAMPLE_CHARS = 16384
MAX_CONTROL_RATIO = 0.005

PICTURE_DIRS = ("pics", "images", "img", "photos")

_LOCAL_HEADER = b"PK\x03\x04"
_END_OF_DIRECTORY = b"PK\x05\x06"


class ReadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    encoding: Encoding
    # Archive paths of pictures shipped in a .cupx, empty for plain .cup
    pictures: tuple[str, ...] = ()


def read_cup_file(file_path: str, strict: bool = True) -> ReadResult:
    """Read a .cup or .cupx file and decode its CUP text.

    Args:
        file_path: Path to the file. A ``.cupx`` suffix selects archive reading.
        strict: When False, bytes no decoder accepts are read as UTF-8 with
            replacement characters instead of raising.
    """
    path = Path(file_path)
    if not path.is_file():
        raise CupReadError(f"File not found at {file_path}")
    data = path.read_bytes()
    if path.suffix.lower() == ".cupx":
        return read_cupx(data, strict=strict)
    return decode_text(data, strict=strict)


def decode_text(data: bytes, strict: bool = True) -> ReadResult:
    if not data:
        raise CupReadError("The file is empty.")

    if data.startswith(b"\xef\xbb\xbf"):
        return ReadResult(text=data[3:].decode("utf-8", errors="replace"), encoding="utf-8")
    if data.startswith(b"\xff\xfe"):
        text = _try_decode(data[2:], "utf-16-le")
        if text is not None:
            return ReadResult(text=text, encoding="utf-16-le")
    if data.startswith(b"\xfe\xff"):
        text = _try_decode(data[2:], "utf-16-be")
        if text is not None:
            return ReadResult(text=text, encoding="utf-16-be")

    if _looks_like_utf16(data, odd=True):
        text = _try_decode(data, "utf-16-le")
        if text is not None:
            return ReadResult(text=text, encoding="utf-16-le")
    elif _looks_like_utf16(data, odd=False):
        text = _try_decode(data, "utf-16-be")
        if text is not None:
            return ReadResult(text=text, encoding="utf-16-be")

    text = _try_decode(data, "utf-8")
    if text is not None:
        return ReadResult(text=text, encoding="utf-8")

    text = _try_decode(data, "cp1252")
    if text is not None and _looks_sane(text):
        logger.debug("Decoded CUP text as CP-1252")
        return ReadResult(text=text, encoding="cp1252")

    if not strict:
        logger.warning("Could not determine text encoding, decoding as lossy UTF-8")
        return ReadResult(text=data.decode("utf-8", errors="replace"), encoding="utf-8-lossy")

    raise CupReadError(
        "Could not determine text encoding. Re-export as UTF-8 or Windows-1252."
    )


def _try_decode(data: bytes, encoding: str):
    try:
        return data.decode(encoding)
    except UnicodeDecodeError:
        return None


def _looks_like_utf16(data: bytes, odd: bool) -> bool:
    """True when most bytes in the high-byte position are NUL."""
    sample = data[:UTF16_SAMPLE_BYTES]
    if len(sample) < 4:
        return False
    high = sample[1::2] if odd else sample[0::2]
    return high.count(0) / len(high) > 0.75


def _looks_sane(text: str) -> bool:
    sample = text[:SANITY_SAMPLE_CHARS]
    if "\n" not in sample and "\r" not in sample:
        return False
    control = sum(1 for ch in sample if ord(ch) < 0x20 and ch not in "\t\n\r")
    printable = len(sample) - control
    return control / max(1, printable) <= MAX_CONTROL_RATIO


def read_cupx(data: bytes, strict: bool = True) -> ReadResult:
    """Decode ``POINTS.CUP`` out of a .cupx archive held in memory."""
    members = {}
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            _collect(zf, members)
    except zipfile.BadZipFile:
        pass

    if _find_points(members) is None:
        # Back-to-back archives: only the last one is visible as a whole file.
        segments = list(_split_archives(data))
        if not segments:
            raise CupReadError("CUPX is not recognized: no zip archive found.")
        for segment in segments:
            try:
                with zipfile.ZipFile(io.BytesIO(segment)) as zf:
                    _collect(zf, members)
            except zipfile.BadZipFile as e:
                raise CupReadError(f"CUPX is not recognized: {e}") from None

    points = _find_points(members)
    if points is None:
        raise CupReadError("POINTS.CUP not found inside the CUPX archive.")

    result = decode_text(members[points], strict=strict)
    pictures = tuple(sorted(
        name for name in members
        if "/" in name and name.split("/", 1)[0].lower() in PICTURE_DIRS
    ))
    logger.debug("Read %s from CUPX with %d picture(s)", points, len(pictures))
    return result.model_copy(update={"pictures": pictures})


def _collect(zf: zipfile.ZipFile, members: dict, prefix: str = "") -> None:
    """Add every file of ``zf`` to ``members``, unpacking nested points/pics zips."""
    for info in zf.infolist():
        if info.is_dir():
            continue
        data = zf.read(info)
        name = info.filename
        basename = name.rsplit("/", 1)[-1].lower()
        if basename in ("points.zip", "pics.zip"):
            folder = basename[:-len(".zip")] + "/"
            with zipfile.ZipFile(io.BytesIO(data)) as nested:
                _collect(nested, members, prefix=folder)
            continue
        members[prefix + name] = data


def _find_points(members: dict):
    names = sorted(members)
    for name in names:
        if name.rsplit("/", 1)[-1].lower() == "points.cup":
            return name
    for name in names:
        if name.lower().endswith(".cup"):
            return name
    return None


def _split_archives(data: bytes):
    """Yield each complete zip archive found in ``data``, in order."""
    start = data.find(_LOCAL_HEADER)
    while start != -1:
        eocd = data.find(_END_OF_DIRECTORY, start)
        if eocd == -1 or eocd + 22 > len(data):
            return
        (comment_length,) = struct.unpack("<H", data[eocd + 20:eocd + 22])
        end = eocd + 22 + comment_length
        yield data[start:end]
        start = data.find(_LOCAL_HEADER, end)
