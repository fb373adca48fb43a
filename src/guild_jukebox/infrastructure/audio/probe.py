"""Container detection from the first bytes of an audio stream."""

from __future__ import annotations

from typing import Final

from guild_jukebox.domain.music.value_objects import StreamContainer

EBML_MAGIC: Final = b"\x1a\x45\xdf\xa3"
OGG_MAGIC: Final = b"OggS"
MP4_BOX_TYPE: Final = b"ftyp"
ID3_MAGIC: Final = b"ID3"

# Enough to see an MP4 box type at offset 4.
MIN_PROBE_BYTES: Final = 8


def _is_mpeg_frame_sync(head: bytes) -> bool:
    # 11-bit frame sync; layer bits 00 mean ADTS AAC, not MPEG audio.
    return len(head) >= 2 and head[0] == 0xFF and (head[1] & 0xE0) == 0xE0 and (head[1] & 0x06) != 0


def sniff_container(head: bytes) -> StreamContainer:
    """Identify the container framing of ``head``.

    Returns ``StreamContainer.UNKNOWN`` when the bytes match no supported
    framing, including when there are too few of them.
    """
    if head.startswith(EBML_MAGIC):
        return StreamContainer.WEBM
    if head.startswith(OGG_MAGIC):
        return StreamContainer.OGG
    if len(head) >= MIN_PROBE_BYTES and head[4:8] == MP4_BOX_TYPE:
        return StreamContainer.MP4
    if head.startswith(ID3_MAGIC) or _is_mpeg_frame_sync(head):
        return StreamContainer.MPEG
    return StreamContainer.UNKNOWN


def container_from_codec(ext: str | None, acodec: str | None = None) -> StreamContainer:
    """Map the extension/codec an extractor declares to a container."""
    ext = (ext or "").lower()
    acodec = (acodec or "").lower()
    if ext in {"webm", "mkv"}:
        return StreamContainer.WEBM
    if ext in {"ogg", "opus"} and acodec in {"", "opus", "vorbis"}:
        return StreamContainer.OGG
    if ext in {"m4a", "mp4"}:
        return StreamContainer.MP4
    if ext == "mp3" or acodec == "mp3":
        return StreamContainer.MPEG
    return StreamContainer.UNKNOWN


def container_from_mime(mime_type: str | None) -> StreamContainer:
    """Map an ``audio/webm; codecs="opus"`` style MIME type to a container."""
    base = (mime_type or "").split(";", 1)[0].strip().lower()
    return {
        "audio/webm": StreamContainer.WEBM,
        "audio/ogg": StreamContainer.OGG,
        "audio/mp4": StreamContainer.MP4,
        "audio/mpeg": StreamContainer.MPEG,
    }.get(base, StreamContainer.UNKNOWN)
