"""
Streamed conversion between the UTF-16 used inside PBIT packages
and the UTF-8 written to disk.

Power BI stores several parts as little-endian UTF-16 without a byte
order mark. Parts are copied through a fixed-size buffer; incremental
codecs carry characters split across two reads over to the next chunk.
"""

import codecs
from typing import BinaryIO

from pbitutility.types import EncodingConversion


CHUNK_SIZE = 0x1000

UTF16 = "utf-16-le"
UTF8 = "utf-8"

_CODECS = {
    EncodingConversion.UTF16_TO_UTF8: (UTF16, UTF8),
    EncodingConversion.UTF8_TO_UTF16: (UTF8, UTF16),
}


def transcode(
    source: BinaryIO,
    target: BinaryIO,
    conversion: EncodingConversion = EncodingConversion.NONE,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """
    Copy source to target, converting the text encoding if requested.

    A byte order mark in the source is kept as a character, so
    converting back reproduces the original bytes exactly. Lone
    surrogates are passed through the same way.

    Args:
        source: Readable binary stream, read to exhaustion
        target: Writable binary stream
        conversion: Direction of the conversion, NONE to copy bytes
        chunk_size: Number of bytes read per iteration

    Returns:
        Number of bytes written to target.

    Raises:
        UnicodeDecodeError: If the source ends in the middle of a character
    """
    if conversion == EncodingConversion.NONE:
        written = 0
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                return written
            target.write(chunk)
            written += len(chunk)

    source_encoding, target_encoding = _CODECS[conversion]
    decoder = codecs.getincrementaldecoder(source_encoding)(errors="surrogatepass")
    encoder = codecs.getincrementalencoder(target_encoding)(errors="surrogatepass")

    written = 0
    while True:
        chunk = source.read(chunk_size)
        final = not chunk
        data = encoder.encode(decoder.decode(chunk, final=final), final=final)
        if data:
            target.write(data)
            written += len(data)
        if final:
            return written
