# ==============================================================================
# TGX RUN-LENGTH CODEC
# ==============================================================================
# Encoder and decoder for the run-length pixel stream used by TGX images
# and by most GM1 archive entries.
#
# STREAM FORMAT:
# --------------
# The stream is a sequence of records, one image row after another.
# Each record starts with a header byte:
#
#   bits 7-5   record kind
#   bits 4-0   run length - 1 (runs hold 1-32 pixels)
#
#   100  end of line        no payload, moves to the next row
#   001  transparent run    no payload
#   010  repeated pixel     one color, drawn run-length times
#   000  pixel stream       run-length colors
#
# A color is 2 bytes little-endian, or a single palette index byte when the
# image belongs to an archive with a palette. Runs longer than 32 pixels
# are split into 32-pixel chunks plus a remainder; a repeated-pixel run
# repeats its color after every chunk header.
#
# RUN CLASSIFICATION:
# -------------------
# A run of 3 or more equal colors is written as a repeated-pixel run.
# Pairs are not worth it and stay inside the surrounding pixel stream.
# A pixel stream stops right before a 3+ repeat, at a transparent pixel,
# or at the end of the row.
# ==============================================================================

from typing import Dict, Iterator, List, NamedTuple, Sequence

from ..core.datatypes import DataType, writes_transparent_rows
from ..core.errors import MalformedStream
from .color import TRANSPARENT, OPACITY_BIT


# ==============================================================================
# CONSTANTS
# ==============================================================================

HEADER_STREAM = 0b0000_0000
HEADER_TRANSPARENT = 0b0010_0000
HEADER_REPEAT = 0b0100_0000
HEADER_NEWLINE = 0b1000_0000

LENGTH_MASK = 0b0001_1111

# Longest run a single header can describe
MAX_RUN = 32

KIND_STREAM = 0
KIND_TRANSPARENT = 1
KIND_REPEAT = 2
KIND_NEWLINE = 4


class Record(NamedTuple):
    """
    One decoded stream record.

    Attributes:
        kind:     KIND_* constant
        length:   Pixel count (0 for end of line)
        values:   Payload colors or palette indices
        offset:   Byte offset of the header in the stream
    """
    kind: int
    length: int
    values: tuple
    offset: int


# ==============================================================================
# ENCODER
# ==============================================================================

def _chunks(count: int) -> Iterator[int]:
    """Split a run into 32-pixel chunks followed by the remainder."""
    while count >= MAX_RUN:
        yield MAX_RUN
        count -= MAX_RUN
    if count:
        yield count


def _rest_transparent(colors: Sequence[int], start: int) -> bool:
    """Check whether every color from ``start`` to the end is transparent."""
    for i in range(start, len(colors)):
        if colors[i] != TRANSPARENT:
            return False
    return True


def _classify(colors: Sequence[int], row: int, start: int, width: int):
    """
    Measure the run that begins at column ``start``.

    Returns:
        (count, repeat) where ``repeat > 2`` means a repeated-pixel run of
        ``repeat`` pixels, otherwise a pixel stream of ``count`` pixels
    """
    count = 1
    repeat = 1

    for z in range(start + 1, width):
        current = colors[row + z]
        previous = colors[row + z - 1]

        if current != TRANSPARENT and previous != current:
            if repeat > 2:
                break
            elif repeat > 1:
                # A pair folds back into the stream
                count += repeat - 1
                repeat = 1
            count += 1

        elif current != TRANSPARENT:
            repeat += 1
            if count > 1 and repeat > 2:
                # Stream ends right before the repeat starts
                count -= 1
                repeat = 1
                break
            if z == width - 1:
                count += 1

        else:
            if repeat < 3:
                count += repeat - 1
            break

    return count, repeat


def encode_colors(colors: Sequence[int],
                  width: int,
                  height: int,
                  data_type=None,
                  animated: bool = True,
                  indexer=None) -> bytes:
    """
    Encode a packed color sequence into a TGX pixel stream.

    Args:
        colors: width * height packed colors, sentinel for transparent pixels
        width: Image width
        height: Image height
        data_type: Asset category code; decides how fully empty rows are written
        animated: When False, bit 15 is forced on for every written color
        indexer: PaletteIndexer; when given, colors are written as 1-byte indices

    Returns:
        Encoded stream bytes

    Raises:
        ValueError: If the sequence length does not match the dimensions
        PaletteError: If a reference image does not match the image size
    """
    if len(colors) != width * height:
        raise ValueError(
            f"Color sequence has {len(colors)} entries, expected {width}x{height}")
    if indexer is not None:
        indexer.check_length(len(colors))

    alpha = 0 if animated else OPACITY_BIT
    empty_rows = writes_transparent_rows(data_type)
    always_empty_runs = data_type is not None and data_type == DataType.TILES_OBJECT

    out = bytearray()

    def put_color(position: int):
        value = colors[position] | alpha
        if indexer is None:
            out.append(value & 0xFF)
            out.append((value >> 8) & 0xFF)
        else:
            out.append(indexer.find(value, position))

    def put_transparent(count: int):
        for chunk in _chunks(count):
            out.append(HEADER_TRANSPARENT | (chunk - 1))

    for y in range(height):
        row = y * width
        x = 0

        while x < width:
            run = 0
            while x + run < width and colors[row + x + run] == TRANSPARENT:
                run += 1

            if run == width:
                # Whole row is empty
                if empty_rows and (always_empty_runs or not _rest_transparent(colors, row + width)):
                    put_transparent(run)
                out.append(HEADER_NEWLINE)
                break

            put_transparent(run)
            x += run
            if x == width:
                out.append(HEADER_NEWLINE)
                break

            count, repeat = _classify(colors, row, x, width)

            if repeat > 2:
                count = repeat
                for chunk in _chunks(count):
                    out.append(HEADER_REPEAT | (chunk - 1))
                    put_color(row + x + 1)
            else:
                position = row + x
                for chunk in _chunks(count):
                    out.append(HEADER_STREAM | (chunk - 1))
                    for _ in range(chunk):
                        put_color(position)
                        position += 1

            x += count
            if x == width:
                out.append(HEADER_NEWLINE)

    return bytes(out)


# ==============================================================================
# DECODER
# ==============================================================================

def iter_records(data: bytes, indexed: bool = False) -> Iterator[Record]:
    """
    Walk the records of an encoded stream.

    Args:
        data: Encoded stream
        indexed: Payload colors are 1-byte palette indices

    Yields:
        Record tuples in stream order

    Raises:
        MalformedStream: On an unknown record kind or a truncated payload
    """
    size = 1 if indexed else 2
    pos = 0
    end = len(data)

    while pos < end:
        offset = pos
        header = data[pos]
        pos += 1

        if header & HEADER_NEWLINE:
            yield Record(KIND_NEWLINE, 0, (), offset)
            continue

        kind = (header >> 5) & 0b11
        length = (header & LENGTH_MASK) + 1

        if kind == KIND_TRANSPARENT:
            yield Record(kind, length, (), offset)
            continue

        if kind == KIND_STREAM:
            count = length
        elif kind == KIND_REPEAT:
            count = 1
        else:
            raise MalformedStream(f"Unknown record kind 0b{header >> 5:03b}", offset)

        if pos + count * size > end:
            raise MalformedStream(
                f"Record needs {count * size} payload bytes, {end - pos} left", offset)

        if indexed:
            values = tuple(data[pos:pos + count])
        else:
            values = tuple(data[pos + 2 * i] | (data[pos + 2 * i + 1] << 8)
                           for i in range(count))
        pos += count * size

        yield Record(kind, length, values, offset)


def decode_colors(data: bytes,
                  width: int,
                  height: int,
                  palette=None) -> List[int]:
    """
    Decode a TGX pixel stream into a packed color sequence.

    Pixels not covered by any run stay transparent, so a stream that ends
    early or skips rows with a bare end-of-line marker still decodes.

    Args:
        data: Encoded stream
        width: Image width
        height: Image height
        palette: PaletteTable for indexed streams; indices resolve through
                 its active table

    Returns:
        width * height packed colors

    Raises:
        MalformedStream: If the stream does not fit the image geometry
    """
    colors = [TRANSPARENT] * (width * height)
    table = palette.tables[palette.active] if palette is not None else None

    x = 0
    y = 0

    for record in iter_records(data, indexed=table is not None):
        if record.kind == KIND_NEWLINE:
            if y >= height:
                raise MalformedStream(f"More than {height} rows", record.offset)
            y += 1
            x = 0
            continue

        if y >= height:
            raise MalformedStream("Pixel data after the last row", record.offset)
        if x + record.length > width:
            raise MalformedStream(
                f"Run of {record.length} at column {x} overflows row of {width}",
                record.offset)

        base = y * width + x

        if record.kind == KIND_STREAM:
            values = record.values
            if table is not None:
                values = [table[v] for v in values]
            colors[base:base + record.length] = values
        elif record.kind == KIND_REPEAT:
            value = record.values[0]
            if table is not None:
                value = table[value]
            colors[base:base + record.length] = [value] * record.length

        x += record.length

    return colors


def record_stats(data: bytes, indexed: bool = False) -> Dict[int, int]:
    """Count records per kind; handy for stream statistics."""
    stats = {KIND_STREAM: 0, KIND_TRANSPARENT: 0, KIND_REPEAT: 0, KIND_NEWLINE: 0}
    for record in iter_records(data, indexed):
        stats[record.kind] += 1
    return stats
