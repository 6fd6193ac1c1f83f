"""PEM armor handling, in accordance with RFC 7468.

Wraps and unwraps a single named PEM block. This module knows nothing of the DER structures carried inside a block,
it is a pure format transform shared by all key and signature types.

Typical usage example:

    text = encode_pem("PUBLIC KEY", der)
    block = decode_pem(text)
    assert block == ("PUBLIC KEY", der)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import binascii
import pathlib
import re
import typing

from rsakeys.errors import InvalidPemFormat

PEM_LINE_LENGTH = 64

# Printable ASCII save hyphen, joined by single hyphens or spaces.
_LABEL = r"[!-,.-~]+(?:[- ][!-,.-~]+)*"
_LABEL_RE = re.compile(_LABEL)
_BEGIN_RE = re.compile(rf"^-----BEGIN ({_LABEL})-----$")
_END_RE = re.compile(rf"^-----END ({_LABEL})-----$")


class PemBlock(typing.NamedTuple):
    """A decoded PEM block: the label of the armor and the binary content it wraps."""
    type: str
    content: bytes


def decode_pem(data: bytes | str) -> PemBlock:
    """Decodes exactly one PEM block.

    Whitespace surrounding the block is ignored, any other text before the BEGIN line or after the END line is not.
    Encapsulated headers (as used by legacy encrypted keys) are not supported.

    Args:
        data: The PEM text, as bytes or string.

    Returns:
        The type and the decoded content of the block.

    Raises:
        InvalidPemFormat: If the armor is missing or malformed, or the payload is not valid base64.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("ascii")
        except UnicodeDecodeError as err:
            raise InvalidPemFormat("PEM data is not ASCII text.") from err
    lines = [line.strip() for line in data.strip().splitlines()]
    if len(lines) < 2:
        raise InvalidPemFormat("No PEM block found.")
    head = _BEGIN_RE.match(lines[0])
    if head is None:
        raise InvalidPemFormat(f"PEM Headline {lines[0][:40]!r} is not a BEGIN marker.")
    foot = _END_RE.match(lines[-1])
    if foot is None:
        raise InvalidPemFormat(f"PEM block does not contain footer: -----END {head.group(1)}-----")
    if foot.group(1) != head.group(1):
        raise InvalidPemFormat(f"PEM footer type {foot.group(1)} does not match {head.group(1)}")
    try:
        content = base64.b64decode("".join(lines[1:-1]), validate=True)
    except binascii.Error as err:
        raise InvalidPemFormat("PEM payload is not valid base64.") from err
    return PemBlock(head.group(1), content)


def encode_pem(block_type: str, content: bytes) -> str:
    """Encodes content into a PEM block.

    Args:
        block_type: The label of the block, e.g. "PUBLIC KEY".
        content: The binary payload.

    Returns:
        The armored text, base64 wrapped at 64 characters and terminated by a newline.

    Raises:
        InvalidPemFormat: If `block_type` is not a valid PEM label.
    """
    if _LABEL_RE.fullmatch(block_type) is None:
        raise InvalidPemFormat(f"Invalid PEM label {block_type!r}.")
    payload = base64.b64encode(content).decode("ascii")
    res = "\n".join(payload[i:i + PEM_LINE_LENGTH] for i in range(0, len(payload), PEM_LINE_LENGTH))
    res += "\n" if res else ""
    return f"-----BEGIN {block_type}-----\n{res}-----END {block_type}-----\n"


def read_pem(file: pathlib.Path) -> PemBlock:
    """Reads a PEM encoded file.

    Args:
        file: The file to read.

    Returns:
        The decoded PEM block.
    """
    with open(file, "r", encoding="ascii") as f:
        return decode_pem(f.read())


def write_pem(file: pathlib.Path, block_type: str, content: bytes) -> None:
    """Writes a PEM encoded file.

    Args:
        file: The file to write.
        block_type: The label of the block.
        content: The data to write.
    """
    with open(file, "w", encoding="ascii") as f:
        f.write(encode_pem(block_type, content))
