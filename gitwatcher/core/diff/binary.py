"""Binary content heuristic.

Decides whether a buffer should participate in line diffing. The check looks
at the first 512 bytes only and tolerates well-formed UTF-8 text, so it is a
heuristic: short files in exotic encodings may be misclassified.
"""

UTF8_BOM = b"\xef\xbb\xbf"

# Bytes inspected from the start of the buffer
SCAN_WINDOW = 512
# Bytes that must be seen before an early verdict is allowed
MIN_SCANNED_FOR_EARLY_EXIT = 32
# Percentage of suspicious bytes above which content is binary
SUSPICIOUS_PERCENT_THRESHOLD = 10


def _is_plain_byte(byte: int) -> bool:
    """Printable ASCII or a common control character (BEL..SO)."""
    return 7 <= byte <= 14 or 32 <= byte <= 127


def _is_continuation(byte: int) -> bool:
    return 128 <= byte <= 191


def _utf8_sequence_length(buffer: bytes, index: int, limit: int) -> int:
    """Return the length of a valid 2 or 3 byte UTF-8 sequence at index, or 0."""
    lead = buffer[index]
    if 192 <= lead <= 223:
        if index + 1 < limit and _is_continuation(buffer[index + 1]):
            return 2
    elif 224 <= lead <= 238:
        if (
            index + 2 < limit
            and _is_continuation(buffer[index + 1])
            and _is_continuation(buffer[index + 2])
        ):
            return 3
    return 0


def _too_suspicious(suspicious: int, scanned: int) -> bool:
    return scanned > 0 and suspicious * 100 / scanned > SUSPICIOUS_PERCENT_THRESHOLD


def is_binary(buffer: bytes) -> bool:
    """Classify a buffer as binary or text.

    Args:
        buffer: File content, or at least its first 512 bytes.

    Returns:
        True if the content looks binary.
    """
    if not buffer:
        return False
    if buffer.startswith(UTF8_BOM):
        return False

    total = min(len(buffer), SCAN_WINDOW)
    suspicious = 0
    i = 0
    while i < total:
        byte = buffer[i]
        if byte == 0:
            return True
        if _is_plain_byte(byte):
            i += 1
            continue

        sequence_length = _utf8_sequence_length(buffer, i, total)
        if sequence_length:
            i += sequence_length
            continue

        suspicious += 1
        i += 1
        if i >= MIN_SCANNED_FOR_EARLY_EXIT and _too_suspicious(suspicious, i):
            return True

    return _too_suspicious(suspicious, total)
