# finance/receipts.py
# 🧾 Receipt storage accounting.
#    Receipts are stored inline as base-64 data URIs ("data:image/jpeg;base64,...").
#    These helpers measure them without decoding.

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def get_base64_size(data):
    """
    Decoded byte size of a base-64 payload or data URI.

    Everything up to the first comma (the "data:...;base64" header) is ignored.
    Each 4 characters carry 3 bytes; trailing '=' padding removes one byte each.
    """
    if not data:
        return 0
    _, comma, payload = data.partition(",")
    if not comma:
        payload = data
    if not payload:
        return 0
    if payload.endswith("=="):
        padding = 2
    elif payload.endswith("="):
        padding = 1
    else:
        padding = 0
    return len(payload) * 3 // 4 - padding


def format_file_size(size):
    """Human readable base-1024 size: 0 → '0 Bytes', 1536 → '1.5 KB'."""
    if not size:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"


def receipt_stats(images):
    """Aggregate count/size over an iterable of receipt data URIs (None skipped)."""
    total_receipts = 0
    total_size = 0
    for image in images:
        if image is None:
            continue
        total_receipts += 1
        total_size += get_base64_size(image)
    return {
        "totalReceipts": total_receipts,
        "totalSize": total_size,
        "formattedSize": format_file_size(total_size),
    }


def clear_receipts(ledger):
    """Null every receipt on the ledger; returns how many rows changed."""
    return ledger.transactions.filter(receipt_image__isnull=False).update(receipt_image=None)
