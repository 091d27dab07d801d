"""base64 data URI helpers shared by the endpoint and the upload session."""
import base64
import binascii


def encode_data_uri(data: bytes, mime_type: str) -> str:
    b64 = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{b64}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Return (mime_type, payload) for a ``data:<mime>;base64,<payload>`` string."""
    if not uri or not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI")
    header, payload = uri.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0] or "application/octet-stream"
    if ";base64" not in header:
        raise ValueError("Only base64 data URIs are supported")
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
