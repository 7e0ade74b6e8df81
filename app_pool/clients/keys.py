"""Private key normalization."""

import base64

PEM_HEADER = "-----BEGIN "
PEM_FOOTER = "-----END "


def decode_private_key(key: str) -> str:
    """Return PEM text, decoding base64 if the key isn't already PEM.

    Keys stored in environment variables are often base64-encoded to
    avoid multi-line values.
    """
    if key.startswith(PEM_HEADER) and PEM_FOOTER in key:
        return key
    return base64.b64decode(key).decode("utf-8")
