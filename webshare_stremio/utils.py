import base64
import json
import urllib.parse
from typing import Optional

from webshare_stremio.constants import ID_PREFIX, LEGACY_ID_PREFIX
from webshare_stremio.errors import ConfigError


def encode_user_config(config: dict) -> str:
    """Serialize the user config into the URL-safe path segment Stremio installs."""
    raw = json.dumps(config, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_user_config(encoded: str) -> dict:
    """Decode the base64url JSON config segment.

    Args:
        encoded: Path segment, with or without base64 padding

    Returns:
        The config dict

    Raises:
        ConfigError: When the segment is not base64url JSON of an object
    """
    if not encoded:
        raise ConfigError("Missing user config")
    try:
        plain = urllib.parse.unquote(encoded)
        if plain.lstrip().startswith("{"):
            # Older installs put URI-encoded JSON in the path
            config = json.loads(plain)
        else:
            # Add padding if needed
            padding = "=" * (-len(encoded) % 4)
            decoded = base64.urlsafe_b64decode(encoded + padding).decode("utf-8")
            config = json.loads(decoded)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Invalid user config: {exc}") from exc
    if not isinstance(config, dict):
        raise ConfigError("User config must be an object")
    return config


def parse_webshare_id(media_id: str) -> Optional[str]:
    """Return the Webshare ident of a ``webshare:<ident>`` or ``coffei.webshare:<ident>`` id, else None."""
    for prefix in (ID_PREFIX, LEGACY_ID_PREFIX):
        if media_id and media_id.startswith(prefix):
            return media_id[len(prefix):].strip() or None
    return None
