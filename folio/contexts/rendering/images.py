"""
Photo reference resolution.

basics.image may be a data URI, an http(s) URL or a local file path. The HTML
renderer only needs to know whether a reference is usable; the PDF renderer needs
the actual bytes. Anything unresolvable raises ImageLoadError and the caller omits
the photo.

Document content can come from any API caller, so load_image() is restrictive by
default: local files are read only when the caller passes base_dir, and remote
images are fetched only from hosts with public addresses, without following
redirects. Command-line callers working on their own files opt in to both.
"""

import base64
import binascii
import ipaddress
import os
import socket
from pathlib import Path
from typing import Optional, Set
from urllib.parse import unquote_to_bytes, urlparse

import requests
from dotenv import load_dotenv

from folio.exceptions import ImageLoadError

load_dotenv()

IMAGE_FETCH_TIMEOUT_S = float(os.getenv("IMAGE_FETCH_TIMEOUT_S", "5"))

REMOTE_SCHEMES = ("http", "https")


def _short(reference: str) -> str:
    return reference if len(reference) <= 60 else reference[:57] + "..."


def is_supported_image_ref(reference: Optional[str]) -> bool:
    """
    Check whether a photo reference has a form the renderers accept.

    Accepted: data:image/... URIs, http(s) URLs with a host, and scheme-less paths.
    Anything else (javascript:, ftp:, blank) is treated as malformed.
    """
    if not reference or not reference.strip():
        return False
    reference = reference.strip()

    if reference.startswith("data:"):
        return reference[5:].lower().startswith("image/") and "," in reference

    parsed = urlparse(reference)
    if parsed.scheme in REMOTE_SCHEMES:
        return bool(parsed.netloc)
    if parsed.scheme == "file":
        return bool(parsed.path)

    # Windows drive letters parse as one-letter schemes
    return parsed.scheme == "" or len(parsed.scheme) == 1


def _decode_data_uri(reference: str) -> bytes:
    header, _, payload = reference.partition(",")
    try:
        if header.endswith(";base64"):
            return base64.b64decode(payload, validate=True)
        return unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as e:
        raise ImageLoadError(f"Invalid data URI ({e})", _short(reference)) from e


def _host_addresses(host: str) -> Set[str]:
    try:
        infos = socket.getaddrinfo(host, None)
    except (socket.gaierror, UnicodeError) as e:
        raise ImageLoadError(f"Could not resolve image host ({e})", host) from e
    return {info[4][0] for info in infos}


def _check_public_host(reference: str) -> None:
    host = urlparse(reference).hostname
    if not host:
        raise ImageLoadError("Image URL has no host", _short(reference))
    for address in _host_addresses(host):
        # Scoped IPv6 addresses carry a %zone suffix
        if not ipaddress.ip_address(address.split("%", 1)[0]).is_global:
            raise ImageLoadError(f"Image host resolves to a non-public address ({address})", host)


def _fetch_remote(reference: str, timeout: float, allow_private_hosts: bool) -> bytes:
    if not allow_private_hosts:
        _check_public_host(reference)
    try:
        response = requests.get(reference, timeout=timeout, allow_redirects=allow_private_hosts)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ImageLoadError(f"Could not fetch image ({e})", reference) from e
    if response.status_code != 200:
        raise ImageLoadError(f"Could not fetch image (HTTP {response.status_code})", reference)
    return response.content


def _read_local(reference: str, base_dir: Optional[Path]) -> bytes:
    if base_dir is None:
        raise ImageLoadError("Local image files are not allowed here", _short(reference))
    parsed = urlparse(reference)
    path = Path(parsed.path if parsed.scheme == "file" else reference).expanduser()
    if not path.is_absolute():
        path = Path(base_dir) / path
    try:
        return path.read_bytes()
    except OSError as e:
        raise ImageLoadError(f"Could not read image file ({e.strerror})", str(path)) from e


def load_image(
    reference: str,
    timeout: Optional[float] = None,
    base_dir: Optional[Path] = None,
    allow_private_hosts: bool = False,
) -> bytes:
    """
    Resolve a photo reference to raw image bytes.

    Args:
        reference: Data URI, http(s) URL or file path
        timeout: Network timeout in seconds (default: IMAGE_FETCH_TIMEOUT_S)
        base_dir: Directory for relative file paths. Without it, file paths and
                  file: URLs are refused.
        allow_private_hosts: Fetch from loopback/private hosts and follow redirects

    Returns:
        Image bytes (format not checked here)

    Raises:
        ImageLoadError: If the reference is malformed, refused or cannot be resolved
    """
    if not is_supported_image_ref(reference):
        raise ImageLoadError("Unsupported image reference", _short(reference or ""))
    reference = reference.strip()

    if reference.startswith("data:"):
        data = _decode_data_uri(reference)
    elif urlparse(reference).scheme in REMOTE_SCHEMES:
        data = _fetch_remote(
            reference, IMAGE_FETCH_TIMEOUT_S if timeout is None else timeout, allow_private_hosts
        )
    else:
        data = _read_local(reference, base_dir)

    if not data:
        raise ImageLoadError("Image is empty", _short(reference))
    return data
