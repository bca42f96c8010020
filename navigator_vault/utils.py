"""Path and value helpers shared by the auth flows and the API."""
import base64
import binascii


def resolve_auth_path(auth_path: str, default: str) -> str:
    """Return ``auth_path`` (or ``default`` when empty) without surrounding slashes."""
    return (auth_path or default).strip("/")


def auth_mount_name(path: str) -> str:
    """Normalize an auth path to the mount key used by ``sys/auth``.

    ``auth/ldap`` and ``ldap`` both become ``ldap/``.
    """
    if path.startswith("auth/"):
        path = path[len("auth/"):]
    if not path.endswith("/"):
        path = path + "/"
    return path


def base64_smart_decode(data: str) -> str:
    """Return the decoded value if ``data`` looks like base64, else ``data`` unchanged.

    Plain integers are never decoded, and short strings are only decoded
    when padded, which is not always true for base64 but rules out most
    false positives.
    """
    if not data:
        return data
    try:
        int(data)
        return data
    except ValueError:
        pass
    if len(data) < 5 and not data.endswith("="):
        return data
    try:
        decoded = base64.b64decode(data, validate=True)
        return decoded.decode("utf-8")
    except (binascii.Error, ValueError):
        return data
