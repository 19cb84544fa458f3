from urllib.parse import urlsplit, urlunsplit

_SCHEMES = ("http", "https")


def normalize_target(raw: str, default_scheme: str = "https") -> str:
    """
    Turn user input into a URL the fetcher and the frame can both use.

        example.com          -> https://example.com/
        http://Example.com/a -> http://example.com/a
    """
    text = (raw or "").strip()
    if not text:
        raise ValueError("Target URL is empty.")

    if "://" not in text:
        text = f"{default_scheme}://{text}"

    parts = urlsplit(text)
    scheme = parts.scheme.lower()
    if scheme not in _SCHEMES:
        raise ValueError(f"Unsupported scheme: {parts.scheme!r}")
    if not parts.hostname:
        raise ValueError(f"No host in target URL: {raw!r}")
    parts.port  # raises ValueError on "javascript:alert(1)"-style input

    netloc = parts.netloc.lower() if "@" not in parts.netloc else parts.netloc
    path = parts.path or "/"
    # Fragments never reach the server.
    return urlunsplit((scheme, netloc, path, parts.query, ""))
