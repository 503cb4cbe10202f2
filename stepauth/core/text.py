def is_utf8(value: str) -> bool:
    """False for strings holding lone surrogates, which JSON escapes can produce."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
