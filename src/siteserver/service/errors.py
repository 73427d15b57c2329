from http import HTTPStatus


def status_code_for(exc: BaseException, default: int = 500) -> int:
    """
    Status code carried by ``exc``.

    Only an integer ``code`` attribute naming a known HTTP status counts;
    anything else maps to ``default``.
    """
    code = getattr(exc, "code", None)
    if isinstance(code, bool) or not isinstance(code, int):
        return default
    try:
        HTTPStatus(code)
    except ValueError:
        return default
    return code


def status_message(code: int) -> str:
    """``"<code>: <reason phrase>"``, e.g. ``"404: Not Found"``."""
    return f"{code}: {HTTPStatus(code).phrase}"
