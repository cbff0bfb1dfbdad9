"""Data models for URL check results."""

from dataclasses import dataclass

OK = "ok"
HTTP_ERROR = "http"
TRANSPORT_ERROR = "error"


@dataclass(frozen=True)
class CheckOutcome:
    """Classified result of a single URL check.

    Attributes:
        kind: One of "ok", "http" or "error".
        status_code: HTTP status code for "http" outcomes, None otherwise.
        message: Transport error description for "error" outcomes, None otherwise.
    """

    kind: str
    status_code: int | None = None
    message: str | None = None

    @classmethod
    def ok(cls) -> "CheckOutcome":
        return cls(kind=OK)

    @classmethod
    def http_error(cls, status_code: int) -> "CheckOutcome":
        return cls(kind=HTTP_ERROR, status_code=status_code)

    @classmethod
    def transport_error(cls, message: str) -> "CheckOutcome":
        return cls(kind=TRANSPORT_ERROR, message=message)

    @property
    def is_ok(self) -> bool:
        return self.kind == OK

    def render(self) -> str:
        """Render the display string sent to the dashboard.

        Returns:
            "OK", "HTTP <code>" or "ERROR: <message>".
        """
        if self.kind == OK:
            return "OK"
        if self.kind == HTTP_ERROR:
            return f"HTTP {self.status_code}"
        return f"ERROR: {self.message}"


@dataclass(frozen=True)
class URLStatus:
    """Status of one checked URL, produced fresh for every status request.

    Attributes:
        url: Full URL that was checked.
        status: Display string ("OK", "HTTP <code>" or "ERROR: <message>").
    """

    url: str
    status: str

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "status": self.status}
