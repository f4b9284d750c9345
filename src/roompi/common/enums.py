from enum import Enum


class StatusTone(Enum):
    """Severity bucket derived from a service's category tag.

    The server tags every monitored service with a CSS-style class such as
    ``status-ok`` or ``status-error``. Clients only use the tag to pick a
    display colour, so unknown tags collapse into UNKNOWN.
    """

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def from_css_class(cls, css_class: str) -> "StatusTone":
        """Map a server category tag to a tone.

        Args:
            css_class: Raw tag, e.g. "status-ok"

        Returns:
            Matching StatusTone (UNKNOWN for unrecognised tags)
        """
        return _CSS_CLASS_TONES.get(css_class.strip().lower(), cls.UNKNOWN)


class ShellyCommand(Enum):
    """Commands understood by the Shelly control endpoint."""

    TURN_ON = "on"
    TURN_OFF = "off"
    TOGGLE = "toggle"


_CSS_CLASS_TONES = {
    "status-ok": StatusTone.OK,
    "status-active": StatusTone.OK,
    "status-warning": StatusTone.WARNING,
    "status-error": StatusTone.ERROR,
    "status-failed": StatusTone.ERROR,
    "status-inactive": StatusTone.ERROR,
}
