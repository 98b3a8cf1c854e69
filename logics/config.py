import os


DEFAULT_SERVICE_URL = 'http://127.0.0.1:5000'
DEFAULT_TIMEOUT = 30.0
DEFAULT_GEOMETRY = '1050x950'


class AppConfig:
    """
    Runtime settings, read from environment variables.

    ANALYSIS_SERVICE_URL      Base URL of the analysis service.
    ANALYSIS_TIMEOUT          Seconds per request; 0 or empty disables it.
    ANALYSIS_WINDOW_GEOMETRY  Tk geometry string for the main window.
    """

    def __init__(self, service_url=DEFAULT_SERVICE_URL, timeout=DEFAULT_TIMEOUT,
                 geometry=DEFAULT_GEOMETRY):
        self.service_url = service_url.rstrip('/')
        self.timeout = timeout
        self.geometry = geometry

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            service_url=env.get('ANALYSIS_SERVICE_URL') or DEFAULT_SERVICE_URL,
            timeout=_parse_timeout(env.get('ANALYSIS_TIMEOUT')),
            geometry=env.get('ANALYSIS_WINDOW_GEOMETRY') or DEFAULT_GEOMETRY,
        )

    def __repr__(self):
        return (f"AppConfig(service_url={self.service_url!r}, "
                f"timeout={self.timeout!r}, geometry={self.geometry!r})")


def _parse_timeout(raw):
    if raw is None:
        return DEFAULT_TIMEOUT
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"ANALYSIS_TIMEOUT must be a number of seconds, got {raw!r}")
    if value < 0:
        raise ValueError(f"ANALYSIS_TIMEOUT must not be negative, got {raw!r}")
    return value or None
