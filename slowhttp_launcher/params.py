from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

DEFAULT_BINARY = "slowhttptest"


class TestMode(str, Enum):
    SLOW_HEADERS = "slow-headers"
    SLOW_BODY = "slow-body"
    RANGE_ATTACK = "range-attack"
    SLOW_READ = "slow-read"

    @property
    def flag(self) -> str:
        return MODE_FLAGS[self]

    @property
    def label(self) -> str:
        return MODE_LABELS[self]


class ProxyMode(str, Enum):
    NONE = "none"
    HTTP = "http"
    PROBE = "probe"

    @property
    def flag(self) -> str | None:
        return PROXY_FLAGS[self]

    @property
    def label(self) -> str:
        return PROXY_LABELS[self]


@dataclass(frozen=True)
class NumericOption:
    """A numeric option that is only passed when it differs from its default."""

    field: str
    flag: str
    default: int


@dataclass(frozen=True)
class TextOption:
    field: str
    flag: str


MODE_FLAGS: Dict[TestMode, str] = {
    TestMode.SLOW_HEADERS: "-H",
    TestMode.SLOW_BODY: "-B",
    TestMode.RANGE_ATTACK: "-R",
    TestMode.SLOW_READ: "-X",
}

MODE_LABELS: Dict[TestMode, str] = {
    TestMode.SLOW_HEADERS: "Slow Headers (Slowloris)  -H",
    TestMode.SLOW_BODY: "Slow Body (R-U-Dead-Yet)  -B",
    TestMode.RANGE_ATTACK: "Range Attack (Apache Killer)  -R",
    TestMode.SLOW_READ: "Slow Read  -X",
}

PROXY_FLAGS: Dict[ProxyMode, str | None] = {
    ProxyMode.NONE: None,
    ProxyMode.HTTP: "-d",
    ProxyMode.PROBE: "-e",
}

PROXY_LABELS: Dict[ProxyMode, str] = {
    ProxyMode.NONE: "None",
    ProxyMode.HTTP: "HTTP proxy (-d)",
    ProxyMode.PROBE: "Probe proxy (-e)",
}

URL_FLAG = "-u"
STATS_FLAG = "-g"
STATS_PREFIX_FLAG = "-o"

CONNECTION_OPTIONS: Tuple[NumericOption, ...] = (
    NumericOption("connections", "-c", 50),
    NumericOption("rate", "-r", 50),
    NumericOption("duration", "-l", 240),
    NumericOption("interval", "-i", 10),
    NumericOption("content_length", "-s", 4096),
    NumericOption("max_random_data_len", "-x", 32),
)

HTTP_OPTIONS: Tuple[TextOption, ...] = (
    TextOption("verb", "-t"),
    TextOption("content_type", "-f"),
    TextOption("accept", "-m"),
    TextOption("cookie", "-j"),
    TextOption("custom_header", "-1"),
)

PROBE_INTERVAL = NumericOption("probe_interval", "-p", 5)
VERBOSITY = NumericOption("verbosity", "-v", 1)

# Options the tool only understands in one test mode.
MODE_OPTIONS: Dict[TestMode, Tuple[NumericOption, ...]] = {
    TestMode.SLOW_HEADERS: (),
    TestMode.SLOW_BODY: (),
    TestMode.RANGE_ATTACK: (
        NumericOption("range_start", "-a", 5),
        NumericOption("range_limit", "-b", 2000),
    ),
    TestMode.SLOW_READ: (
        NumericOption("pipeline_factor", "-k", 1),
        NumericOption("read_interval", "-n", 1),
        NumericOption("window_lower", "-w", 1),
        NumericOption("window_upper", "-y", 512),
        NumericOption("read_len", "-z", 5),
    ),
}


@dataclass
class ParameterSet:
    """Every value a user can configure for one run, kept in textual form.

    Numeric fields stay strings so half-typed input survives until launch;
    the argument builder decides what is usable.
    """

    url: str = "http://localhost/"
    test_mode: TestMode = TestMode.SLOW_HEADERS

    connections: str = "50"
    rate: str = "50"
    duration: str = "240"
    interval: str = "10"
    content_length: str = "4096"
    max_random_data_len: str = "32"

    verb: str = ""
    content_type: str = ""
    accept: str = ""
    cookie: str = ""
    custom_header: str = ""

    proxy_mode: ProxyMode = ProxyMode.NONE
    proxy_addr: str = ""
    probe_interval: str = "5"

    generate_stats: bool = False
    stats_file_prefix: str = "stats"
    verbosity: str = "1"

    range_start: str = "5"
    range_limit: str = "2000"

    pipeline_factor: str = "1"
    read_interval: str = "1"
    window_lower: str = "1"
    window_upper: str = "512"
    read_len: str = "5"

    custom_binary_path: str = ""

    def update(self, values: Mapping[str, Any]) -> "ParameterSet":
        """Apply ``values`` in place, coercing each one to its field's type."""

        known = {f.name for f in fields(self)}
        for key, value in values.items():
            if key not in known:
                raise ValueError(f"Unknown parameter: {key}")
            setattr(self, key, _coerce(key, value))
        return self

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["test_mode"] = self.test_mode.value
        d["proxy_mode"] = self.proxy_mode.value
        return d

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "ParameterSet":
        return cls().update(values)


def parse_test_mode(value: Any) -> TestMode:
    return _parse_enum(TestMode, value, "test mode")


def parse_proxy_mode(value: Any) -> ProxyMode:
    return _parse_enum(ProxyMode, value, "proxy mode")


def _parse_enum(enum_cls, value: Any, what: str):
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    try:
        return enum_cls(text.lower())
    except ValueError:
        pass
    try:
        return enum_cls[text.upper().replace("-", "_")]
    except KeyError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Unknown {what}: {value!r} (expected one of: {choices})") from None


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _coerce(key: str, value: Any) -> Any:
    if key == "test_mode":
        return parse_test_mode(value)
    if key == "proxy_mode":
        return parse_proxy_mode(value)
    if key == "generate_stats":
        return _parse_bool(value)
    if value is None:
        return ""
    return str(value)
