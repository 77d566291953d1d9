from typing import Literal, Optional

from pydantic import BaseModel, ValidationInfo, field_validator

DEFAULT_PORTS = {"http": 80, "https": 443}


def classify_protocol(protocol: str) -> Literal["http", "https"]:
    """Map a free-form protocol hint ("ssl/http", "https-alt", "tcp") to a scheme."""
    if protocol.startswith("ssl") or "https" in protocol:
        return "https"
    return "http"


class Target(BaseModel):
    """The origin a capture was requested for.

    ``port`` is always the empty string when it is the scheme default, which is
    also how browsers report it back through ``document.location.port``.
    """

    protocol: Literal["http", "https"]
    hostname: str
    port: str = ""

    @field_validator("hostname")
    @classmethod
    def normalize_hostname(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("hostname must not be empty")
        # IPv6 literals come back bracketed from document.location.hostname
        if ":" in v and not v.startswith("["):
            v = f"[{v}]"
        return v

    @field_validator("port", mode="before")
    @classmethod
    def normalize_port(cls, v: Optional[str], info: ValidationInfo) -> str:
        if v is None:
            return ""
        v = str(v).strip()
        if not v:
            return ""
        if not v.isdigit():
            raise ValueError(f"port must be digits, got {v!r}")

        port = int(v)
        if not 0 < port < 65536:
            raise ValueError(f"port out of range: {port}")
        if port == DEFAULT_PORTS.get(info.data.get("protocol")):
            return ""
        return str(port)

    @classmethod
    def from_args(cls, protocol: str, host: str, port: Optional[str] = None):
        return cls(protocol=classify_protocol(protocol), hostname=host, port=port)

    @property
    def url(self) -> str:
        port = f":{self.port}" if self.port else ""
        return f"{self.protocol}://{self.hostname}{port}"

    @property
    def origin(self) -> tuple[str, str, str]:
        return (self.protocol, self.hostname, self.port)

    def matches(self, location: "ResolvedLocation") -> bool:
        """Check the resolved location is exactly the origin that was requested."""
        return self.origin == location.origin


class ResolvedLocation(BaseModel):
    """Where the page actually ended up after navigation."""

    protocol: str
    hostname: str
    port: str = ""
    href: str = ""

    @field_validator("protocol")
    @classmethod
    def strip_colon(cls, v: str) -> str:
        return v.rstrip(":")

    @property
    def origin(self) -> tuple[str, str, str]:
        return (self.protocol, self.hostname, self.port)

    def describe_mismatch(self, target: Target) -> str:
        lines = [f"location mismatch: requested {target.url}, resolved {self.href!r}"]
        for field, expected, actual in zip(
            ("protocol", "hostname", "port"), target.origin, self.origin
        ):
            marker = "!=" if expected != actual else "=="
            lines.append(f"  {field}: {expected!r} {marker} {actual!r}")
        return "\n".join(lines)


class CaptureConfig(BaseModel):
    """A validated invocation of the capture tool."""

    directory: str
    target: Target

    @classmethod
    def from_args(
        cls, directory: str, protocol: str, host: str, port: Optional[str] = None
    ):
        return cls(directory=directory, target=Target.from_args(protocol, host, port))


class StoredArtifact(BaseModel):
    hash: str
    path: str


class CaptureReport(BaseModel):
    url: str
    hash: str
    file: str
