"""Data models for container handles.

These models describe what a container is created from and what the
engine reports back about it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ContainerState(str, Enum):
    """Lifecycle state of a container handle."""

    UNINITIALIZED = "uninitialized"
    CREATED = "created"
    DELETING = "deleting"  # Remove call in flight
    DELETED = "deleted"


class Protocol(str, Enum):
    """Port communication protocol."""

    TCP = "tcp"
    UDP = "udp"


class PullPolicy(str, Enum):
    """When to pull the image before creating a container."""

    IF_NOT_PRESENT = "if_not_present"
    ALWAYS = "always"


@dataclass(frozen=True)
class PortMapping:
    """A container port published on the host."""

    container_port: int
    host_port: int
    protocol: Protocol = Protocol.TCP

    @property
    def key(self) -> str:
        """Engine port key, e.g. ``5984/tcp``."""
        return f"{self.container_port}/{self.protocol.value}"


@dataclass
class ContainerSpec:
    """Fully resolved request for creating one container."""

    image: str
    name: Optional[str] = None
    ports: List[PortMapping] = field(default_factory=list)
    environment: List[str] = field(default_factory=list)
    command: Union[str, List[str], None] = None
    labels: Dict[str, str] = field(default_factory=dict)


# Parsed port map: (container_port, protocol) -> [(host_ip, host_port), ...]
SourcePort = Tuple[int, Protocol]
HostPort = Tuple[str, int]
PortMap = Dict[SourcePort, List[HostPort]]


class ContainerStatus(BaseModel):
    """Subset of the engine's ``State`` block."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: str = Field(default="unknown", alias="Status")
    running: bool = Field(default=False, alias="Running")
    exit_code: int = Field(default=0, alias="ExitCode")


class ContainerDetails(BaseModel):
    """Engine inspect payload for one container."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="Id")
    name: str = Field(default="", alias="Name")
    image: str = Field(default="", alias="Image")
    created: Optional[str] = Field(default=None, alias="Created")
    state: ContainerStatus = Field(default_factory=ContainerStatus, alias="State")
    network_settings: Dict[str, Any] = Field(default_factory=dict, alias="NetworkSettings")

    @property
    def ports_raw(self) -> Optional[Dict[str, Optional[List[Dict[str, str]]]]]:
        """Raw ``NetworkSettings.Ports`` mapping as reported by the engine."""
        return self.network_settings.get("Ports")

    def ports(self) -> PortMap:
        """Parse the raw port map into ``(port, protocol) -> [(host_ip, host_port)]``.

        Exposed-but-unpublished ports map to an empty list; protocols other
        than tcp/udp are skipped.
        """
        parsed: PortMap = {}
        for key, bindings in (self.ports_raw or {}).items():
            port, _, proto = key.partition("/")
            try:
                source = (int(port), Protocol(proto or "tcp"))
            except ValueError:
                continue
            hosts = parsed.setdefault(source, [])
            for binding in bindings or []:
                host_port = binding.get("HostPort")
                if not host_port:
                    continue
                hosts.append((binding.get("HostIp") or "0.0.0.0", int(host_port)))
        return parsed
