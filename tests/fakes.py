"""In-memory engine used by the handle tests."""

import asyncio
import uuid
from typing import Dict, List, Optional, Set, Tuple

from harbourmaster.models import ContainerSpec, EngineError, EngineErrorKind


class FakeEngine:
    """In-memory stand-in for ``EngineAdapter``.

    Records every call in order and can be told to fail a given operation.
    Each call yields to the event loop once so concurrent handles interleave.
    """

    def __init__(self, images: Optional[Set[str]] = None):
        self.images: Set[str] = set(images or [])
        self.containers: Dict[str, dict] = {}
        self.calls: List[Tuple[str, str]] = []
        self._failures: Dict[str, List[EngineError]] = {}

    def fail(
        self,
        operation: str,
        kind: EngineErrorKind = EngineErrorKind.OTHER,
        message: str = None,
        status_code: int = None,
    ) -> None:
        """Make the next call of ``operation`` raise an ``EngineError``."""
        self._failures.setdefault(operation, []).append(
            EngineError(
                message=message or f"{operation} failed",
                kind=kind,
                status_code=status_code,
            )
        )

    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    async def _enter(self, operation: str, target: str) -> None:
        self.calls.append((operation, target))
        await asyncio.sleep(0)
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    def _require(self, container_id: str) -> dict:
        if container_id not in self.containers:
            raise EngineError(
                message=f"No such container: {container_id}",
                kind=EngineErrorKind.NOT_FOUND,
                status_code=404,
            )
        return self.containers[container_id]

    async def image_exists(self, image: str) -> bool:
        await self._enter("image_exists", image)
        return image in self.images

    async def pull(self, image: str) -> None:
        await self._enter("pull", image)
        self.images.add(image)

    async def create_container(self, spec: ContainerSpec) -> str:
        await self._enter("create_container", spec.image)
        if spec.image not in self.images:
            raise EngineError(
                message=f"No such image: {spec.image}",
                kind=EngineErrorKind.NOT_FOUND,
                status_code=404,
            )
        container_id = uuid.uuid4().hex + uuid.uuid4().hex
        self.containers[container_id] = {"spec": spec, "running": False}
        return container_id

    async def start(self, container_id: str) -> None:
        await self._enter("start", container_id)
        self._require(container_id)["running"] = True

    async def inspect(self, container_id: str) -> dict:
        await self._enter("inspect", container_id)
        record = self._require(container_id)
        spec = record["spec"]
        return {
            "Id": container_id,
            "Name": "/" + (spec.name or "quirky_turing"),
            "Image": spec.image,
            "State": {
                "Status": "running" if record["running"] else "created",
                "Running": record["running"],
                "ExitCode": 0,
            },
            "NetworkSettings": {
                "Ports": {
                    mapping.key: [{"HostIp": "0.0.0.0", "HostPort": str(mapping.host_port)}]
                    for mapping in spec.ports
                }
            },
        }

    async def remove(self, container_id: str, force: bool = True) -> None:
        await self._enter("remove", container_id)
        self._require(container_id)
        del self.containers[container_id]


