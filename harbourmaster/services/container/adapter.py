"""Async engine adapter over the Docker SDK.

Every SDK call is blocking, so each one runs in a worker pool owned by the
client. Lifecycle calls and image pulls use separate pools of
``docker_max_pool_size`` workers, so slow pulls never queue ahead of another
container's create, start, inspect or remove.
"""

import asyncio
import functools
from typing import Any, Callable, Dict, List, Optional

import structlog

from ...models.container import ContainerSpec
from ...models.errors import EngineError, EngineErrorKind
from ...utils.error_handlers import handle_docker_error
from .client import Client

logger = structlog.get_logger(__name__)

# Pull progress streams report failures in-band instead of via HTTP status
PULL_MESSAGE_KIND_MAPPING = (
    ("unauthorized", EngineErrorKind.UNAUTHORIZED),
    ("denied", EngineErrorKind.UNAUTHORIZED),
    ("not found", EngineErrorKind.NOT_FOUND),
    ("manifest unknown", EngineErrorKind.NOT_FOUND),
)


def classify_pull_message(message: str) -> EngineErrorKind:
    """Map an in-band pull error message to an error kind."""
    lowered = message.lower()
    for needle, kind in PULL_MESSAGE_KIND_MAPPING:
        if needle in lowered:
            return kind
    return EngineErrorKind.OTHER


class EngineAdapter:
    """Primitive container engine operations as awaitable calls.

    All methods raise ``EngineError`` on failure. No method retries.
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client or Client.default()

    @property
    def client(self) -> Client:
        """Get the engine client."""
        return self._client

    async def _call(
        self, operation: str, func: Callable[..., Any], *args, lane: str = "engine"
    ) -> Any:
        """Run a blocking SDK call in the client's worker pool and translate its errors."""
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(
                self._client.executor(lane), functools.partial(func, *args)
            )
        except EngineError:
            raise
        except Exception as e:
            error = handle_docker_error(e, operation)
            logger.debug(
                "Engine call failed",
                operation=operation,
                kind=error.kind.value,
                status_code=error.status_code,
            )
            raise error from e

    async def image_exists(self, image: str) -> bool:
        """Check whether the engine already has the image."""
        try:
            await self._call("image inspect", lambda: self._client.api.inspect_image(image))
            return True
        except EngineError as e:
            if e.kind == EngineErrorKind.NOT_FOUND:
                return False
            raise

    async def pull(self, image: str) -> None:
        """Pull an image, blocking until the engine has finished."""
        logger.info(f"Pulling image: {image}")
        await self._call("image pull", self._pull_blocking, image, lane="pull")
        logger.info(f"Pulled image: {image}")

    def _pull_blocking(self, image: str) -> None:
        for chunk in self._client.api.pull(image, stream=True, decode=True):
            if isinstance(chunk, dict) and chunk.get("error"):
                message = chunk.get("errorDetail", {}).get("message") or chunk["error"]
                raise EngineError(
                    message=f"Docker API error during image pull: {message}",
                    kind=classify_pull_message(message),
                )
            logger.debug("Pull progress", image=image, progress=chunk)

    async def create_container(self, spec: ContainerSpec) -> str:
        """Create (but do not start) a container. Returns the engine-assigned ID."""
        container_id = await self._call("container create", self._create_blocking, spec)
        logger.info(f"Created container {container_id[:12]} from image {spec.image}")
        return container_id

    def _create_blocking(self, spec: ContainerSpec) -> str:
        api = self._client.api

        port_bindings: Dict[str, List[int]] = {}
        for mapping in spec.ports:
            port_bindings.setdefault(mapping.key, []).append(mapping.host_port)
        exposed = [(m.container_port, m.protocol.value) for m in spec.ports]

        host_config = api.create_host_config(port_bindings=port_bindings or None)
        response = api.create_container(
            image=spec.image,
            name=spec.name,
            command=spec.command,
            environment=spec.environment or None,
            ports=exposed or None,
            labels=spec.labels or None,
            host_config=host_config,
            detach=True,
        )
        if not isinstance(response, dict) or not response.get("Id"):
            raise EngineError(
                message=f"Docker API error during container create: no ID in {response!r}",
                kind=EngineErrorKind.OTHER,
            )
        container_id = response["Id"]
        for warning in response.get("Warnings") or []:
            logger.warning(f"Engine warning for container {container_id[:12]}: {warning}")
        return container_id

    async def start(self, container_id: str) -> None:
        """Start a created container."""
        await self._call("container start", lambda: self._client.api.start(container_id))
        logger.info(f"Started container {container_id[:12]}")

    async def inspect(self, container_id: str) -> Dict[str, Any]:
        """Get the engine's inspect payload for a container."""
        return await self._call(
            "container inspect", lambda: self._client.api.inspect_container(container_id)
        )

    async def remove(self, container_id: str, force: bool = True) -> None:
        """Remove a container; ``force`` stops it first if it is running."""
        await self._call(
            "container remove",
            lambda: self._client.api.remove_container(container_id, force=force),
        )
        logger.info(f"Removed container {container_id[:12]}")
