"""Container handle: the local owner of one remote container's lifecycle."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Dict, List, Optional, TypeVar

import structlog
from pydantic import ValidationError

from ...models.container import (
    ContainerDetails,
    ContainerSpec,
    ContainerState,
    PortMap,
    PullPolicy,
)
from ...models.errors import (
    ContainerError,
    ContainerNotFoundError,
    EngineError,
    ErrorType,
    InvalidStateError,
    StartFailedError,
)
from ...utils.error_handlers import translate_engine_error
from .adapter import EngineAdapter

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Container:
    """Abstraction of a running Docker container.

    Use ``Container.create(image)`` for sensible defaults, or
    ``Container.builder(image)`` for advanced options. Both return a handle
    only after the container has been pulled (if needed), created, started
    and inspected.

    Lifecycle:
    1. create: UNINITIALIZED -> CREATED
    2. delete(): CREATED -> DELETED (forced remove, ``docker rm -f``)

    Containers are NOT removed when the handle is garbage collected. Call
    ``delete()``, or use the handle as an async context manager:

        async with await Container.create("alpine") as container:
            ...
    """

    def __init__(self, image: str, adapter: EngineAdapter):
        self._image = image
        self._adapter = adapter
        self._id: Optional[str] = None
        self._details: Optional[ContainerDetails] = None
        self._state = ContainerState.UNINITIALIZED

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    async def create(cls, image: str, client=None) -> "Container":
        """Create and start a container from ``image`` with default options."""
        return await cls.builder(image).client(client).build()

    @classmethod
    async def pull(cls, image: str, client=None) -> "Container":
        """Pull ``image`` unconditionally, then create and start a container."""
        return await cls.builder(image).client(client).pull_on_build().build()

    @classmethod
    def builder(cls, image: str):
        """Get a ``ContainerBuilder`` for fine control over construction."""
        from .builder import ContainerBuilder

        return ContainerBuilder(image)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> ContainerState:
        """Current lifecycle state."""
        return self._state

    @property
    def image(self) -> str:
        """Image reference the container was created from."""
        return self._image

    @property
    def id(self) -> str:
        """Engine ID of the running container."""
        self._require_created("read the id of")
        return self._id

    @property
    def short_id(self) -> str:
        """First 12 characters of the engine ID."""
        return self.id[:12]

    @property
    def name(self) -> str:
        """Container name as reported by the engine."""
        self._require_created("read the name of")
        return self._details.name.lstrip("/")

    @property
    def details(self) -> ContainerDetails:
        """Details from the most recent inspect."""
        self._require_created("read the details of")
        return self._details

    def ports(self) -> PortMap:
        """Published ports as ``{(port, protocol): [(host_ip, host_port), ...]}``."""
        return self.details.ports()

    def ports_raw(self) -> Optional[Dict[str, Optional[List[Dict[str, str]]]]]:
        """The engine's raw ``NetworkSettings.Ports`` mapping."""
        return self.details.ports_raw

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def inspect(self) -> ContainerDetails:
        """Refresh details from the engine.

        If the engine no longer knows the container, the handle becomes
        DELETED and ``ContainerNotFoundError`` is raised.
        """
        container_id = self.id
        try:
            payload = await self._adapter.inspect(container_id)
        except EngineError as e:
            error = translate_engine_error(e, "inspect", container_id=container_id)
            if isinstance(error, ContainerNotFoundError):
                self._mark_deleted()
            raise error from e
        try:
            self._details = ContainerDetails.model_validate(payload)
        except ValidationError as e:
            raise ContainerError(
                message=f"Unreadable inspect payload for container {container_id[:12]}: {e}",
                error_type=ErrorType.ENGINE_ERROR,
                container_id=container_id,
            ) from e
        return self._details

    async def delete(self) -> None:
        """Delete the running container.

        This is equivalent to ``docker rm -f [container]``. On success the
        handle becomes DELETED and every later operation raises
        ``InvalidStateError``. If the container was already removed out of
        band this raises ``ContainerNotFoundError`` (and the handle is still
        DELETED); any other failure leaves the handle CREATED so the call can
        be repeated.
        """
        self._require_created("delete")
        container_id = self._id
        self._state = ContainerState.DELETING
        try:
            await self._adapter.remove(container_id, force=True)
        except EngineError as e:
            error = translate_engine_error(e, "delete", container_id=container_id)
            if isinstance(error, ContainerNotFoundError):
                self._mark_deleted()
            logger.warning(
                f"Failed to delete container {container_id[:12]}",
                error_type=error.error_type.value,
            )
            raise error from e
        else:
            self._mark_deleted()
        finally:
            # Removal not confirmed
            if self._state == ContainerState.DELETING:
                self._state = ContainerState.CREATED
        logger.info(f"Deleted container {container_id[:12]}")

    async def _provision(self, spec: ContainerSpec, pull_policy: PullPolicy) -> None:
        """Pull (if needed), create, start and inspect. Steps are strictly ordered."""
        if self._state != ContainerState.UNINITIALIZED:
            raise InvalidStateError("create", self._state)

        image = spec.image
        if pull_policy == PullPolicy.ALWAYS:
            await self._step("pull", self._adapter.pull(image), image=image)
        elif not await self._step("pull", self._adapter.image_exists(image), image=image):
            await self._step("pull", self._adapter.pull(image), image=image)

        container_id = await self._step("create", self._adapter.create_container(spec), image=image)

        async with self._removed_on_failure(container_id):
            await self._step("start", self._adapter.start(container_id), container_id=container_id)
            payload = await self._step(
                "start", self._adapter.inspect(container_id), container_id=container_id
            )
            try:
                details = ContainerDetails.model_validate(payload)
            except ValidationError as e:
                raise StartFailedError(
                    message=f"Unreadable inspect payload for container {container_id[:12]}: {e}",
                    container_id=container_id,
                ) from e

        self._id = container_id
        self._details = details
        self._state = ContainerState.CREATED
        logger.info(f"Container {container_id[:12]} running", image=image)

    async def _step(
        self,
        operation: str,
        call: Awaitable[T],
        image: str = None,
        container_id: str = None,
    ) -> T:
        try:
            return await call
        except EngineError as e:
            raise translate_engine_error(
                e, operation, image=image or self._image, container_id=container_id
            ) from e

    @asynccontextmanager
    async def _removed_on_failure(self, container_id: str) -> AsyncIterator[None]:
        """Remove a half-created container if provisioning fails inside the block.

        The removal is attempted once. Its failure is logged and attached to
        the original error, which is re-raised unchanged.
        """
        try:
            yield
        except ContainerError as error:
            logger.warning(
                f"Provisioning failed, removing container {container_id[:12]}",
                error_type=error.error_type.value,
            )
            try:
                await self._adapter.remove(container_id, force=True)
            except EngineError as cleanup_error:
                logger.error(
                    f"Failed to remove partially created container {container_id[:12]}",
                    cleanup_error=cleanup_error.message,
                )
                error.attach_cleanup_error(cleanup_error)
            raise

    def _require_created(self, operation: str) -> None:
        if self._state != ContainerState.CREATED:
            raise InvalidStateError(operation, self._state)

    def _mark_deleted(self) -> None:
        self._id = None
        self._details = None
        self._state = ContainerState.DELETED

    # ------------------------------------------------------------------
    # Scoped release
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "Container":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if self._state != ContainerState.CREATED:
            return False
        if exc is None:
            await self.delete()
            return False
        try:
            await self.delete()
        except ContainerError as delete_error:
            logger.error(
                "Failed to delete container while unwinding",
                error=delete_error.message,
            )
        return False

    def __repr__(self) -> str:
        short = self._id[:12] if self._id else None
        return f"Container(image={self._image!r}, id={short!r}, state={self._state.value!r})"
