"""Docker client wrapper with a shared process-wide default."""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

import docker
import structlog
from docker import APIClient, DockerClient

from ...config import settings

logger = structlog.get_logger(__name__)


class Client:
    """Docker engine client.

    Wraps one ``docker.DockerClient``. The SDK client is created on first use,
    so constructing a ``Client`` never touches the engine. Unless you know you
    need a unique client, use ``Client.default()``, which returns a globally
    shared client with one connection pool.
    """

    _default: Optional["Client"] = None
    _default_lock = threading.Lock()

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        max_pool_size: Optional[int] = None,
        use_ssh_client: Optional[bool] = None,
    ):
        """Initialize client configuration without blocking operations."""
        self.base_url = base_url if base_url is not None else settings.docker_base_url
        self.timeout = timeout if timeout is not None else settings.docker_timeout
        self.max_pool_size = (
            max_pool_size if max_pool_size is not None else settings.docker_max_pool_size
        )
        self.use_ssh_client = (
            use_ssh_client if use_ssh_client is not None else settings.docker_use_ssh_client
        )
        self._docker: Optional[DockerClient] = None
        self._executors: Dict[str, ThreadPoolExecutor] = {}
        self._lock = threading.Lock()

    @classmethod
    def default(cls) -> "Client":
        """Get the globally shared client, creating it if needed."""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls()
                logger.debug("Created shared default Docker client")
            return cls._default

    @classmethod
    def reset_default(cls) -> None:
        """Close and forget the shared default client."""
        with cls._default_lock:
            if cls._default is not None:
                cls._default.close()
            cls._default = None

    @classmethod
    def from_docker(cls, docker_client: DockerClient) -> "Client":
        """Wrap an existing ``docker.DockerClient``."""
        client = cls()
        client._docker = docker_client
        return client

    @property
    def docker(self) -> DockerClient:
        """Get the SDK client, creating it on first use.

        Creation may contact the engine to negotiate the API version, so call
        this off the event loop.
        """
        with self._lock:
            if self._docker is None:
                self._docker = self._create_docker_client()
            return self._docker

    @property
    def api(self) -> APIClient:
        """Get the low-level API client."""
        return self.docker.api

    def executor(self, lane: str = "engine") -> ThreadPoolExecutor:
        """Get the worker pool for a lane of engine calls, creating it on first use.

        Each lane has ``max_pool_size`` workers. Image pulls run in their own
        lane so long downloads never hold up create, start, inspect or remove
        calls for other containers.
        """
        with self._lock:
            pool = self._executors.get(lane)
            if pool is None:
                pool = ThreadPoolExecutor(
                    max_workers=self.max_pool_size,
                    thread_name_prefix=f"harbourmaster-{lane}",
                )
                self._executors[lane] = pool
            return pool

    def _create_docker_client(self) -> DockerClient:
        if self.base_url:
            logger.info(f"Connecting to Docker engine at {self.base_url}")
            return docker.DockerClient(
                base_url=self.base_url,
                timeout=self.timeout,
                max_pool_size=self.max_pool_size,
                use_ssh_client=self.use_ssh_client,
            )

        logger.info("Connecting to Docker engine from environment")
        return docker.from_env(
            timeout=self.timeout,
            max_pool_size=self.max_pool_size,
            use_ssh_client=self.use_ssh_client,
        )

    def ping(self) -> bool:
        """Check that the engine answers. Raises SDK errors if it does not."""
        return self.docker.ping()

    def close(self) -> None:
        """Close the connection pool and stop the worker pools."""
        with self._lock:
            docker_client, self._docker = self._docker, None
            executors, self._executors = self._executors, {}
        for pool in executors.values():
            pool.shutdown(wait=False)
        if docker_client is not None:
            try:
                docker_client.close()
            except Exception as e:
                logger.error(f"Error closing Docker client: {e}")

    def __repr__(self) -> str:
        return f"Client(base_url={self.base_url!r})"
