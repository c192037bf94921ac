"""Direct object store backed by kubectl.

Every operation goes to the API server. Commands run in a worker thread so the
event loop stays free while kubectl is in flight.
"""

from __future__ import annotations

import asyncio
import json
import logging
import subprocess
from typing import Any, TypeVar

from neokube.constants.enums import PatchType
from neokube.constants.timeouts import CLUSTER_REQUEST_TIMEOUT, KUBECTL_COMMAND_TIMEOUT
from neokube.controllers.base import ObjectStore, SubResourceWriter
from neokube.errors import AlreadyExistsError, ConflictError, NotFoundError, StoreError
from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.objects import KubeObject
from neokube.models.resources.scheme import Scheme, default_scheme

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=KubeObject)


def _error_from_stderr(stderr: str) -> StoreError:
    """Map kubectl stderr onto the store error hierarchy."""
    text = stderr.lower()
    if "(notfound)" in text or "not found" in text:
        return NotFoundError(stderr)
    if "(alreadyexists)" in text or "already exists" in text:
        return AlreadyExistsError(stderr)
    if "(conflict)" in text or "the object has been modified" in text:
        return ConflictError(stderr)
    return StoreError(stderr or "kubectl command failed")


class KubectlStore(ObjectStore):
    """Object store talking to the API server through kubectl."""

    def __init__(
        self,
        scheme: Scheme | None = None,
        context: str | None = None,
        command_timeout: int = KUBECTL_COMMAND_TIMEOUT,
    ) -> None:
        """Initialize the store.

        Args:
            scheme: Kind registration table. Defaults to the operator scheme.
            context: Optional Kubernetes context name.
            command_timeout: Process-level timeout for each kubectl call.
        """
        self._scheme = scheme or default_scheme()
        self.context = context
        self._command_timeout = command_timeout

    @property
    def scheme(self) -> Scheme:
        return self._scheme

    # =========================================================================
    # Command execution
    # =========================================================================

    def build_command(self, args: tuple[str, ...]) -> list[str]:
        cmd = ["kubectl"]
        if self.context:
            cmd.extend(["--context", self.context])
        cmd.extend(args)
        return cmd

    def _run_kubectl_sync(self, args: tuple[str, ...], stdin: str | None = None) -> str:
        """Run a kubectl command synchronously (thread-safe wrapper target)."""
        try:
            result = subprocess.run(
                self.build_command(args),
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self._command_timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise StoreError(f"kubectl timed out after {self._command_timeout}s") from exc
        except OSError as exc:
            raise StoreError(f"failed to run kubectl: {exc}") from exc
        if result.returncode != 0:
            raise _error_from_stderr((result.stderr or "").strip())
        return result.stdout

    async def _run_kubectl(self, args: tuple[str, ...], stdin: str | None = None) -> str:
        return await asyncio.to_thread(self._run_kubectl_sync, args, stdin)

    def _scope_args(self, namespace: str | None, *, all_namespaces: bool) -> list[str]:
        if namespace:
            return ["-n", namespace]
        if all_namespaces:
            return ["--all-namespaces"]
        return []

    def _decode(self, output: str, obj_type: type[T]) -> T:
        try:
            data = json.loads(output)
        except json.JSONDecodeError as exc:
            raise StoreError(f"invalid JSON from kubectl: {exc}") from exc
        return obj_type.from_dict(data)

    def _decode_for(self, obj: T, output: str) -> T:
        return self._decode(output, type(obj))

    # =========================================================================
    # Reads
    # =========================================================================

    async def get(
        self,
        obj_type: type[T],
        name: str,
        namespace: str | None = None,
        *,
        kind: ResourceKind | None = None,
    ) -> T:
        resolved = self._scheme.kind_for(obj_type, kind)
        args = [
            "get",
            self._scheme.resource_arg(resolved),
            name,
            *self._scope_args(namespace, all_namespaces=False),
            "-o",
            "json",
            f"--request-timeout={CLUSTER_REQUEST_TIMEOUT}",
        ]
        return self._decode(await self._run_kubectl(tuple(args)), obj_type)

    async def list(
        self,
        obj_type: type[T],
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
        kind: ResourceKind | None = None,
    ) -> list[T]:
        resolved = self._scheme.kind_for(obj_type, kind)
        args = [
            "get",
            self._scheme.resource_arg(resolved),
            *self._scope_args(namespace, all_namespaces=True),
        ]
        if label_selector:
            args.extend(["-l", label_selector])
        args.extend(["-o", "json", f"--request-timeout={CLUSTER_REQUEST_TIMEOUT}"])

        output = await self._run_kubectl(tuple(args))
        try:
            data = json.loads(output) if output else {}
        except json.JSONDecodeError as exc:
            raise StoreError(f"invalid JSON from kubectl: {exc}") from exc
        return [obj_type.from_dict(item) for item in data.get("items", [])]

    async def get_raw(self, path: str) -> dict[str, Any]:
        """GET an API server path and decode the JSON response."""
        output = await self._run_kubectl(
            ("get", "--raw", path, f"--request-timeout={CLUSTER_REQUEST_TIMEOUT}")
        )
        try:
            data = json.loads(output)
        except json.JSONDecodeError as exc:
            raise StoreError(f"invalid JSON from kubectl: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"unexpected response from {path}")
        return data

    # =========================================================================
    # Writes
    # =========================================================================

    def _manifest(self, obj: KubeObject) -> str:
        if obj.resource_kind is None:
            obj.set_resource_kind(self._scheme.kind_for(obj))
        return json.dumps(obj.to_dict())

    async def create(self, obj: T) -> T:
        output = await self._run_kubectl(("create", "-f", "-", "-o", "json"), self._manifest(obj))
        return self._decode_for(obj, output)

    async def update(self, obj: T) -> T:
        output = await self._run_kubectl(("replace", "-f", "-", "-o", "json"), self._manifest(obj))
        return self._decode_for(obj, output)

    async def delete(self, obj: KubeObject) -> None:
        kind = self._scheme.kind_for(obj)
        args = [
            "delete",
            self._scheme.resource_arg(kind),
            obj.name,
            *self._scope_args(obj.namespace, all_namespaces=False),
            "--wait=false",
        ]
        await self._run_kubectl(tuple(args))

    async def patch(self, obj: T, patch: Any, patch_type: str = PatchType.MERGE.value) -> T:
        return await self._patch(obj, patch, patch_type, subresource=None)

    async def _patch(
        self, obj: T, patch: Any, patch_type: str, subresource: str | None
    ) -> T:
        kind = self._scheme.kind_for(obj)
        args = [
            "patch",
            self._scheme.resource_arg(kind),
            obj.name,
            *self._scope_args(obj.namespace, all_namespaces=False),
            f"--type={PatchType(patch_type).value}",
            "-p",
            patch if isinstance(patch, str) else json.dumps(patch),
            "-o",
            "json",
        ]
        if subresource:
            args.append(f"--subresource={subresource}")
        return self._decode_for(obj, await self._run_kubectl(tuple(args)))

    async def delete_all_of(
        self,
        obj_type: type[KubeObject],
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
        kind: ResourceKind | None = None,
    ) -> None:
        resolved = self._scheme.kind_for(obj_type, kind)
        args = ["delete", self._scheme.resource_arg(resolved)]
        if label_selector:
            args.extend(["-l", label_selector])
        else:
            args.append("--all")
        args.extend(self._scope_args(namespace, all_namespaces=True))
        args.append("--wait=false")
        await self._run_kubectl(tuple(args))

    def sub_resource(self, name: str) -> SubResourceWriter:
        return KubectlSubResourceWriter(self, name)


class KubectlSubResourceWriter(SubResourceWriter):
    """Writes one sub-resource (e.g. ``status``) through kubectl."""

    def __init__(self, store: KubectlStore, subresource: str) -> None:
        self._store = store
        self.subresource = subresource

    async def update(self, obj: T) -> T:
        output = await self._store._run_kubectl(
            ("replace", f"--subresource={self.subresource}", "-f", "-", "-o", "json"),
            self._store._manifest(obj),
        )
        return self._store._decode_for(obj, output)

    async def patch(self, obj: T, patch: Any, patch_type: str = PatchType.MERGE.value) -> T:
        return await self._store._patch(obj, patch, patch_type, subresource=self.subresource)


__all__ = [
    "KubectlStore",
    "KubectlSubResourceWriter",
]
