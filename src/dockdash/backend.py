"""
Container runtime CLI wrapper.

This module drives the external runtime (docker by default) through its
command-line interface and provides methods for:
  - Listing all containers as line-delimited JSON
  - Starting, stopping and deleting a single container

Error Handling:
  - Listing failures (binary missing, non-zero exit) raise GatewayError;
    the dashboard cannot work without a listing, so these are fatal
  - Action failures never raise: they come back as a failed ActionResult
    whose message carries the runtime's own error text
  - The stop issued before a delete is best-effort and its outcome ignored
  - Output that is not valid UTF-8 is decoded with replacement characters

All calls block until the runtime exits; callers run them off the UI loop.
"""

import functools
import logging
import subprocess
from typing import Callable, Dict, List

from .model import ActionResult, ContainerRecord, OpKind, short_id
from .parser import parse_records

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """The runtime could not produce a container listing."""


def runtime_safe(verb: str) -> Callable:
    """
    Decorator for single-container actions that turns spawn failures into a
    failed ActionResult instead of an exception.

    Usage:
        @runtime_safe("start")
        def start_container(self, container_id: str) -> ActionResult:
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, container_id: str) -> ActionResult:
            try:
                return func(self, container_id)
            except (OSError, subprocess.SubprocessError) as e:
                logger.error(f"Runtime call failed in {func.__name__}: {e}", exc_info=True)
                return ActionResult(False, f"Failed to {verb} container {short_id(container_id)}: {e}")
        return wrapper
    return decorator


def _error_text(result: subprocess.CompletedProcess) -> str:
    text = (result.stderr or result.stdout or "").strip()
    return text or f"exit status {result.returncode}"


class RuntimeGateway:
    def __init__(self, binary: str = "docker"):
        self.binary = binary

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.binary, *args]
        logger.debug(f"Running {' '.join(cmd)}")
        return subprocess.run(cmd, check=False, capture_output=True, text=True, errors="replace")

    def list_containers(self) -> List[ContainerRecord]:
        try:
            result = self._run("ps", "-a", "--format", "json")
        except OSError as e:
            logger.error(f"Could not run {self.binary}: {e}")
            raise GatewayError(f"could not run {self.binary}: {e}") from e
        if result.returncode != 0:
            logger.error(f"{self.binary} ps exited with {result.returncode}")
            raise GatewayError(f"{self.binary} ps failed: {_error_text(result)}")
        records = parse_records(result.stdout)
        logger.debug(f"Listed {len(records)} containers")
        return records

    @runtime_safe("start")
    def start_container(self, container_id: str) -> ActionResult:
        result = self._run("start", container_id)
        if result.returncode != 0:
            logger.warning(f"Start of {container_id} failed: {_error_text(result)}")
            return ActionResult(False, f"Failed to start container {short_id(container_id)}: {_error_text(result)}")
        logger.info(f"Container {container_id} started")
        return ActionResult(True, f"Container {short_id(container_id)} started successfully")

    @runtime_safe("stop")
    def stop_container(self, container_id: str) -> ActionResult:
        result = self._run("stop", container_id)
        if result.returncode != 0:
            logger.warning(f"Stop of {container_id} failed: {_error_text(result)}")
            return ActionResult(False, f"Failed to stop container {short_id(container_id)}: {_error_text(result)}")
        logger.info(f"Container {container_id} stopped")
        return ActionResult(True, f"Container {short_id(container_id)} stopped successfully")

    @runtime_safe("delete")
    def remove_container(self, container_id: str) -> ActionResult:
        # May already be stopped
        stopped = self._run("stop", container_id)
        if stopped.returncode != 0:
            logger.debug(f"Ignoring stop failure before removing {container_id}")

        result = self._run("rm", container_id)
        if result.returncode != 0:
            logger.warning(f"Removal of {container_id} failed: {_error_text(result)}")
            return ActionResult(False, f"Failed to delete container {short_id(container_id)}: {_error_text(result)}")
        logger.info(f"Container {container_id} deleted")
        return ActionResult(True, f"Container {short_id(container_id)} deleted successfully")

    def run_action(self, kind: OpKind, container_id: str) -> ActionResult:
        actions: Dict[OpKind, Callable[[str], ActionResult]] = {
            OpKind.START: self.start_container,
            OpKind.STOP: self.stop_container,
            OpKind.DELETE: self.remove_container,
        }
        if kind not in actions:
            raise ValueError(f"Not a container action: {kind}")
        return actions[kind](container_id)
