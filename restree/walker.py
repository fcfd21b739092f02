"""Tree walker.

A descriptor tree is a mapping whose values are either containers (mappings
without a ``src`` key) or job nodes (mappings with ``src``, or `JobNode`
instances). One synchronous depth-first pass collects the jobs in key order and
builds the shape plan the results are written into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import ValidationError

from .errors import InvalidNodeError
from .models import JobNode
from .utils import format_path

Path = Tuple[Any, ...]


@dataclass
class Job:
    """A discovered job node and where its result goes."""

    path: Path
    node: JobNode

    @property
    def src(self) -> Any:
        return self.node.src


@dataclass
class Plan:
    """Jobs in traversal order plus the result skeleton."""

    jobs: List[Job] = field(default_factory=list)
    shape: Dict[Any, Any] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.jobs)

    def assign(self, path: Path, value: Any) -> None:
        """Write a job result into the shape at ``path``."""
        container = self.shape
        for key in path[:-1]:
            container = container[key]
        container[path[-1]] = value


def is_job_node(value: Any) -> bool:
    return isinstance(value, JobNode) or (isinstance(value, Mapping) and "src" in value)


def walk(tree: Any) -> Plan:
    """Collect the jobs of ``tree``; raise `InvalidNodeError` on a bad node."""
    if isinstance(tree, (list, tuple)):
        raise InvalidNodeError(_bad_item(tree, ()))
    if not isinstance(tree, Mapping) or is_job_node(tree):
        raise InvalidNodeError(format_path(()))
    plan = Plan()
    _visit(tree, (), plan.shape, plan)
    return plan


def _visit(tree: Mapping, prefix: Path, shape: Dict[Any, Any], plan: Plan) -> None:
    for key, value in tree.items():
        path = prefix + (key,)
        if is_job_node(value):
            plan.jobs.append(Job(path=path, node=_as_job_node(value, path)))
            shape[key] = None
        elif isinstance(value, Mapping):
            shape[key] = {}
            _visit(value, path, shape[key], plan)
        elif isinstance(value, (list, tuple)):
            raise InvalidNodeError(_bad_item(value, path))
        else:
            raise InvalidNodeError(format_path(path))


def _bad_item(items: Any, path: Path) -> str:
    """Locate the offending entry of a sequence met where a node was expected.

    Sequences are never valid nodes. The error names the index of the first
    entry that is not a mapping, or the sequence itself when every entry is one.
    """
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            return str(index)
    return format_path(path)


def _as_job_node(value: Any, path: Path) -> JobNode:
    if isinstance(value, JobNode):
        return value
    try:
        return JobNode.model_validate(dict(value))
    except ValidationError as exc:
        raise InvalidNodeError(format_path(path)) from exc
