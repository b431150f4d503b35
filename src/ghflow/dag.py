# dag.py
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Set, Tuple

from .model import Job


def build_dag(jobs: Iterable[Tuple[str, Job]]) -> Tuple[Dict[str, Set[str]], Dict[str, int]]:
    """
    Build a DAG from (job_id, Job) pairs.

    Requires:
      - job ids unique
      - job.needs: job ids that must finish BEFORE this job
    """
    jobs = list(jobs)
    ids = [job_id for job_id, _ in jobs]
    if len(set(ids)) != len(ids):
        dupes = sorted({n for n in ids if ids.count(n) > 1})
        raise ValueError(f"Duplicate job ids found: {dupes}")

    id_set = set(ids)
    adj: Dict[str, Set[str]] = {n: set() for n in id_set}
    indeg: Dict[str, int] = {n: 0 for n in id_set}

    for job_id, job in jobs:
        for need in job.needs:
            if need not in id_set:
                raise ValueError(
                    f"Job '{job_id}' needs missing job '{need}'. "
                    f"Known jobs: {sorted(id_set)}"
                )
            # Edge need -> job_id (need must run before job)
            if job_id not in adj[need]:
                adj[need].add(job_id)
                indeg[job_id] += 1

    return adj, indeg


def topo_levels(adj: Dict[str, Set[str]], indeg: Dict[str, int]) -> List[List[str]]:
    """
    Convert DAG into topological "levels" (stages).
    Jobs in one stage have no edges between them.
    """
    indeg = dict(indeg)  # copy (we mutate it)
    q = deque(sorted([n for n, d in indeg.items() if d == 0]))

    levels: List[List[str]] = []
    processed = 0

    while q:
        level_size = len(q)
        level: List[str] = []

        for _ in range(level_size):
            node = q.popleft()
            level.append(node)
            processed += 1

            for child in sorted(adj.get(node, set())):
                indeg[child] -= 1
                if indeg[child] == 0:
                    q.append(child)

        levels.append(level)

    if processed != len(indeg):
        remaining = sorted([n for n, d in indeg.items() if d > 0])
        raise ValueError(f"Job graph has a cycle. Stuck jobs: {remaining}")

    return levels


def check_order(jobs: Iterable[Tuple[str, Job]]) -> None:
    """Every dependency must be declared before the job that needs it."""
    seen: Set[str] = set()
    for job_id, job in jobs:
        for need in job.needs:
            if need not in seen:
                raise ValueError(
                    f"Job '{job_id}' needs '{need}', which is not declared before it"
                )
        seen.add(job_id)


def validate(jobs: Iterable[Tuple[str, Job]]) -> List[List[str]]:
    """Run all graph checks. Returns the stages on success."""
    jobs = list(jobs)
    adj, indeg = build_dag(jobs)
    levels = topo_levels(adj, indeg)
    check_order(jobs)
    return levels
