"""Tests for job graph validation and staging."""

import pytest

from ghflow.dag import build_dag, check_order, topo_levels, validate
from ghflow.dsl import checkout, job


def _jobs(*specs):
    return [(job_id, job(job_id, checkout(), needs=needs)) for job_id, needs in specs]


def test_build_dag_edges_and_indegree():
    """Edges point from dependency to dependent."""
    adj, indeg = build_dag(_jobs(("build", []), ("release", ["build"]), ("release-pr", ["build"])))

    assert adj["build"] == {"release", "release-pr"}
    assert indeg == {"build": 0, "release": 1, "release-pr": 1}


def test_topo_levels_groups_independent_jobs():
    """Siblings land in the same stage; independent jobs start in stage one."""
    jobs = _jobs(
        ("build", []),
        ("release", ["build"]),
        ("release-pr", ["build"]),
        ("auto-fix-lint-fmt", []),
    )
    adj, indeg = build_dag(jobs)

    assert topo_levels(adj, indeg) == [
        ["auto-fix-lint-fmt", "build"],
        ["release", "release-pr"],
    ]


def test_topo_levels_detects_cycle():
    """A cycle leaves jobs unprocessed and raises."""
    adj, indeg = build_dag(_jobs(("a", ["b"]), ("b", ["a"])))
    with pytest.raises(ValueError, match="cycle"):
        topo_levels(adj, indeg)


def test_check_order_rejects_forward_reference():
    """A job may only need jobs declared before it."""
    with pytest.raises(ValueError, match="not declared before"):
        check_order(_jobs(("test", ["build"]), ("build", [])))


def test_validate_returns_stages():
    """validate() runs every check and returns the stages."""
    assert validate(_jobs(("build", []), ("test", ["build"]))) == [["build"], ["test"]]
