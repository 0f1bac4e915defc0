# tests/core/test_reconciler.py
"""
Tests for joining declared requests with observed usage.
"""

import pytest

from kubesight.core.reconciler import SORT_KEYS, build_diff, top_diffs
from kubesight.models.resources import ContainerDiff, ContainerResource, ContainerUsage


def _cr(container, pod="p", namespace="default", **values):
    flags = {f"has_{key}": True for key in values}
    return ContainerResource(namespace=namespace, pod=pod, container=container, **values, **flags)


def _usage(container, cpu, mem, pod="p", namespace="default"):
    return ContainerUsage(namespace=namespace, pod=pod, container=container, cpu_usage=cpu, mem_usage=mem)


def test_ratio_of_usage_to_request():
    [diff] = build_diff([_cr("app", cpu_request=200, mem_request=1000)], [_usage("app", 100, 250)])

    assert diff.has_usage is True
    assert diff.cpu_usage == 100
    assert diff.cpu_usage_to_request == pytest.approx(0.5, abs=0.01)
    assert diff.mem_usage_to_request == pytest.approx(0.25)


def test_absent_or_zero_request_has_no_ratio():
    inventory = [_cr("absent", mem_request=100), _cr("zero", cpu_request=0)]
    usage = [_usage("absent", 50, 50), _usage("zero", 50, 50)]

    absent, zero = build_diff(inventory, usage)

    assert absent.cpu_usage_to_request is None
    assert absent.mem_usage_to_request == pytest.approx(0.5)
    assert zero.has_cpu_request is True
    assert zero.cpu_usage_to_request is None


def test_container_without_usage_is_unknown_not_idle():
    [diff] = build_diff([_cr("app", cpu_request=200)], [_usage("other", 10, 10)])

    assert diff.has_usage is False
    assert diff.cpu_usage == 0
    assert diff.cpu_usage_to_request is None


def test_usage_without_declaration_is_ignored():
    diffs = build_diff([], [_usage("orphan", 10, 10)])

    assert diffs == []


def test_diff_carries_requests_and_limits():
    [diff] = build_diff([_cr("app", cpu_request=100, cpu_limit=500, mem_limit=2048)], [])

    assert diff.cpu_limit == 500
    assert diff.has_cpu_limit is True
    assert diff.mem_limit == 2048
    assert diff.has_mem_request is False


def test_diffs_sorted_by_identity():
    inventory = [_cr("b", pod="p2"), _cr("a", pod="p2"), _cr("z", pod="p1", namespace="aaa")]

    diffs = build_diff(inventory, [])

    assert [(d.namespace, d.pod, d.container) for d in diffs] == [
        ("aaa", "p1", "z"),
        ("default", "p2", "a"),
        ("default", "p2", "b"),
    ]


def test_build_diff_does_not_modify_inputs():
    inventory = [_cr("b", cpu_request=1), _cr("a", cpu_request=1)]
    usage = [_usage("a", 1, 1)]
    before = (list(inventory), list(usage))

    build_diff(inventory, usage)

    assert (inventory, usage) == before


def _diff(container, cpu_ratio=None, mem_ratio=None):
    return ContainerDiff(
        namespace="default",
        pod="p",
        container=container,
        cpu_usage_to_request=cpu_ratio,
        mem_usage_to_request=mem_ratio,
    )


def test_top_diffs_ranks_descending_with_unknown_last():
    diffs = [_diff("none"), _diff("low", 0.1), _diff("high", 2.0), _diff("mid", 0.5)]

    ranked = top_diffs(diffs, 0)

    assert [d.container for d in ranked] == ["high", "mid", "low", "none"]


def test_top_diffs_truncates_and_keeps_order_on_ties():
    diffs = [_diff("a", 1.0), _diff("b", 1.0), _diff("c", 3.0)]

    assert [d.container for d in top_diffs(diffs, 2)] == ["c", "a"]


def test_top_diffs_by_memory():
    diffs = [_diff("a", 5.0, 0.1), _diff("b", 0.1, 5.0)]

    assert [d.container for d in top_diffs(diffs, 1, key=SORT_KEYS["memory"])] == ["b"]
