# src/kubesight/cli/resources.py
"""
Implements the `resources` command group: a broad summary, request/limit
inventory, raw usage, usage versus requests, and per-pod totals.
"""

import logging

import typer
from typing_extensions import Annotated

from ..core.reconciler import SORT_KEYS, top_diffs
from .utils import (
    ContextOption,
    KubeconfigOption,
    NamespaceOption,
    NoColorOption,
    OutputOption,
    OutputPathOption,
    TopOption,
    emit,
    fail,
    resolve_settings,
    run_analysis,
)

logger = logging.getLogger(__name__)

app = typer.Typer(help="Inspect declared requests and limits against usage.", add_completion=False)


@app.callback(invoke_without_command=True)
def resources(
    ctx: typer.Context,
    namespace: NamespaceOption = None,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    top: TopOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
):
    """
    Broad summary: cluster capacity against declared totals, per-pod totals,
    inventory counts, and whether the metrics API is available.
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = resolve_settings(output=output, namespace=namespace, context=context, top=top)
    summary = run_analysis(settings, kubeconfig, lambda p: p.run_resources_summary())
    emit(summary, settings, output_path, lambda r: r.report_resources_summary(summary, top=settings.top), no_color)


@app.command()
def inventory(
    namespace: NamespaceOption = None,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    top: TopOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
):
    """
    Per-namespace request/limit totals, containers missing requests or
    limits, and LimitRange/ResourceQuota policies.
    """
    settings = resolve_settings(output=output, namespace=namespace, context=context, top=top)
    result = run_analysis(settings, kubeconfig, lambda p: p.run_inventory())
    emit(result, settings, output_path, lambda r: r.report_inventory(result, top=settings.top), no_color)


@app.command()
def usage(
    namespace: NamespaceOption = None,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    top: TopOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
):
    """
    Observed CPU/memory usage per container from metrics.k8s.io.

    Fails when metrics-server is not installed.
    """
    settings = resolve_settings(output=output, namespace=namespace, context=context, top=top)
    usages = run_analysis(settings, kubeconfig, lambda p: p.run_usage())
    if settings.top:
        usages = usages[: settings.top]
    emit(usages, settings, output_path, lambda r: r.report_usage(usages), no_color)


@app.command()
def diff(
    namespace: NamespaceOption = None,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    top: TopOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
    sort_by: Annotated[
        str, typer.Option("--sort-by", help="Rank by 'cpu' or 'memory' usage-to-request ratio.", case_sensitive=False)
    ] = "cpu",
):
    """
    Compare observed usage (metrics.k8s.io) with declared requests per container.

    Containers with no usage sample show '-' instead of a ratio.
    """
    sort_by = sort_by.lower()
    if sort_by not in SORT_KEYS:
        raise fail(f"Invalid --sort-by '{sort_by}'. Must be one of: {', '.join(SORT_KEYS)}.")

    settings = resolve_settings(output=output, namespace=namespace, context=context, top=top)
    diffs = run_analysis(settings, kubeconfig, lambda p: p.run_diff())
    ranked = top_diffs(diffs, settings.top, key=SORT_KEYS[sort_by])
    emit(ranked, settings, output_path, lambda r: r.report_diff(ranked, sort_by=sort_by), no_color)


@app.command()
def pods(
    namespace: NamespaceOption = None,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    top: TopOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
    usage: Annotated[bool, typer.Option("--usage/--no-usage", help="Include usage from metrics.k8s.io.")] = True,
):
    """
    Per-pod request/limit totals with usage when metrics are available.
    """
    settings = resolve_settings(output=output, namespace=namespace, context=context, top=top)
    summaries = run_analysis(settings, kubeconfig, lambda p: p.run_pod_summaries(include_usage=usage))
    emit(summaries, settings, output_path, lambda r: r.report_pod_summaries(summaries, top=settings.top), no_color)
