# src/kubesight/cli/capacity.py
"""
Implements the `capacity` command: per-node capacity and allocatable values,
or a cluster-wide summary against declared requests and limits.
"""

import logging

import typer
from typing_extensions import Annotated

from .utils import (
    ContextOption,
    KubeconfigOption,
    NamespaceOption,
    NoColorOption,
    OutputOption,
    OutputPathOption,
    emit,
    resolve_settings,
    run_analysis,
)

logger = logging.getLogger(__name__)

app = typer.Typer(help="Show node capacity and allocatable resources.", add_completion=False)


@app.callback(invoke_without_command=True)
def capacity(
    ctx: typer.Context,
    summary: Annotated[
        bool, typer.Option("--summary", help="Show cluster totals with requested and limited resources.")
    ] = False,
    namespace: NamespaceOption = None,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
):
    """
    Show capacity and allocatable CPU/memory per node.

    With --summary, shows cluster totals alongside the sum of declared
    requests and limits (init containers included).
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = resolve_settings(output=output, namespace=namespace, context=context)
    nodes, cluster_summary = run_analysis(settings, kubeconfig, lambda p: p.run_capacity())

    if summary:
        emit(cluster_summary, settings, output_path, lambda r: r.report_summary(cluster_summary), no_color)
    else:
        emit(nodes, settings, output_path, lambda r: r.report_capacity(nodes), no_color)
