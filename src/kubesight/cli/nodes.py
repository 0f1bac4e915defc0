# src/kubesight/cli/nodes.py
"""
Implements the `nodes` command: kubelet-reported system details per node,
or a health view derived from node conditions.
"""

import logging
from typing import Optional

import typer
from typing_extensions import Annotated

from .utils import (
    ContextOption,
    KubeconfigOption,
    NoColorOption,
    OutputOption,
    OutputPathOption,
    emit,
    resolve_settings,
    run_analysis,
)

logger = logging.getLogger(__name__)

app = typer.Typer(help="Show node system details and health.", add_completion=False)


@app.callback(invoke_without_command=True)
def nodes(
    ctx: typer.Context,
    node: Annotated[Optional[str], typer.Option("--node", help="Show a single node. Default: all nodes.")] = None,
    health: Annotated[bool, typer.Option("--health", help="Show only health status and issues.")] = False,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
):
    """
    OS, kernel, architecture, kubelet, container runtime, capacity and GPUs
    per node, with a HEALTHY/WARNING/CRITICAL verdict from node conditions.
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = resolve_settings(output=output, context=context)
    infos = run_analysis(settings, kubeconfig, lambda p: p.run_node_info(node_name=node))

    if health:
        emit(infos, settings, output_path, lambda r: r.report_node_health(infos), no_color)
    else:
        emit(infos, settings, output_path, lambda r: r.report_node_info(infos), no_color)
