# src/kubesight/cli/pressure.py
"""
Implements the `pressure` command.
"""

import logging
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.config import validate_thresholds
from ..core.exceptions import ConfigurationError
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

app = typer.Typer(help="Classify cluster, node and namespace resource pressure.", add_completion=False)


@app.callback(invoke_without_command=True)
def pressure(
    ctx: typer.Context,
    namespace: NamespaceOption = None,
    output: OutputOption = None,
    output_path: OutputPathOption = None,
    top: TopOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
    no_color: NoColorOption = False,
    low: Annotated[Optional[float], typer.Option("--low", help="Override the 'low' threshold (%).")] = None,
    medium: Annotated[Optional[float], typer.Option("--medium", help="Override the 'medium' threshold (%).")] = None,
    high: Annotated[Optional[float], typer.Option("--high", help="Override the 'high' threshold (%).")] = None,
    saturated: Annotated[
        Optional[float], typer.Option("--saturated", help="Override the 'saturated' threshold (%).")
    ] = None,
):
    """
    Show requested-versus-allocatable utilization and its pressure level
    for the cluster, every node and every namespace.

    Thresholds come from the settings file unless overridden here.
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = resolve_settings(output=output, namespace=namespace, context=context, top=top)

    configured = settings.pressure_thresholds
    try:
        thresholds = validate_thresholds(
            low=configured.low if low is None else low,
            medium=configured.medium if medium is None else medium,
            high=configured.high if high is None else high,
            saturated=configured.saturated if saturated is None else saturated,
        )
    except ConfigurationError as e:
        raise fail(e)

    result = run_analysis(settings, kubeconfig, lambda p: p.run_pressure(thresholds))
    emit(result, settings, output_path, lambda r: r.report_pressure(result, top=settings.top), no_color)
