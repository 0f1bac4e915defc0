# src/kubesight/cli/utils.py
import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from typing_extensions import Annotated

from ..core.config import Settings, config, load_settings
from ..core.exceptions import KubeSightError
from ..core.processor import AnalysisProcessor, get_processor
from ..exporters import get_exporter
from ..reporters.console_reporter import ConsoleReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Options shared by every analysis command.
NamespaceOption = Annotated[
    Optional[str], typer.Option("--namespace", "-n", help="Limit to one namespace. Default: all namespaces.")
]
OutputOption = Annotated[
    Optional[str],
    typer.Option("--output", "-o", help="Output format: text, json or yaml.", case_sensitive=False),
]
OutputPathOption = Annotated[
    Optional[Path],
    typer.Option(
        "--output-path",
        help="Write json/yaml output to this file instead of stdout.",
        exists=False,
        dir_okay=False,
        writable=True,
    ),
]
TopOption = Annotated[Optional[int], typer.Option("--top", help="Rows shown in ranked tables; 0 shows all.")]
ContextOption = Annotated[Optional[str], typer.Option("--context", help="Kubeconfig context to use.")]
KubeconfigOption = Annotated[Optional[str], typer.Option("--kubeconfig", help="Path to the kubeconfig file.")]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable colored output.")]


def fail(error: object) -> typer.Exit:
    """Logs a user-facing error and returns the Exit to raise."""
    logger.debug(f"Command failed: {error}")
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


def resolve_settings(
    output: Optional[str] = None,
    namespace: Optional[str] = None,
    context: Optional[str] = None,
    top: Optional[int] = None,
) -> Settings:
    """Settings file values, overridden by flags, then by KUBESIGHT_CONTEXT for the context."""
    try:
        settings = load_settings()
        if context is None and config.KUBE_CONTEXT:
            context = config.KUBE_CONTEXT
        return settings.merge(
            output=output.lower() if output else None,
            namespace=namespace,
            context=context,
            top=top,
        )
    except KubeSightError as e:
        raise fail(e)


def run_analysis(
    settings: Settings,
    kubeconfig: Optional[str],
    action: Callable[[AnalysisProcessor], Awaitable[T]],
) -> T:
    """Builds a processor for the resolved settings and runs one analysis against it."""

    async def _run():
        processor = get_processor(
            namespace=settings.namespace or None,
            kubeconfig=kubeconfig or config.KUBECONFIG,
            context=settings.context or None,
        )
        try:
            return await action(processor)
        finally:
            await processor.close()

    try:
        return asyncio.run(_run())
    except KubeSightError as e:
        raise fail(e)


def emit(
    data: Any,
    settings: Settings,
    output_path: Optional[Path],
    render_text: Callable[[ConsoleReporter], None],
    no_color: bool = False,
):
    """
    Sends results to the console (text) or through an exporter (json/yaml).

    Structured output goes to stdout unless --output-path is given.
    """
    if settings.output == "text":
        if output_path:
            logger.warning("--output-path is ignored for text output.")
        render_text(ConsoleReporter(color=settings.color and not no_color))
        return

    exporter = get_exporter(settings.output)
    if not output_path:
        typer.echo(exporter.render(data).rstrip("\n"))
        return

    try:
        written_path = asyncio.run(exporter.export(data, str(output_path)))
    except OSError as e:
        raise fail(f"Failed to export report to {output_path}: {e}")
    logger.info(f"Successfully exported report to {written_path}")
    typer.echo(f"Report exported to: {written_path}", err=True)
