"""Thin CLI that delegates to use-cases.

Commands:
- query: intent-driven retrieval over the authority corpus, formatted as links
- diagnostics: topology metrics and mapping warnings for the configured bindings
- validate: build-time gate; exits 1 with every collected error
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict

import typer

from src.application.use_cases.graph_cache import load_snapshot
from src.application.use_cases.validate_mapping import (
    EntityIdSet,
    mapping_diagnostics,
    topology_report,
    validate_or_raise,
)
from src.config.configure_app import get_bindings, get_content, get_query_use_case, get_settings
from src.core.exceptions import AuthorityValidationError
from src.core.logging_setup import setup_logging
from src.domain.differentiation import differentiate_bindings
from src.domain.intents import QueryIntent

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Authority retrieval tools")


@app.callback()
def _root(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command("query")
def query_cmd(
    intent: str = typer.Argument(..., help=f"One of: {', '.join(i.value for i in QueryIntent)}"),
    text: str = typer.Option("", "--text", help="Free text for explore_domain"),
    context: str = typer.Option(None, "--context", help="Evaluator context, e.g. executive"),
    max_per_type: int = typer.Option(None, "--max-per-type", help="Cap per entity kind"),
    base_path: str = typer.Option(None, "--base-path", help="Href prefix (default: settings)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    uc = get_query_use_case()
    result = uc.execute(
        intent,
        evaluator_context=context,
        query_text=text,
        max_per_type=max_per_type,
        base_path=base_path,
    )

    if as_json:
        typer.echo(json.dumps(asdict(result), ensure_ascii=False, indent=2))
        raise typer.Exit()

    typer.echo(result.summary)
    for bullet in result.bullets:
        typer.echo(f"  - {bullet}")
    for i, link in enumerate(result.entity_links, 1):
        typer.echo(f"[{i}] {link.kind:<10} {link.label} -> {link.href}")


@app.command("diagnostics")
def diagnostics_cmd(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    app_settings = get_settings()
    bindings = get_bindings()
    ids = EntityIdSet.from_snapshot(load_snapshot(get_content()))
    diag = mapping_diagnostics(ids, bindings, app_settings.diagnostics)
    report = topology_report(differentiate_bindings(bindings), app_settings.diagnostics)

    if as_json:
        payload = {
            "entropy_score": report.entropy_score,
            "dimensionality_index": report.dimensionality_index,
            "overall_variance": report.variance.overall_variance,
            "unique_signatures": report.variance.unique_signatures,
            "total_entities": report.variance.total_entities,
            "severe_collapse": report.collapse.severe,
            "errors": diag.errors,
            "warnings": diag.warnings,
            "info": diag.info,
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        raise typer.Exit()

    typer.echo(f"Signal entropy score:     {report.entropy_score:.3f}")
    typer.echo(f"Dimensionality index:     {report.dimensionality_index:.3f}")
    typer.echo(
        f"Unique signatures:        {report.variance.unique_signatures}"
        f"/{report.variance.total_entities}"
    )
    typer.echo(f"Overall variance:         {report.variance.overall_variance:.4f}")
    if report.collapse.severe:
        typer.secho(f"SEVERE: {report.collapse.reason}", fg=typer.colors.RED)
    for msg in diag.errors:
        typer.secho(f"error: {msg}", fg=typer.colors.RED)
    for msg in diag.warnings:
        typer.secho(f"warning: {msg}", fg=typer.colors.YELLOW)
    for msg in diag.info:
        typer.echo(f"info: {msg}")


@app.command("validate")
def validate_cmd() -> None:
    app_settings = get_settings()
    try:
        diag = validate_or_raise(
            load_snapshot(get_content()), get_bindings(), app_settings.diagnostics
        )
    except AuthorityValidationError as e:
        for msg in e.errors:
            typer.secho(f"error: {msg}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"Authority mapping valid ({len(diag.warnings)} warning(s)).")


def main() -> int:
    try:
        app()
        return 0
    except Exception as e:  # noqa: BLE001
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        return 1


if __name__ == "__main__":
    sys.exit(main())
