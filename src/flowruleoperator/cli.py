"""Command-line entry point for the flowrule-operator."""

__all__ = ("app", "main")

from typing import Annotated, Optional

import kopf
import typer

from flowruleoperator.config import load_config
from flowruleoperator.version import get_version

app = typer.Typer(
    help="Publish rate-limiting flow rules to Redis when watched pods start.",
    no_args_is_help=True,
)


@app.command()
def run(
    kubeconfig: Annotated[
        Optional[str],
        typer.Option(
            help=(
                "Absolute path to the kubeconfig file, used when IN_CLUSTER "
                "is not 'true'. Defaults to ~/.kube/config."
            ),
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log more details.")
    ] = False,
) -> None:
    """Watch pods and publish the flow rules until terminated."""
    # Registers the kopf handlers.
    from flowruleoperator import handlers  # noqa: F401

    config = load_config(kubeconfig=kubeconfig)
    kopf.configure(verbose=verbose)
    kopf.run(
        standalone=True,
        namespaces=[config.namespace],
        memo=kopf.Memo(config=config),
    )


@app.command()
def version() -> None:
    """Print the version."""
    typer.echo(get_version())


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
