"""Export command for the iam2cfn CLI."""

import logging
import random
import sys
from typing import Optional

import click

from .. import __version__
from ..cloudformation import TemplateRenderer, render_json
from ..config import OUTPUT_FORMATS, load_config
from ..exceptions import Iam2CfnError
from ..iam import IAMInventoryFetcher, ResourceKind, create_iam_client
from ..naming import NamingMode

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr so stdout only carries the template."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not verbose:
        return
    # botocore debug output drowns everything else
    logging.getLogger("botocore").setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.INFO)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("kind", type=click.Choice(ResourceKind.choices()))
@click.option("--profile", help="AWS profile to use")
@click.option("--region", help="AWS region")
@click.option(
    "--naming",
    type=click.Choice(NamingMode.choices()),
    help="Key resources by sanitized logical ID (default) or by literal name",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    help="Output format (default: yaml)",
)
@click.option("--seed", type=int, help="Seed for generated policy name suffixes")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (defaults to stdout)")
@click.option("--no-tags", is_flag=True, help="Skip list_role_tags/list_policy_tags calls")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Log API calls to stderr")
@click.version_option(version=__version__)
def cli(
    kind: str,
    profile: Optional[str],
    region: Optional[str],
    naming: Optional[str],
    output_format: Optional[str],
    seed: Optional[int],
    output: Optional[str],
    no_tags: bool,
    config_path: Optional[str],
    verbose: bool,
) -> None:
    """Export IAM groups, policies or roles as a CloudFormation template.

    KIND selects the resources to export: groups, policies or roles.
    """
    configure_logging(verbose)

    try:
        config = load_config(config_path).merge(
            profile=profile,
            region=region,
            naming=naming,
            output_format=output_format,
            seed=seed,
            fetch_tags=False if no_tags else None,
        )

        client = create_iam_client(profile=config.profile, region=config.region)
        fetcher = IAMInventoryFetcher(client, fetch_tags=config.fetch_tags)
        inventory = fetcher.fetch(ResourceKind(kind))

        rng = random.Random(config.seed)
        if config.output_format == "json":
            document = render_json(inventory, rng)
        else:
            document = TemplateRenderer(config.naming_mode, rng).render(inventory)
    except Iam2CfnError as e:
        logger.debug("Export failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output:
        try:
            with open(output, "w") as f:
                f.write(document)
        except OSError as e:
            click.echo(f"Error: Failed to write {output}: {e}", err=True)
            sys.exit(1)
        click.echo(f"✅ Wrote {len(inventory)} {kind} to {output}", err=True)
    else:
        click.echo(document, nl=False)


def main() -> None:
    """Console script entry point."""
    cli()
