"""seqex CLI - Main entry point"""

import logging
import sys

import click
from seqex import version
from seqex_cli.commands.config import config_group
from seqex_cli.commands.encode import compare, encode, inspect
from seqex_cli.commands.examples import examples
from seqex_cli.commands.historical import historical
from seqex_cli.commands.predict import pipeline, predict, score_all
from seqex_cli.config import Config
from seqex_cli.output import print_error


@click.group()
@click.version_option(version=version.__version__, prog_name="seqex")
@click.option(
    "--config",
    "config_file",
    envvar="SEQEX_CONFIG",
    type=click.Path(dir_okay=False),
    help="Configuration file [default: ~/.seqex/config.yaml]",
)
@click.option(
    "--profile",
    envvar="SEQEX_PROFILE",
    help="Configuration profile name",
)
@click.option(
    "--endpoint",
    type=click.Choice(["ingress", "pod"]),
    help="Endpoint to predict against [default: from profile]",
)
@click.option(
    "--output",
    "output_format",
    type=click.Choice(["json", "table", "yaml"], case_sensitive=False),
    default="table",
    help="Output format [default: table]",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging and full stack traces",
)
@click.pass_context
def cli(ctx, config_file, profile, endpoint, output_format, verbose):
    """
    seqex - Encode SequenceExamples and query TensorFlow Serving models

    \b
    Examples:
      # Encode a feature map and print the hex payload
      seqex encode --json '{"ad_type": ["SC_CPCV_1"]}'

      # Predict canned example 3 with the aggressive model
      seqex predict --example 3 --model aggressive

      # Score all canned examples against all model variants
      seqex score-all

      # Predict with historical features from ScyllaDB
      seqex pipeline 749603295 SC_CPCV_1 SC

    \b
    Configuration:
      The CLI can be configured using:
      1. Command-line arguments (highest priority)
      2. Environment variables (SEQEX_*)
      3. Configuration file (~/.seqex/config.yaml)
      4. Default values (lowest priority)
    """
    # Initialize context object
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # Load configuration
    try:
        config = Config(config_file)
        profile_obj = config.get_profile(profile)
        settings = profile_obj.to_settings()
    except Exception as e:
        print_error(f"Failed to load profile '{profile or 'default'}': {e}")
        if verbose:
            raise
        sys.exit(1)

    # Store configuration in context
    ctx.obj["config"] = config
    ctx.obj["profile"] = profile_obj
    ctx.obj["settings"] = settings
    ctx.obj["endpoint"] = endpoint or profile_obj.endpoint
    ctx.obj["output_format"] = output_format.lower()
    ctx.obj["verbose"] = verbose


# Register commands
cli.add_command(encode)
cli.add_command(inspect)
cli.add_command(compare)
cli.add_command(predict)
cli.add_command(score_all)
cli.add_command(pipeline)
cli.add_command(historical)
cli.add_command(examples)
cli.add_command(config_group)


def main():
    """Entry point for the CLI"""
    try:
        cli(obj={})
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
