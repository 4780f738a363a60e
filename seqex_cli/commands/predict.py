"""Prediction commands"""

import json

import click
from seqex import feature_examples
from seqex.constants import MODEL_VARIANT
from seqex_cli.output import OutputFormatter, print_error, print_success, print_warning
from seqex_cli.session import get_historical_client, get_pipeline
from seqex_cli.utils.exceptions import ValidationError
from seqex_cli.utils.features import load_features


def _prediction_data(result):
    data = result.to_dict()
    if result.historical_features is not None:
        data["historical_features"] = result.historical_features
    return data


@click.command("predict")
@click.option("--features-file", type=click.Path(exists=True, dir_okay=False), help="JSON or YAML feature map")
@click.option("--json", "features_json", help="Feature map as inline JSON")
@click.option("--example", type=int, help="Index of a canned example")
@click.option("--model", default=MODEL_VARIANT.BASELINE, show_default=True, help="Model variant")
@click.pass_context
def predict(ctx, features_file, features_json, example, model):
    """Request a prediction for a feature map"""
    try:
        if features_file is None and features_json is None and example is None:
            example = 0
        features = load_features(features_file, features_json, example)

        result = get_pipeline(ctx).predict_features(features, model=model)

        formatter = OutputFormatter()
        output = formatter.format(_prediction_data(result), ctx.obj["output_format"])
        click.echo(output)

    except Exception as e:
        print_error(f"Prediction failed: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)


@click.command("score-all")
@click.option(
    "--variant",
    "variants",
    multiple=True,
    help="Model variant to score, repeatable [default: all]",
)
@click.option("--no-progress", is_flag=True, help="Hide the progress bar")
@click.pass_context
def score_all(ctx, variants, no_progress):
    """Score every canned example against every model variant"""
    try:
        variants = tuple(v.upper() for v in variants) or MODEL_VARIANT.ALL
        results = get_pipeline(ctx).score_all(
            feature_examples.get_all(), variants, progress=not no_progress
        )

        formatter = OutputFormatter()
        output = formatter.format(
            [result.to_dict() for result in results], ctx.obj["output_format"]
        )
        click.echo(output)

    except Exception as e:
        print_error(f"Scoring failed: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)

    failed = [result for result in results if not result.ok]
    if failed:
        print_warning(
            f"{len(failed)} of {len(results)} prediction(s) failed", err=True
        )
        ctx.exit(1)
    print_success(
        f"All {len(results)} predictions successful "
        f"({feature_examples.get_count()} examples x {len(variants)} models)",
        err=True,
    )


@click.command("pipeline")
@click.argument("userid")
@click.argument("ad_type")
@click.argument("source_app")
@click.option("--json", "features_json", help="Real-time features as inline JSON")
@click.option("--model", default=MODEL_VARIANT.BASELINE, show_default=True, help="Model variant")
@click.option("--no-historical", is_flag=True, help="Skip the historical feature lookup")
@click.pass_context
def pipeline(ctx, userid, ad_type, source_app, features_json, model, no_historical):
    """Predict with historical features looked up for USERID, AD_TYPE and SOURCE_APP"""
    try:
        realtime_features = None
        if features_json:
            try:
                realtime_features = json.loads(features_json)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Could not parse real-time features: {e}") from e

        historical_client = None if no_historical else get_historical_client(ctx)
        result = get_pipeline(ctx, historical_client=historical_client).predict(
            userid, ad_type, source_app, realtime_features=realtime_features, model=model
        )

        formatter = OutputFormatter()
        output = formatter.format(_prediction_data(result), ctx.obj["output_format"])
        click.echo(output)

    except Exception as e:
        print_error(f"Pipeline prediction failed: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)
