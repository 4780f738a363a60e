"""Encoding commands"""

from pathlib import Path

import click
from seqex import sequence_example
from seqex_cli.output import OutputFormatter, print_error, print_success
from seqex_cli.utils.exceptions import ValidationError
from seqex_cli.utils.features import load_features


def _read_payload(value: str, from_file: bool) -> bytes:
    if from_file:
        return Path(value).read_bytes()
    try:
        return sequence_example.from_hex(value)
    except ValueError as e:
        raise ValidationError(f"Not a hex string: {value[:20]}...") from e


def _feature_rows(decoded):
    return [
        {
            "feature": name,
            "kind": values[0].kind.name if values else "",
            "values": [
                v.value.decode("utf-8", "replace") if isinstance(v.value, bytes) else v.value
                for v in values
            ],
        }
        for name, values in sorted(decoded.items())
    ]


@click.command("encode")
@click.option("--features-file", type=click.Path(exists=True, dir_okay=False), help="JSON or YAML feature map")
@click.option("--json", "features_json", help="Feature map as inline JSON")
@click.option("--example", type=int, help="Index of a canned example")
@click.option("--deterministic", is_flag=True, help="Stable feature order in the output bytes")
@click.option("--out", "out_file", type=click.Path(dir_okay=False), help="Write the raw bytes to this file")
@click.pass_context
def encode(ctx, features_file, features_json, example, deterministic, out_file):
    """Encode a feature map as a serialized SequenceExample"""
    try:
        features = load_features(features_file, features_json, example)
        data = sequence_example.encode(features, deterministic=deterministic)

        if out_file:
            Path(out_file).write_bytes(data)
            print_success(f"Wrote {len(data)} bytes to {out_file}")
            return

        formatter = OutputFormatter()
        output = formatter.format(
            {
                "features": len(features),
                "size": len(data),
                "hex": sequence_example.to_hex(data),
            },
            ctx.obj["output_format"],
        )
        click.echo(output)

    except Exception as e:
        print_error(f"Failed to encode features: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)


@click.command("inspect")
@click.argument("payload")
@click.option("--file", "from_file", is_flag=True, help="PAYLOAD is a file of raw bytes instead of hex")
@click.option("--text", is_flag=True, help="Print the protobuf text format")
@click.pass_context
def inspect(ctx, payload, from_file, text):
    """Decode a serialized SequenceExample"""
    try:
        data = _read_payload(payload, from_file)

        if text:
            click.echo(sequence_example.describe(data))
            return

        formatter = OutputFormatter()
        output = formatter.format(
            _feature_rows(sequence_example.decode(data)), ctx.obj["output_format"]
        )
        click.echo(output)

    except Exception as e:
        print_error(f"Failed to decode payload: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)


@click.command("compare")
@click.argument("left")
@click.argument("right")
@click.option("--file", "from_file", is_flag=True, help="Arguments are files of raw bytes instead of hex")
@click.pass_context
def compare(ctx, left, right, from_file):
    """Compare two serialized SequenceExamples, ignoring feature order"""
    try:
        left_data = _read_payload(left, from_file)
        right_data = _read_payload(right, from_file)
        equivalent = sequence_example.equivalent(left_data, right_data)

        formatter = OutputFormatter()
        output = formatter.format(
            {
                "equivalent": equivalent,
                "identical_bytes": left_data == right_data,
                "left_size": len(left_data),
                "right_size": len(right_data),
            },
            ctx.obj["output_format"],
        )
        click.echo(output)

        if not equivalent:
            ctx.exit(1)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        print_error(f"Failed to compare payloads: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)
