"""Canned example commands"""

import click
from seqex import feature_examples
from seqex_cli.output import OutputFormatter, print_error


@click.group()
def examples():
    """Browse the canned feature examples"""
    pass


@examples.command("list")
@click.pass_context
def list_examples(ctx):
    """List the canned examples"""
    rows = []
    for index, example in enumerate(feature_examples.get_all()):
        rows.append(
            {
                "index": index,
                "ad_type": example["ad_type"][0],
                "source_app": example["sourceApp"][0],
                "city": example["city"][0],
                "userid": example["userid"][0],
            }
        )

    formatter = OutputFormatter()
    click.echo(formatter.format(rows, ctx.obj["output_format"]))


@examples.command("show")
@click.argument("index", type=int)
@click.pass_context
def show_example(ctx, index):
    """Show all features of example INDEX"""
    try:
        example = feature_examples.get_example(index)
    except IndexError as e:
        print_error(str(e))
        ctx.exit(1)

    formatter = OutputFormatter()
    if ctx.obj["output_format"] == "table":
        data = [{"feature": name, "values": values} for name, values in example.items()]
    else:
        data = example
    click.echo(formatter.format(data, ctx.obj["output_format"]))
