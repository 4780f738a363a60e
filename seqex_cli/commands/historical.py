"""Historical feature store commands"""

import click
from seqex_cli.output import OutputFormatter, print_error, print_success
from seqex_cli.session import get_historical_client


@click.group()
def historical():
    """Query the historical feature store"""
    pass


@historical.command("get")
@click.argument("userid")
@click.argument("ad_type")
@click.argument("source_app")
@click.option("--no-defaults", is_flag=True, help="Fail instead of returning defaults when the key has no row")
@click.pass_context
def get_features(ctx, userid, ad_type, source_app, no_defaults):
    """Look up the historical features of USERID, AD_TYPE and SOURCE_APP"""
    try:
        client = get_historical_client(ctx)
        if no_defaults:
            features = client.get_historical_features(userid, ad_type, source_app)
            if features is None:
                print_error(f"No historical features for {userid}|{ad_type}|{source_app}")
                ctx.exit(1)
        else:
            features = client.get_historical_features_with_defaults(
                userid, ad_type, source_app
            )

        formatter = OutputFormatter()
        output = formatter.format(
            [{"feature": name, "value": value} for name, value in features.items()],
            ctx.obj["output_format"],
        )
        click.echo(output)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        print_error(f"Failed to get historical features: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)


@historical.command("keyspaces")
@click.pass_context
def keyspaces(ctx):
    """List the keyspaces of the cluster"""
    try:
        names = get_historical_client(ctx).list_keyspaces()

        formatter = OutputFormatter()
        output = formatter.format(
            [{"keyspace": name} for name in names], ctx.obj["output_format"]
        )
        click.echo(output)

    except Exception as e:
        print_error(f"Failed to list keyspaces: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)


@historical.command("schema")
@click.argument("table", required=False)
@click.pass_context
def schema(ctx, table):
    """Show the columns of TABLE, defaults to the feature table"""
    try:
        columns = get_historical_client(ctx).get_table_schema(table)

        formatter = OutputFormatter()
        output = formatter.format(columns, ctx.obj["output_format"])
        click.echo(output)

    except Exception as e:
        print_error(f"Failed to get table schema: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)


@historical.command("ping")
@click.pass_context
def ping(ctx):
    """Check the connection to the cluster"""
    try:
        info = get_historical_client(ctx).test_connection()
        print_success(
            f"Connected to cluster {info['cluster_name']} "
            f"(release {info['release_version']})"
        )

    except Exception as e:
        print_error(f"Connection test failed: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)
