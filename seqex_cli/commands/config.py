"""Configuration commands"""

import click
from seqex_cli.config import DEFAULT_ENDPOINT, Profile
from seqex_cli.output import OutputFormatter, print_error, print_success
from seqex_cli.session import get_settings


@click.group("config")
def config_group():
    """Show and manage configuration profiles"""
    pass


@config_group.command("show")
@click.pass_context
def show(ctx):
    """Show the resolved settings of the active profile"""
    try:
        data = get_settings(ctx).to_dict()
        if data["historical"].get("password"):
            data["historical"]["password"] = "****"

        formatter = OutputFormatter()
        if ctx.obj["output_format"] == "table":
            rows = [
                {"setting": f"{section}.{key}", "value": value}
                for section, values in data.items()
                for key, value in values.items()
            ]
            click.echo(formatter.format(rows, "table"))
        else:
            click.echo(formatter.format(data, ctx.obj["output_format"]))

    except Exception as e:
        print_error(f"Failed to show configuration: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)


@config_group.command("init")
@click.argument("name", default="default")
@click.option(
    "--endpoint",
    type=click.Choice(["ingress", "pod"]),
    default=DEFAULT_ENDPOINT,
    show_default=True,
    help="Endpoint the profile predicts against",
)
@click.option("--ingress-host", help="Ingress hostname")
@click.option("--cert-path", type=click.Path(dir_okay=False), help="CA certificate of the ingress")
@click.option("--contact-point", "contact_points", multiple=True, help="ScyllaDB contact point, repeatable")
@click.option("--set-default", is_flag=True, help="Make this the default profile")
@click.pass_context
def init(ctx, name, endpoint, ingress_host, cert_path, contact_points, set_default):
    """Create or replace profile NAME in the configuration file"""
    try:
        settings = {}
        ingress = {}
        if ingress_host:
            ingress["host"] = ingress_host
        if cert_path:
            ingress["cert_path"] = cert_path
        if ingress:
            settings["ingress"] = ingress
        if contact_points:
            settings["historical"] = {"contact_points": list(contact_points)}

        profile = Profile(endpoint=endpoint, settings=settings)
        # Validate before writing
        profile.to_settings()

        config = ctx.obj["config"]
        config.add_profile(name, profile)
        if set_default:
            config.set_default_profile(name)
        config.save()
        print_success(f"Profile '{name}' saved to {config.config_file}")

    except Exception as e:
        print_error(f"Failed to save profile: {e}")
        if ctx.obj.get("verbose"):
            raise
        ctx.exit(1)
