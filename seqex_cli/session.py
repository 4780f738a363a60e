"""Helpers creating the seqex clients of a CLI invocation"""

from seqex.client import client_for_endpoint
from seqex.config import Settings
from seqex.historical import HistoricalFeatureClient
from seqex.pipeline import InferencePipeline


def get_settings(ctx) -> Settings:
    """
    Get the settings resolved for this invocation

    # Arguments
        ctx: Click context object

    # Returns
        Settings object
    """
    return ctx.obj["settings"]


def get_historical_client(ctx) -> HistoricalFeatureClient:
    """
    Connect to the historical feature store

    The client is closed when the CLI invocation ends.

    # Arguments
        ctx: Click context object

    # Returns
        Connected HistoricalFeatureClient
    """
    client = HistoricalFeatureClient(get_settings(ctx).historical)
    client.connect()
    ctx.call_on_close(client.close)
    return client


def get_pipeline(ctx, historical_client=None) -> InferencePipeline:
    """
    Get an inference pipeline for the selected endpoint

    # Arguments
        ctx: Click context object
        historical_client: Optional connected HistoricalFeatureClient

    # Returns
        InferencePipeline, closed when the CLI invocation ends
    """
    pipeline = InferencePipeline(
        get_settings(ctx),
        historical_client=historical_client,
        client_factory=client_for_endpoint,
        endpoint=ctx.obj.get("endpoint", "ingress"),
    )
    ctx.call_on_close(pipeline.close)
    return pipeline
