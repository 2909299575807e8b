#!/usr/bin/env python3
"""
merge-monitor CLI Interface
One-shot probe of an execution-layer node
"""

import click
import json
import sys
import logging

from .execution_client import ExecutionClient
from .exceptions import MergeMonitorException
from .models import ClientType, MetricName


def setup_logging(level=logging.INFO):
    """Set up logging configuration to stderr only"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        stream=sys.stderr
    )


def format_json(data, pretty=False):
    """Helper function to format JSON consistently"""
    if pretty:
        return json.dumps(data, indent=2, default=str)
    return json.dumps(data, separators=(',', ':'), default=str)


def probe_node(client: ExecutionClient, metrics, block=None) -> dict:
    """Collect version, head and TTD state plus the requested metrics"""
    latest = client.get_latest_block_number()
    ttd_block = client.update_get_ttd_block_number()

    report = {
        "client_id": client.client_id,
        "client_type": client.client_type.value,
        "rpc_url": client.rpc_url,
        "client_version": client.client_version(),
        "latest_block": latest,
        "ttd": str(client.ttd),
        "ttd_block_number": ttd_block,
        "ttd_block_timestamp": client.ttd_block_timestamp if ttd_block is not None else None,
    }

    if metrics:
        target = latest if block is None else block
        report["data_points"] = [
            client.get_data_point(name, target).to_dict() for name in metrics
        ]
    return report


@click.command()
@click.option('--rpc-url', required=True, help='Execution node JSON-RPC endpoint (http or https)')
@click.option('--ttd', required=True, help='Terminal total difficulty (decimal or 0x hex)')
@click.option('--client-type', type=click.Choice([t.value for t in ClientType]), default=ClientType.UNKNOWN.value,
              help='Execution client implementation')
@click.option('--client-id', type=int, default=0, help='Numeric client ID')
@click.option('--timeout', type=float, default=10.0, help='Per-call timeout in seconds')
@click.option('--metric', 'metrics', multiple=True, type=click.Choice([m.value for m in MetricName]),
              help='Block metric to read (repeatable)')
@click.option('--block', type=click.IntRange(min=0), help='Block to read metrics from (default: latest)')
@click.option('--insecure', is_flag=True, help='Skip TLS certificate verification')
@click.option('--pretty', is_flag=True, help='Pretty-print JSON output (default: compact)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--quiet', is_flag=True, help='Suppress output except results')
def cli(rpc_url, ttd, client_type, client_id, timeout, metrics, block, insecure, pretty, debug, quiet):
    """merge-monitor: probe an execution node for its TTD block and block metrics"""

    if debug:
        setup_logging(logging.DEBUG)
    elif quiet:
        setup_logging(logging.ERROR)
    else:
        setup_logging(logging.INFO)

    try:
        with ExecutionClient(client_type, client_id, rpc_url, ttd,
                             timeout=timeout, verify_tls=not insecure) as client:
            if not quiet:
                click.echo(f"Probing {client} ...", err=True)
            report = probe_node(client, metrics, block)
    except MergeMonitorException as e:
        click.echo(format_json({"error": str(e)}, pretty))
        if not quiet:
            click.echo(f"Probe failed: {e}", err=True)
        sys.exit(1)

    click.echo(format_json(report, pretty))


if __name__ == '__main__':
    cli()
