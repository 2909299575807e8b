#!/usr/bin/env python3
"""
Basic usage example for merge-monitor
"""

import logging

from merge_monitor import ExecutionClient, ClientType, MetricName, MergeMonitorException

MAINNET_TTD = 58750000000000000000000


def main():
    logging.basicConfig(level=logging.INFO)

    def on_ttd(timestamp):
        print(f"TTD block timestamp: {timestamp}")

    client = ExecutionClient(ClientType.GETH, 1, "http://localhost:8545", MAINNET_TTD,
                             update_ttd_timestamp=on_ttd)
    try:
        print(f"Client version: {client.client_version()}")

        ttd_block = client.update_get_ttd_block_number()
        if ttd_block is None:
            print("TTD not reached yet")
            return
        print(f"TTD block: {ttd_block}")

        for metric in MetricName:
            point = client.get_data_point(metric, ttd_block)
            print(f"  {metric.value}: {point.value}")
    except MergeMonitorException as e:
        print(f"ERROR {e}")
    finally:
        client.close()


if __name__ == "__main__":
    main()
