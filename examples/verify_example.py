#!/usr/bin/env python3
"""
Example usage of the verify CLI command.

This example demonstrates how to use the 'share-receiver verify' command
to check a saved share submission against the chain without running the
HTTP service.
"""
import sys
import subprocess
import argparse

def main():
    """Run the example."""
    parser = argparse.ArgumentParser(
        description="Verify a saved share submission.")
    parser.add_argument(
        "submission",
        help="Path to the JSON submission"
    )
    parser.add_argument(
        "--provider",
        help="Blockchain RPC URL (defaults to $WEB3_PROVIDER)"
    )
    parser.add_argument(
        "--exact-addresses",
        help="Compare addresses as raw strings",
        action="store_true"
    )

    args = parser.parse_args()

    # Construct the command
    cmd = ["share-receiver", "verify", args.submission]

    if args.provider:
        cmd.extend(["--provider", args.provider])

    if args.exact_addresses:
        cmd.extend(["--address-comparison", "exact"])

    print(f"Running command: {' '.join(cmd)}\n")
    result = subprocess.run(cmd)

    # 0 accepted, 1 rejected, 2 node or input failure
    return result.returncode

if __name__ == "__main__":
    sys.exit(main())
