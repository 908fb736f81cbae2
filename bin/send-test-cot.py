#!/usr/bin/env python3
"""
Send a test CoT event through a running proxy.

Usage:
    python bin/send-test-cot.py
    python bin/send-test-cot.py --proxy http://localhost:8080 --udp-host 10.0.0.5 --udp-port 4242
"""

import argparse
import sys

import httpx

from cot_proxy.cot import build_cot_event


def parse_args():
    parser = argparse.ArgumentParser(description="Send a test CoT message via the proxy")
    parser.add_argument("--proxy", default="http://localhost:8080", help="Proxy base URL")
    parser.add_argument("--udp-host", default="127.0.0.1", help="UDP destination host")
    parser.add_argument("--udp-port", default="8087", help="UDP destination port")
    parser.add_argument("--callsign", default="TEST-UNIT")
    parser.add_argument("--lat", type=float, default=45.123456)
    parser.add_argument("--lon", type=float, default=9.654321)
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    base_url = args.proxy.rstrip("/")

    with httpx.Client(timeout=10) as client:
        print("Checking proxy server...")
        try:
            health = client.get(f"{base_url}/")
            health.raise_for_status()
        except httpx.HTTPError as e:
            print(f"Proxy server is not running at {base_url}: {e}")
            print("  Start it with: python -m cot_proxy")
            return 1
        print(f"Proxy server is running: {health.json()}")

        event = build_cot_event(
            lat=args.lat,
            lon=args.lon,
            alt=100.0,
            uid="TEST-12345",
            callsign=args.callsign,
        )
        print("Sending test CoT message...")
        try:
            response = client.post(
                f"{base_url}/cot",
                content=event.encode("utf-8"),
                headers={
                    "Content-Type": "application/xml",
                    "X-UDP-Host": args.udp_host,
                    "X-UDP-Port": args.udp_port,
                },
            )
        except httpx.HTTPError as e:
            print(f"Failed to send message: {e}")
            return 1

    if response.status_code != 200 or not response.json().get("success"):
        print(f"Failed to send message ({response.status_code}): {response.text}")
        return 1
    print(f"Message sent successfully: {response.text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
