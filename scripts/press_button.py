#!/usr/bin/env python3
"""
Press Button — Fire a simulated button event through the full pipeline.

Usage:
    # Against the configured repository and Slack workspace:
    python scripts/press_button.py --serial G030MD025452LHCJ

    # Post to the device's test channel instead:
    python scripts/press_button.py --serial G030MD025452LHCJ --test

    # Skip the daily counter (press count is always 1):
    python scripts/press_button.py --serial G030MD025452LHCJ --debug

    # Use another settings file (e.g. memory backends with a seed file):
    python scripts/press_button.py --serial DEV1 --config config/local.yaml
"""
import asyncio
import json
import os
import sys
import argparse

# Ensure app root is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


async def press(args) -> int:
    from dotenv import load_dotenv
    load_dotenv()

    from config.settings import load_settings
    load_settings(args.config)

    from api.handler import handle_event
    from models.schemas import ButtonEvent, ClickType

    event = ButtonEvent(
        serial_number=args.serial,
        battery_voltage=args.battery,
        click_type=ClickType(args.click),
        debug=args.debug,
        test=args.test,
    )
    result = await handle_event(event)
    print(json.dumps(result.model_dump(mode="json"), indent=2))
    return 0 if result.ok else 1


def main():
    parser = argparse.ArgumentParser(description="Simulate a button press")
    parser.add_argument("--serial", required=True, help="Device serial number")
    parser.add_argument("--click", default="SINGLE", choices=["SINGLE", "DOUBLE", "LONG"])
    parser.add_argument("--battery", default="1700mV", help="Reported battery voltage")
    parser.add_argument("--test", action="store_true", help="Deliver to the test channel")
    parser.add_argument("--debug", action="store_true", help="Do not touch the daily counter")
    parser.add_argument("--config", default=None, help="Path to settings YAML")
    args = parser.parse_args()
    sys.exit(asyncio.run(press(args)))


if __name__ == "__main__":
    main()
