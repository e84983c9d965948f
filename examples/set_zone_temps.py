#!/usr/bin/env python3
"""Example: Find a thermostat by zone name and set both setpoints."""

import asyncio
import os
import sys

from venstar import SetpointSpreadError, Thermostat, discover, find_thermostat


async def main() -> None:
    zone = os.getenv("VENSTAR_ZONE")

    if not zone:
        print("Thermostats on this network:")
        stream = await discover(timeout=3)
        async for descriptor in stream:
            print(f"  {descriptor}")
        print("Set VENSTAR_ZONE to one of the names above to control it")
        sys.exit(1)

    descriptor = await find_thermostat(zone, timeout=3)
    if descriptor is None:
        print(f"No thermostat named {zone!r} answered")
        return

    async with Thermostat.from_descriptor(descriptor) as thermostat:
        before = await thermostat.info()
        print(
            f"{thermostat.name}: {before.space_temp:g}{before.temp_units} "
            f"(heat {before.heat_temp:g}, cool {before.cool_temp:g}, "
            f"mode {before.mode})"
        )

        try:
            await thermostat.set_heat_cool_temps(68, 69)
        except SetpointSpreadError as e:
            print(f"Rejected locally, nothing sent: {e}")

        print("Setting heat 67 / cool 76 in Auto...")
        await thermostat.set_heat_cool_temps(76, 67)

        after = await thermostat.info()
        print(
            f"Now heat {after.heat_temp:g}, cool {after.cool_temp:g}, "
            f"mode {after.mode}"
        )


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nCancelled by user")
