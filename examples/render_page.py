#!/usr/bin/env python3
"""
Render Page Example

Renders a page to PDF and JPEG, then prints the rendered HTML length.

Prerequisites:
- A Browserless instance, e.g.:
  docker run -p 3000:3000 -e TOKEN=6R0W53R135510 ghcr.io/browserless/chromium
- BROWSERLESS_TOKEN set to the instance token
"""
import asyncio
from pathlib import Path

from browserless_client import BrowserlessClient, config_from_env, setup_logging


async def main():
    setup_logging()
    config = config_from_env()

    async with BrowserlessClient(config) as client:
        health = await client.get_health()
        if not health.success:
            print(f"Instance not healthy: {health.error}")
            return

        # PDF
        result = await client.generate_pdf({
            "url": "https://example.com",
            "options": {"format": "A4", "printBackground": True},
        })
        if result.success:
            Path(result.data.filename).write_bytes(result.data.pdf)
            print(f"Saved {result.data.filename} ({len(result.data.pdf)} bytes)")
        else:
            print(f"PDF failed: {result.error} (status {result.status_code})")

        # Screenshot
        result = await client.take_screenshot({
            "url": "https://example.com",
            "options": {"type": "jpeg", "quality": 80, "fullPage": True},
        })
        if result.success:
            Path(result.data.filename).write_bytes(result.data.image)
            print(f"Saved {result.data.filename}")

        # Rendered HTML, with ads blocked
        result = await client.get_content(
            {"url": "https://example.com"},
            params={"blockAds": "true"},
        )
        if result.success:
            print(f"Rendered HTML: {len(result.data)} characters")


if __name__ == "__main__":
    asyncio.run(main())
