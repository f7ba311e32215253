#!/usr/bin/env python3
"""
Playwright Endpoint Example

Checks that the Playwright endpoint of each browser is reachable and prints
the URL to hand to playwright's connect().
"""
import asyncio

from browserless_client import BrowserlessClient, WebSocketOptions, config_from_env


async def main():
    async with BrowserlessClient(config_from_env()) as client:
        for browser in ("chromium", "firefox", "webkit"):
            result = await client.create_websocket_connection(
                WebSocketOptions(browser=browser, library="playwright")
            )
            if result.success:
                print(f"{browser}: {result.data.browser_ws_endpoint}")
            else:
                print(f"{browser}: {result.error}")

        sessions = await client.get_sessions()
        if sessions.success:
            print(f"Active sessions: {len(sessions.data)}")


if __name__ == "__main__":
    asyncio.run(main())
