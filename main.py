#!/usr/bin/env python3
"""
Favs Bling - storefront core
Entry point: loads configuration, optionally signs in and shows the cart
"""

import argparse
import asyncio
import logging
import sys

from app import StorefrontApp
from config.remote import RemoteConfigLoader
from config.settings import APP_CONFIG, LOG_LEVEL
from data.api_client import BackendError
from utils.helpers import format_amount


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=f"{APP_CONFIG['app_name']} storefront core")
    parser.add_argument('--email', help='Sign in with this email')
    parser.add_argument('--password', help='Password for --email')
    parser.add_argument('--check-backend', action='store_true', help='Probe backend health and Paystack')
    return parser.parse_args(argv)


async def run(args) -> int:
    config = await asyncio.to_thread(RemoteConfigLoader().load)
    app = StorefrontApp.from_config(config, with_ui_bridge=False)
    app.notifier.subscribe(lambda n: print(f"[{n.level}] {n.message}"))

    try:
        if args.check_backend:
            try:
                await app.backend.health()
                print("✅ Backend connection successful")
                if await app.backend.test_paystack():
                    print("✅ Paystack connection verified")
            except BackendError as e:
                print(f"❌ Backend connection failed: {e}")

        if args.email:
            if not await app.auth.sign_in(args.email, args.password or ''):
                return 1
            await app.cart.wait_until_loaded()

        session = app.authority.session
        if not session.is_authenticated:
            print("Not signed in")
            return 0

        print(f"Signed in as {session.user.email}{' (admin)' if session.is_admin else ''}")
        for line in app.cart.lines:
            print(f"  {line.name:<25} {line.quantity}x {format_amount(line.price)}")
        print(f"Subtotal: {format_amount(app.cart.subtotal())}")
        return 0
    finally:
        app.close()


def main():
    """Main application entry point"""
    logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    args = parse_args()

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == '__main__':
    main()
