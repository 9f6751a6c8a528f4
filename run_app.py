#!/usr/bin/env python3
"""
Storefront Backend Runner
=========================

Run the storefront API, optionally preparing the database first.

Usage:
    python run_app.py                    # Development server with auto-reload
    python run_app.py --mode prod        # Production mode (no reload, workers)
    python run_app.py --init-db          # Create tables before serving
    python run_app.py --seed             # Create tables, load sample catalog and admin
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import asyncio
import os
import sys

def print_banner():
    """Print application banner"""
    banner = """
╔═══════════════════════════════════════════════════════╗
║                  Storefront Backend                   ║
║                 Backend Runner Script                 ║
╚═══════════════════════════════════════════════════════╝
    """
    print(banner)

def check_environment():
    """Report on the local environment"""
    from storefront.core.config import settings

    print("\n🔍 Checking environment...")

    if os.path.exists(".env"):
        print("✅ .env file found")
    else:
        print("⚠️  .env file not found, using defaults")

    print(f"📦 Storage backend: {settings.STORAGE_BACKEND}")
    if settings.STORAGE_BACKEND == "sql":
        print(f"🗄️  Database: {settings.DATABASE_URL}")

    return True

async def prepare_database(seed: bool):
    """Create tables and optionally load sample data"""
    from storefront.core.database import close_db, init_db
    from storefront.core.logging import setup_logging
    from storefront.core.seed import run_seed
    from storefront.storage import SQLStorageProvider

    setup_logging()
    try:
        await init_db()
        print("✅ Database tables ready")
        if seed:
            created = await run_seed(SQLStorageProvider())
            print(
                f"✅ Seeded {created['categories']} categories, "
                f"{created['products']} products"
            )
    finally:
        await close_db()

def run_main_app(host="0.0.0.0", port=8000, reload=True, workers=1):
    """Run the FastAPI application"""
    print(f"\n🚀 Starting Storefront API on {host}:{port}")
    print(f"📖 API Docs: http://localhost:{port}/api/docs")
    print("\n" + "=" * 50)

    import uvicorn
    try:
        uvicorn.run(
            "storefront.main:app",
            host=host,
            port=port,
            reload=reload,
            workers=1 if reload else workers,
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")

def main():
    from storefront.core.config import settings

    parser = argparse.ArgumentParser(
        description="Storefront Backend Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_app.py --seed               # Fresh demo database, then serve
  python run_app.py --mode prod          # Production mode
  python run_app.py --port 8001          # Custom port
        """
    )

    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        default=settings.HOST,
        help=f"Host to bind to (default: {settings.HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help=f"Port to bind to (default: {settings.PORT})"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create database tables before serving"
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Create tables and load the sample catalog and admin account"
    )
    parser.add_argument(
        "--seed-only",
        action="store_true",
        help="Seed the database and exit"
    )

    args = parser.parse_args()

    print_banner()

    if not check_environment():
        return 1

    if args.init_db or args.seed or args.seed_only:
        if settings.STORAGE_BACKEND != "sql":
            print("❌ --init-db/--seed require STORAGE_BACKEND=sql")
            return 1
        asyncio.run(prepare_database(seed=args.seed or args.seed_only))
        if args.seed_only:
            return 0

    reload = not args.no_reload and args.mode != "prod"
    run_main_app(args.host, args.port, reload, settings.WORKERS)

    return 0

if __name__ == "__main__":
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        sys.exit(0)
