#!/usr/bin/env python3
"""
SimBank Entry Point

Loads the account data file and serves the banking API.
"""

import sys

from simbank.api import run_server
from simbank.config import get_config
from simbank.logging_config import setup_logging


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, config.log_format)

    print("🏦 Starting SimBank...")
    print(f"💾 Account data file: {config.data_file}")
    print(f"🌐 API available at: http://{config.api_host}:{config.api_port}")
    print(f"📚 Documentation at: http://{config.api_host}:{config.api_port}/docs")
    print()

    try:
        run_server(host=config.api_host, port=config.api_port)
    except KeyboardInterrupt:
        print("\n👋 Shutting down SimBank...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)
