#!/usr/bin/env python3
"""
Run the digital book development backend.

Usage:
    python scripts/run.py
"""

import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))


def print_config(settings):
    """Print server configuration."""
    print(f"   Environment: {settings.environment}")
    print(f"   Log format: {settings.log_format}")
    print("   Books API: http://localhost:3000/libros-digitales")
    print("   Health: http://localhost:3000/health")
    print()


def main():
    """Run the server."""
    from digitalbook.settings import get_settings

    print("Starting the digital book backend...")
    print_config(get_settings())

    import uvicorn

    uvicorn.run(
        "digitalbook.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=3000,
        reload=True,
    )


if __name__ == "__main__":
    main()
