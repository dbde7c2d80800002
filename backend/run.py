#!/usr/bin/env python3
"""
LLM Maps API - Run Script
This script checks the environment and starts the FastAPI backend server
"""

import sys
import subprocess
from pathlib import Path

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_file_exists(filepath, error_message):
    """Check if a file exists"""
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def main():
    print_colored("🚀 Starting LLM Maps API...", "blue")

    # Check if we're in the backend directory
    check_file_exists("maps_api/main.py", "maps_api/main.py not found. Please run this script from the backend directory.")

    if not Path(".env").exists() and not Path("../.env").exists():
        print_colored("⚠️  Warning: .env file not found.", "yellow")
        print("Create a .env file with at least:")
        print("  GOOGLE_MAPS_API_KEY=your_api_key_here")
        print("  FRONTEND_API_KEY=shared_secret_for_the_widget")
        print("  ENVIRONMENT=development")

    from maps_api.core.config import settings

    # The provider credential is mandatory: refuse to start without it
    if not settings.GOOGLE_MAPS_API_KEY:
        print_colored("❌ CRITICAL ERROR: GOOGLE_MAPS_API_KEY is not set in environment variables!", "red")
        print("   Please check your .env file exists and contains GOOGLE_MAPS_API_KEY")
        sys.exit(1)

    print_colored("✅ All checks passed!", "green")
    print(f"📍 API will be available at: http://localhost:{settings.PORT}")
    print(f"📍 Health check: http://localhost:{settings.PORT}/health")
    print(f"📍 CORS test: http://localhost:{settings.PORT}/api/cors-test")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    reload_args = ["--reload"] if settings.is_development else []
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "maps_api.main:app",
            *reload_args,
            "--host", settings.HOST,
            "--port", str(settings.PORT)
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
