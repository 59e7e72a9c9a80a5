#!/usr/bin/env python3
"""
Quran Memorization Trainer Launcher

This script provides an easy way to launch different components of the system.
"""

import sys
import argparse
import subprocess
import logging
import os
from pathlib import Path

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _env():
    """Subprocess environment with src/ importable when the package is not installed."""
    env = os.environ.copy()
    src_dir = str(Path("src").resolve())
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [src_dir, env.get("PYTHONPATH")]))
    return env


def run_gradio_app():
    """Launch the Gradio web interface."""
    logger.info("Starting Gradio web interface...")
    try:
        subprocess.run([sys.executable, "-m", "quran_hifz.gradio_app"], check=True, env=_env())
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to start Gradio app: {e}")
        return False
    except KeyboardInterrupt:
        logger.info("Gradio app stopped by user")
    return True


def run_fastapi_server():
    """Launch the FastAPI backend server."""
    logger.info("Starting FastAPI backend server...")
    try:
        subprocess.run([sys.executable, "-m", "quran_hifz.fastapi_server"], check=True, env=_env())
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to start FastAPI server: {e}")
        return False
    except KeyboardInterrupt:
        logger.info("FastAPI server stopped by user")
    return True


def run_combined_server():
    """Launch the FastAPI server with the web interface mounted at /."""
    logger.info("Starting FastAPI server with the web interface...")
    code = "from quran_hifz.fastapi_server import run_server; run_server(with_ui=True)"
    try:
        subprocess.run([sys.executable, "-c", code], check=True, env=_env())
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to start server: {e}")
        return False
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    return True


def run_tests():
    """Run the system tests."""
    logger.info("Running system tests...")
    try:
        subprocess.run([sys.executable, "-m", "pytest", "-q"], check=True, env=_env())
        logger.info("All tests passed!")
        return True
    except subprocess.CalledProcessError as e:
        logger.error(f"Tests failed: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(
        description="Quran Memorization Trainer Launcher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_system.py gradio          # Launch web interface
  python run_system.py fastapi         # Launch API server
  python run_system.py serve           # Launch API server with the web interface
  python run_system.py test            # Run tests
        """
    )

    parser.add_argument(
        "component",
        choices=["gradio", "fastapi", "serve", "test"],
        help="Component to launch"
    )

    args = parser.parse_args()

    # Check if we're in the right directory
    if not Path("src/quran_hifz").exists():
        logger.error("Please run this script from the project root directory")
        sys.exit(1)

    success = False

    if args.component == "gradio":
        success = run_gradio_app()
    elif args.component == "fastapi":
        success = run_fastapi_server()
    elif args.component == "serve":
        success = run_combined_server()
    elif args.component == "test":
        success = run_tests()

    if not success:
        sys.exit(1)

    logger.info("Operation completed successfully!")


if __name__ == "__main__":
    main()
