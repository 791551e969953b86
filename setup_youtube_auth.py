#!/usr/bin/env python3
"""
YouTube Authentication Setup Script

Run this ONCE to authenticate with YouTube and generate token.json.
After this, the token guard refreshes the access token as needed.

Usage:
    python setup_youtube_auth.py

Requirements:
    1. client_secret.json from Google Cloud Console (Desktop app)
    2. .env file with YOUTUBE_CLIENT_SECRET_PATH and YOUTUBE_TOKEN_PATH
    3. pip install -e .
"""

import logging
import os
import sys

from config import settings
from youtube_adapter.auth.oauth_manager import run_initial_auth

# Setup logging
logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


def validate_credentials() -> str:
    """Validate client_secret.json exists"""
    client_secret_path = settings.YOUTUBE_CLIENT_SECRET_PATH

    if not client_secret_path:
        logger.error("YOUTUBE_CLIENT_SECRET_PATH not set in .env")
        sys.exit(1)

    if not os.path.exists(client_secret_path):
        logger.error(f"client_secret.json not found: {client_secret_path}")
        logger.info("To get client_secret.json:")
        logger.info("1. Go to: https://console.cloud.google.com/apis/credentials")
        logger.info("2. Create OAuth 2.0 Client ID (Desktop app)")
        logger.info("3. Download JSON file")
        logger.info(f"4. Save to: {client_secret_path}")
        sys.exit(1)

    logger.info(f"Found client_secret.json: {client_secret_path}")
    return client_secret_path


def validate_token_path() -> str:
    """Validate token.json path is configured"""
    token_path = settings.YOUTUBE_TOKEN_PATH

    if not token_path:
        logger.error("YOUTUBE_TOKEN_PATH not set in .env")
        sys.exit(1)

    token_dir = os.path.dirname(token_path)
    if token_dir and not os.path.exists(token_dir):
        os.makedirs(token_dir)
        logger.info(f"Created directory: {token_dir}")

    logger.info(f"Token will be saved to: {token_path}")
    return token_path


def main():
    """Main setup flow"""
    logger.info("=" * 60)
    logger.info("YouTube Authentication Setup")
    logger.info("=" * 60)

    logger.info("[Step 1/3] Validating client_secret.json...")
    client_secret_path = validate_credentials()

    logger.info("[Step 2/3] Validating token path...")
    token_path = validate_token_path()

    logger.info("[Step 3/3] Running authentication flow...")
    logger.info("Use the Google account that owns the YouTube channel")

    success = run_initial_auth(
        client_secret_path=client_secret_path,
        token_path=token_path,
        scopes=settings.YOUTUBE_SCOPES or None,
    )

    if not success:
        logger.error("AUTHENTICATION FAILED")
        logger.error("1. Check client_secret.json is valid")
        logger.error("2. Ensure OAuth consent screen is configured")
        logger.error("3. Check you're using correct Google account")
        sys.exit(1)

    logger.info("AUTHENTICATION SUCCESSFUL")
    logger.info(f"Token saved to: {token_path}")
    logger.info("Keep token.json secret - it grants access to your YouTube account!")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Setup cancelled by user")
        sys.exit(1)
