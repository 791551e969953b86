"""
Configuration Package

Deployment settings loaded from the environment and .env.
"""
