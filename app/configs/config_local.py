"""
Development / local environment configuration overrides.

Only values that DIFFER from production need to be declared here.
The base config.py merges these on top of the production defaults.
"""

# FastAPI docs are enabled in development
DOCS_ENABLED = True

# Relaxed CORS for local development
CORS_ORIGINS = ["*"]

# Any host: players join over the LAN address
ALLOWED_HOSTS = ["*"]

# Rapid manual testing from one machine trips the per-IP limits
RATE_LIMIT_ENABLED = False
