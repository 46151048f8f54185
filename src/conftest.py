import os

# api.security refuses to import without a secret
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
