"""
Authentication utilities for JWT tokens.
"""
import os
import jwt
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, g

DEFAULT_TOKEN_LIFETIME = 7 * 24 * 3600


def _secret() -> str:
    secret = os.getenv('JWT_SECRET_KEY')
    if not secret:
        raise RuntimeError('JWT_SECRET_KEY environment variable is required')
    return secret


def generate_token(user_id: int, email: str) -> str:
    """
    Sign an access token for a user.
    The subject carries the user id; lifetime comes from JWT_ACCESS_TOKEN_EXPIRES.
    """
    expires = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', DEFAULT_TOKEN_LIFETIME))
    now = datetime.now(timezone.utc)

    payload = {
        'sub': str(user_id),
        'email': email,
        'iat': now,
        'exp': now + timedelta(seconds=expires),
    }

    return jwt.encode(payload, _secret(), algorithm='HS256')


def decode_token(token: str):
    """Decode and validate a JWT token. Returns None when invalid or expired."""
    try:
        return jwt.decode(token, _secret(), algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def token_required(f):
    """Decorator to require a valid bearer token for a route.

    Sets g.user_id and g.user_email from the token claims.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get('Authorization', '')
        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != 'bearer':
            return jsonify({'error': 'Missing or invalid Authorization header'}), 401

        payload = decode_token(parts[1])
        if not payload:
            return jsonify({'error': 'Invalid or expired token'}), 401

        try:
            user_id = int(payload.get('sub'))
        except (TypeError, ValueError):
            return jsonify({'error': 'Invalid or expired token'}), 401

        g.user_id = user_id
        g.user_email = payload.get('email')

        return f(*args, **kwargs)
    return wrapper
