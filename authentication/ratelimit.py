"""
Failed-login counter per client IP, kept in the Django cache.

An IP that reaches ``PRAKERIN_LOGIN_MAX_ATTEMPTS`` failures is refused until
``PRAKERIN_LOGIN_LOCKOUT_SECONDS`` have passed since its last failure.
"""
from django.conf import settings
from django.core.cache import cache


def _key(ip):
    return f"prakerin:login-failures:{ip}"


def max_attempts():
    return getattr(settings, 'PRAKERIN_LOGIN_MAX_ATTEMPTS', 5)


def lockout_seconds():
    return getattr(settings, 'PRAKERIN_LOGIN_LOCKOUT_SECONDS', 15 * 60)


def client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('HTTP_X_REAL_IP') or request.META.get('REMOTE_ADDR') or 'unknown'


def is_locked_out(ip):
    return cache.get(_key(ip), 0) >= max_attempts()


def record_failure(ip):
    # Every failure restarts the lockout window, like the last-attempt timestamp
    count = cache.get(_key(ip), 0) + 1
    cache.set(_key(ip), count, lockout_seconds())
    return count


def clear_failures(ip):
    cache.delete(_key(ip))
