# folio/i18n.py
import logging
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

logger = logging.getLogger(__name__)

LOCALES = ('en', 'vi', 'ja', 'zh', 'ko', 'th')
DEFAULT_LOCALE = 'en'
LOCALE_COOKIE = 'locale'

LOCALE_NAMES = {
    'en': 'English',
    'vi': 'Tiếng Việt',
    'ja': '日本語',
    'zh': '中文',
    'ko': '한국어',
    'th': 'ไทย',
}

# Paths served without a locale prefix
UNLOCALIZED_PREFIXES = ('/api', '/static', '/metrics', '/health', '/stats')


def is_valid_locale(value: Optional[str]) -> bool:
    return value in LOCALES


def get_locale_from_path(path: str) -> Optional[str]:
    """Return the locale encoded in the first path segment, if any."""
    segments = path.split('/')
    candidate = segments[1] if len(segments) > 1 else ''
    return candidate if is_valid_locale(candidate) else None


def remove_locale_from_path(path: str) -> str:
    locale = get_locale_from_path(path)
    if locale is None:
        return path
    return path[len(locale) + 1:] or '/'


def localize_path(path: str, locale: str) -> str:
    """Prefix a locale-free path with the given locale: '/' -> '/en', '/blog' -> '/en/blog'."""
    if not path.startswith('/'):
        path = '/' + path
    return f"/{locale}" if path == '/' else f"/{locale}{path}"


def resolve_locale(path: str) -> Tuple[str, bool]:
    """Return (locale, prefixed). Unprefixed paths fall back to the default locale."""
    locale = get_locale_from_path(path)
    if locale is None:
        return DEFAULT_LOCALE, False
    return locale, True


def parse_accept_language(header: str) -> Optional[str]:
    """Pick the supported locale with the highest q-value from an Accept-Language header."""
    candidates = []
    for index, part in enumerate(header.split(',')):
        piece = part.strip()
        if not piece:
            continue
        tag, _, params = piece.partition(';')
        quality = 1.0
        params = params.strip()
        if params.startswith('q='):
            try:
                quality = float(params[2:])
            except ValueError:
                continue
        primary = tag.strip().lower().split('-')[0]
        if is_valid_locale(primary) and quality > 0:
            candidates.append((-quality, index, primary))
    if not candidates:
        return None
    return min(candidates)[2]


def negotiate_locale(request: Request) -> str:
    """Locale for an unprefixed request: cookie, then Accept-Language, then the default."""
    cookie = request.cookies.get(LOCALE_COOKIE)
    if is_valid_locale(cookie):
        return cookie
    header = request.headers.get('accept-language')
    if header:
        preferred = parse_accept_language(header)
        if preferred:
            return preferred
    return DEFAULT_LOCALE


def is_localized_path(path: str) -> bool:
    if any(path == prefix or path.startswith(prefix + '/') for prefix in UNLOCALIZED_PREFIXES):
        return False
    # Files such as /favicon.ico
    return '.' not in path.rsplit('/', 1)[-1]


class LocaleMiddleware(BaseHTTPMiddleware):
    """Redirect unprefixed page paths to their locale-prefixed form and expose request.state.locale."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not is_localized_path(path):
            return await call_next(request)

        locale, prefixed = resolve_locale(path)
        if not prefixed:
            locale = negotiate_locale(request)
            target = localize_path(path, locale)
            if request.url.query:
                target = f"{target}?{request.url.query}"
            logger.debug(f"Redirecting {path} -> {target}")
            return RedirectResponse(target, status_code=307)

        request.state.locale = locale
        response = await call_next(request)
        if request.cookies.get(LOCALE_COOKIE) != locale:
            response.set_cookie(LOCALE_COOKIE, locale, max_age=60 * 60 * 24 * 365, samesite='lax')
        return response
