"""
HTTP server publishing the filtered feed.

Every feed request runs the full pipeline against the source; a failing
source turns into an error response for that request only.
"""

import html
import logging

from aiohttp import web

from atom_feed_filter.config import AppConfig
from atom_feed_filter.exceptions import (
    FetchError,
    FetchErrorKind,
    ParseError,
    RenderError,
)
from atom_feed_filter.fetcher import FeedFetcher
from atom_feed_filter.models import RenderTarget
from atom_feed_filter.pipeline import build_feed

logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", AppConfig)
FETCHER_KEY = web.AppKey("fetcher", FeedFetcher)

ATOM_ROUTES = ("/atom", "/feed.xml")
RSS_ROUTES = ("/rss", "/rss.xml")

HOMEPAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>Atom Feed Filter</title>
    <style>
        body {{ font-family: Arial, sans-serif; max-width: 800px; margin: 50px auto; padding: 20px; }}
        .container {{ text-align: center; }}
        .feed-link {{ background: #f0f0f0; padding: 10px; border-radius: 5px; margin: 20px 0; }}
        code {{ background: #e0e0e0; padding: 2px 5px; border-radius: 3px; }}
        .config {{ background: #f9f9f9; padding: 15px; border-radius: 5px; text-align: left; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>Atom Feed Filter</h1>
        <p>This service filters Atom feed entries to show only those containing the word <strong>"{filter_word}"</strong>.</p>

        <div class="feed-link">
            <h3>RSS Feed URL:</h3>
            <code>/rss</code> or <code>/rss.xml</code>
            <h3>Atom Feed URL:</h3>
            <code>/atom</code> or <code>/feed.xml</code>
        </div>

        <div class="config">
            <h3>Configuration:</h3>
            <p><strong>Source:</strong> {source}</p>
            <p><strong>Filter:</strong> "{filter_word}" (case-insensitive)</p>
            <p><strong>Fallback Title:</strong> {title}</p>
        </div>

        <p>Add one of these feeds to your reader to get notified when new entries match your filter!</p>
    </div>
</body>
</html>
"""


def render_homepage(config: AppConfig) -> str:
    """Render the informational landing page."""
    return HOMEPAGE_TEMPLATE.format(
        filter_word=html.escape(config.filter_word),
        source=html.escape(config.atom_feed_url),
        title=html.escape(config.title_fallback),
    )


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Allow any origin to read responses."""
    response = await handler(request)
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


async def homepage(request: web.Request) -> web.Response:
    return web.Response(
        text=render_homepage(request.app[CONFIG_KEY]), content_type="text/html"
    )


def feed_handler(target: RenderTarget):
    """
    Create a request handler serving the feed in one format.

    Parameters
    ----------
    target : RenderTarget
        Format the handler renders.
    """

    async def handler(request: web.Request) -> web.Response:
        config = request.app[CONFIG_KEY]
        fetcher = request.app[FETCHER_KEY]

        try:
            document = await build_feed(config, fetcher, target)
        except FetchError as e:
            logger.error("Failed to fetch feed: %s", e)
            status = 504 if e.kind is FetchErrorKind.TIMEOUT else 502
            return web.Response(status=status, text=f"Failed to fetch feed: {e}")
        except ParseError as e:
            logger.error("Failed to parse feed: %s", e)
            return web.Response(status=502, text=f"Failed to parse feed: {e}")
        except RenderError as e:
            logger.exception("Failed to render feed")
            return web.Response(status=500, text=f"Failed to render feed: {e}")

        return web.Response(
            text=document, content_type=target.content_type, charset="utf-8"
        )

    return handler


async def _close_fetcher(app: web.Application) -> None:
    await app[FETCHER_KEY].close()


def create_app(config: AppConfig, fetcher: FeedFetcher | None = None) -> web.Application:
    """
    Build the web application.

    Parameters
    ----------
    config : AppConfig
        Application configuration.
    fetcher : FeedFetcher | None
        Client for the source feed; one is created from the
        configuration when omitted. It is closed on application cleanup.

    Returns
    -------
    web.Application
        The configured application.
    """
    if fetcher is None:
        fetcher = FeedFetcher(
            timeout=config.request_timeout,
            user_agent=config.user_agent,
            proxy_url=config.proxy,
        )

    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = config
    app[FETCHER_KEY] = fetcher

    app.router.add_get("/", homepage)
    for path in ATOM_ROUTES:
        app.router.add_get(path, feed_handler(RenderTarget.ATOM))
    for path in RSS_ROUTES:
        app.router.add_get(path, feed_handler(RenderTarget.RSS))

    app.on_cleanup.append(_close_fetcher)
    return app


def serve(config: AppConfig) -> None:
    """Run the HTTP server until interrupted."""
    logger.info("Starting server on %s:%d", config.host, config.port)
    logger.info("RSS feed available at: http://localhost:%d/rss", config.port)
    logger.info("Atom feed available at: http://localhost:%d/atom", config.port)
    logger.info("Monitoring: %s", config.atom_feed_url)
    logger.info("Filter word: '%s'", config.filter_word)

    web.run_app(create_app(config), host=config.host, port=config.port, print=None)
