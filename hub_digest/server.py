import logging
from pathlib import Path

from hub_digest.app import create_mcp_app
from hub_digest.arguments import Parser, RunMode
from hub_digest.client import HubClient, PageSource
from hub_digest.context import CLIENT
from hub_digest.errors import HubError
from hub_digest.outputs import GithubOutputReporter, Reporter, StdoutReporter
from hub_digest.search import build_request, search

log = logging.getLogger(__name__)


async def run_lookup(parser: Parser, source: PageSource, reporter: Reporter) -> int:
    """Run one search and report it. Returns the process exit code."""
    try:
        request = build_request(parser.image, parser.os, parser.architecture, parser.page_limit)
        ref = request.reference
        log.info(
            "Target image: namespace=%s repository=%s tag=%s os=%s arch=%s page_limit=%d",
            ref.namespace,
            ref.repository,
            ref.tag,
            request.os,
            request.architecture,
            request.page_limit,
        )
        found = (await search(request, source)).unwrap()
    except HubError as e:
        log.error("%s", e.message)
        reporter.report_failure(e.message)
        return 1

    log.info("%s", found.message)
    reporter.report_found(found)
    return 0


def make_reporter(parser: Parser) -> Reporter:
    if parser.github_output:
        return GithubOutputReporter(Path(parser.github_output))
    return StdoutReporter()


async def amain(parser: Parser) -> int:
    async with HubClient(base_url=parser.url, timeout=parser.timeout) as client:
        if parser.mode == RunMode.ACTION:
            return await run_lookup(parser, client, make_reporter(parser))
        elif parser.mode == RunMode.STDIO:
            CLIENT.set(client)
            mcp = create_mcp_app()
            log.info("Starting MCP server in stdio mode")
            await mcp.run_stdio_async()
            return 0
        else:
            raise ValueError(f"Unsupported run mode: {parser.mode}")
