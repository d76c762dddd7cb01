import asyncio
import json
import signal
import sys
from typing import Any, List, Optional

import typer
from loguru import logger

from transport_adapter.app.composition import create_transport_dependencies
from transport_adapter.app.config.settings import Settings
from transport_adapter.app.core import SERVICE_NAME
from transport_adapter.app.domain.cancel import Cancel, CancelToken
from transport_adapter.app.domain.errors import TransportError

app = typer.Typer(help="Perform one HTTP exchange through the transport adapter")


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _parse_header_options(values: List[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected NAME:VALUE, got {raw!r}", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _render_body(data: Any) -> str:
    if isinstance(data, bytes):
        return f"<{len(data)} bytes>"
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2, ensure_ascii=False)


async def run_exchange(settings: Settings, url: str, **overrides: Any) -> int:
    """Execute one request; returns the process exit code."""
    async with create_transport_dependencies(settings) as deps:
        source = CancelToken.source()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, source.cancel, "interrupted")
            except NotImplementedError:
                pass

        config = deps.new_config(url, cancel_token=source.token, **overrides)
        try:
            response = await deps.adapter.execute(config)
        except Cancel as exc:
            _log("exchange_interrupted", url=url, reason=exc.message)
            return 130
        except TransportError as exc:
            logger.error("{} {} failed: {}", config.method.upper(), url, exc.message)
            if exc.response is not None:
                typer.echo(f"{exc.response.status} {exc.response.status_text}")
                typer.echo(_render_body(exc.response.data))
            return 1

        typer.echo(f"{response.status} {response.status_text}")
        for name, value in response.headers.items():
            typer.echo(f"{name}: {value}")
        typer.echo("")
        typer.echo(_render_body(response.data))
        return 0


@app.command()
def request(
    url: str = typer.Argument(..., help="Target URL"),
    method: str = typer.Option("GET", "--method", "-X"),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Request body"),
    header: List[str] = typer.Option([], "--header", "-H", help="NAME:VALUE, repeatable"),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Timeout in milliseconds"),
    response_type: Optional[str] = typer.Option(None, "--response-type"),
    with_credentials: bool = typer.Option(False, "--with-credentials"),
) -> None:
    settings = Settings()
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())

    overrides: dict[str, Any] = {
        "method": method,
        "data": data,
        "headers": _parse_header_options(header),
        "response_type": response_type,
        "with_credentials": with_credentials,
    }
    if timeout is not None:
        overrides["timeout"] = timeout

    try:
        code = asyncio.run(run_exchange(settings, url, **overrides))
    except Exception as e:
        logger.exception("exchange failed: {}", e)
        raise
    raise typer.Exit(code=code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
