"""FastAPI app exposing the authenticated fetch trigger."""

import hmac
from typing import Awaitable, Callable, Optional

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from rich.console import Console

from ..config import Config
from ..db import open_pool
from ..pipeline import OrchestrationResult, build_orchestrator

console = Console()

PipelineRunner = Callable[[], Awaitable[OrchestrationResult]]

bearer = HTTPBearer(auto_error=False)


def is_authorized(credentials: Optional[HTTPAuthorizationCredentials], secret: Optional[str]) -> bool:
    """Bearer token matches the configured secret. No secret rejects everything."""
    if not secret or credentials is None:
        return False
    if credentials.scheme.lower() != "bearer":
        return False
    return hmac.compare_digest(credentials.credentials.encode(), secret.encode())


def create_app(config: Optional[Config] = None, runner: Optional[PipelineRunner] = None) -> FastAPI:
    """
    Build the trigger app.

    Args:
        config: Configuration; the default config file when omitted
        runner: Coroutine running one orchestration, injected by tests
    """
    config = config or Config()

    async def run_pipeline() -> OrchestrationResult:
        async with open_pool(config.get_db_config()) as pool:
            orchestrator = build_orchestrator(config, pool, show_summary=False)
            return await orchestrator.run()

    run = runner or run_pipeline

    async def require_secret(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    ) -> None:
        if not is_authorized(credentials, config.get_trigger_secret()):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    app = FastAPI(title="antnews", description="Ant news ingestion trigger")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/trigger-fetch", dependencies=[Depends(require_secret)])
    async def trigger_fetch() -> dict:
        """Run the full pipeline and return its aggregate result."""
        console.print("[bold]Fetch triggered over HTTP[/bold]")
        try:
            result = await run()
        except Exception as e:
            console.print(f"[red]Triggered run failed: {e}[/red]")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Pipeline failed: {e}",
            )
        return result.model_dump(mode="json")

    return app
