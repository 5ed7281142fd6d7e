"""Main FastAPI server with WebSocket support."""
import uuid
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from betting_table.config import config
from betting_table.coordinator import TableCoordinator
from betting_table.game.table import Table, TableConfig
from betting_table.protocol.handlers import MessageHandler
from betting_table.protocol.messages import ErrorMessage, StateMessage
from betting_table.utils.logger import get_logger

logger = get_logger(__name__)


class GameServer:
    """Connection registry and broadcaster for the single table."""

    def __init__(self, table_config: Optional[TableConfig] = None):
        self.coordinator = TableCoordinator(Table(table_config))
        self.handler = MessageHandler(self.coordinator)
        self.connections: dict[str, WebSocket] = {}  # handle -> websocket

    def register_connection(self, websocket: WebSocket) -> str:
        """Register a connection and give it an opaque handle."""
        handle = uuid.uuid4().hex
        self.connections[handle] = websocket
        return handle

    def state_message(self) -> dict:
        """Snapshot the public state as a wire message."""
        return StateMessage(**self.coordinator.public_state()).model_dump()

    async def send_to(self, handle: str, message: dict) -> bool:
        """Send a message to a single connection."""
        websocket = self.connections.get(handle)
        if websocket:
            try:
                await websocket.send_json(message)
                return True
            except Exception as e:
                logger.error(f"Failed to send to {handle}: {e}")
        return False

    async def broadcast(self, message: dict) -> None:
        """Send a message to every connection."""
        for handle in list(self.connections.keys()):
            await self.send_to(handle, message)

    async def receive(self, handle: str, raw_message: str) -> None:
        """Apply one inbound frame and publish the outcome.

        The state is snapshotted before anything is awaited.
        """
        response, changed = self.handler.handle_message(handle, raw_message)
        state = self.state_message() if changed else None

        if response:
            await self.send_to(handle, response)
        if state:
            await self.broadcast(state)

    async def disconnect(self, handle: str) -> None:
        """Drop a connection; its seat goes with it."""
        self.connections.pop(handle, None)
        player = self.coordinator.leave(handle)
        if player:
            logger.info(f"{player.name} disconnected")
            await self.broadcast(self.state_message())


def create_app(game_server: GameServer) -> FastAPI:
    """Build the FastAPI app around a game server."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info(f"Table server listening on {config.host}:{config.port}")
        yield
        logger.info("Table server shutdown complete")

    app = FastAPI(
        title="Betting Table Server",
        description="Shared poker-style betting table over WebSocket",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in config.cors_origins.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/api/state")
    async def get_state():
        """Current public table state."""
        return game_server.state_message()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """WebSocket endpoint for table communication."""
        await websocket.accept()
        handle = game_server.register_connection(websocket)

        try:
            await websocket.send_json(game_server.state_message())
            while True:
                data = await websocket.receive_text()
                await game_server.receive(handle, data)

        except WebSocketDisconnect:
            logger.debug(f"WebSocket {handle} disconnected")
        except Exception as e:
            logger.error(f"WebSocket error: {e}")
            try:
                await websocket.send_json(
                    ErrorMessage(message=str(e), code="SERVER_ERROR").model_dump()
                )
            except Exception as send_error:
                logger.debug(f"Could not report error to {handle}: {send_error}")
        finally:
            await game_server.disconnect(handle)

    return app


# Global server instance
server = GameServer()
app = create_app(server)


# Entry point
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "betting_table.main:app",
        host=config.host,
        port=config.port,
    )
