"""Gameplay constants shared by the server and its test harness."""

GRID_SIZE: int = 30
TICK_INTERVAL: float = 0.1
SEND_TIMEOUT: float = 0.05
MIN_FOOD: int = 3
FOOD_REWARD: int = 10
SPAWN_MARGIN: int = 5
SPAWN_ATTEMPTS: int = 100
PALETTE: tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
)
DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8080
