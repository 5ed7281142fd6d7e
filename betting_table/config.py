"""Application configuration."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    """Application configuration loaded from environment variables."""
    
    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    
    # Admin policy: the seated player with this name may run the table
    admin_name: str = os.getenv("ADMIN_NAME", "admin")
    
    # Table defaults (admin can change these at runtime)
    bet_limit: int = int(os.getenv("BET_LIMIT", "50"))
    initial_stack: int = int(os.getenv("INITIAL_STACK", "500"))
    small_blind: int = int(os.getenv("SMALL_BLIND", "5"))
    
    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


config = Config()
