"""Configuration module for MemoryKeeper.

This module provides configuration settings using Pydantic Settings.
Environment variables can be used to override default values.
"""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings for MemoryKeeper.

    All settings can be overridden via environment variables.
    Example: export GEMINI_API_KEY="..."
    """

    # Storage Configuration
    DATABASE_URL: str = "sqlite:///./memory_keeper.db"
    """Database holding the key-value table. Default: SQLite file in current directory"""

    STORAGE_KEY: str = "memorykeeper_events"
    """Key under which the JSON-encoded record set is stored"""

    # API Server Configuration
    API_HOST: str = "0.0.0.0"
    """API server host address"""

    API_PORT: int = 8005
    """API server port"""

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    """Frontend origins allowed to call the REST API"""

    # MCP Server Configuration
    MCP_HOST: str = "127.0.0.1"
    """MCP server host address"""

    MCP_PORT: int = 8006
    """MCP server port for SSE transport (separate from REST API)"""

    MCP_TRANSPORT: str = "sse"
    """MCP transport type: 'stdio' for local, 'sse' for network access"""

    # Wish Generation Configuration
    GEMINI_API_KEY: str = ""
    """API key for the Gemini text-generation API. Empty disables generation"""

    GEMINI_MODEL: str = "gemini-3-flash-preview"
    """Model used to draft greeting messages"""

    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    """Base URL of the Gemini REST API"""

    WISH_TIMEOUT: float = 30.0
    """Timeout in seconds for a single wish generation request"""

    # Display / Export Configuration
    EXPORT_FILENAME_PREFIX: str = "亲友纪念日导出"
    """Prefix of exported file names: <prefix>_<ISO-date>.csv|txt"""

    URGENT_DAYS: int = 7
    """Records due within this many days are flagged as urgent"""

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    """Level for the application's loggers"""

    LOG_DIR: str = ""
    """Directory for rotating log files. Empty: ./logs next to the modules"""

    class Config:
        """Pydantic config"""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Global settings instance
settings = Settings()
