"""
Application-wide configuration management.

This module loads configuration from environment variables and provides
a singleton Config object that can be accessed throughout the application.
Components read their *defaults* from here; collaborators (model clients,
caches, stores) are still passed explicitly to constructors.
"""

import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """
    Singleton configuration class for application settings.

    This class follows the Singleton pattern to ensure only one instance
    of configuration exists throughout the application lifecycle.
    """

    _instance: Optional['Config'] = None
    _initialized: bool = False

    def __new__(cls):
        """Singleton pattern: return the same instance if already created."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize configuration (only once due to Singleton pattern)."""
        if self._initialized:
            return

        # ====================================================================
        # API KEYS
        # ====================================================================
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
        self.ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")

        # ====================================================================
        # PATHS
        # ====================================================================
        project_root = Path(__file__).parent.parent.parent

        self.PROJECT_ROOT = project_root
        self.DATA_DIR = Path(os.getenv("ZENAI_DATA_DIR", str(project_root / "data")))
        self.INDICES_DIR = self.DATA_DIR / "indices"
        self.LOGS_DIR = Path(os.getenv("ZENAI_LOG_DIR", str(project_root / "logs")))

        # ====================================================================
        # MODEL PROVIDER SETTINGS
        # ====================================================================
        self.LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")
        self.LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
        self.ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307")
        self.LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
        self.LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2000"))
        self.LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

        # ====================================================================
        # CONVERSATIONAL MEMORY SETTINGS
        # ====================================================================
        self.REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self.CONVERSATION_MAX_MESSAGES = int(os.getenv("CONVERSATION_MAX_MESSAGES", "20"))
        self.CONVERSATION_TTL_SECONDS = int(os.getenv("CONVERSATION_TTL_SECONDS", str(3600 * 24)))
        self.MAX_CONTEXT_CHARS = int(os.getenv("MAX_CONTEXT_CHARS", "4000"))

        # ====================================================================
        # RETRIEVAL SETTINGS
        # ====================================================================
        self.EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
        self.TOP_K_RESULTS = int(os.getenv("TOP_K_RESULTS", "3"))
        self.CHROMA_PERSIST_DIR = os.getenv("CHROMA_PERSIST_DIR", str(self.INDICES_DIR))
        self.DOCUMENT_COLLECTION_NAME = os.getenv("DOCUMENT_COLLECTION_NAME", "zenai_documents")
        self.DOCUMENT_CHUNK_TOKENS = int(os.getenv("DOCUMENT_CHUNK_TOKENS", "800"))

        # ====================================================================
        # TRANSCRIPTION SETTINGS
        # ====================================================================
        self.WHISPER_MODEL = os.getenv("WHISPER_MODEL", "whisper-1")
        self.WHISPER_LANGUAGE = os.getenv("WHISPER_LANGUAGE", "en")

        # ====================================================================
        # LOGGING SETTINGS
        # ====================================================================
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.LOG_FILE = self.LOGS_DIR / "zenai_engine.log"

        # Mark as initialized
        self._initialized = True

    def missing_settings(self) -> List[str]:
        """Return the names of required settings that are not configured."""
        missing = []
        if self.LLM_PROVIDER == "openai" and not self.OPENAI_API_KEY:
            missing.append("OPENAI_API_KEY")
        if self.LLM_PROVIDER == "anthropic" and not self.ANTHROPIC_API_KEY:
            missing.append("ANTHROPIC_API_KEY")
        return missing

    def validate(self) -> bool:
        """
        Validate that required configuration is present.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        return not self.missing_settings()


# Global singleton instance
config = Config()
