import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

_SUPABASE_URL = os.getenv('SUPABASE_URL')
_SUPABASE_KEY = os.getenv('SUPABASE_KEY')

_ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY')

_CLAUDE_MODEL = os.getenv('CLAUDE_MODEL', 'claude-sonnet-4-5-20250929')
_ANALYSIS_MAX_TOKENS = int(os.getenv('ANALYSIS_MAX_TOKENS', '1024'))

_STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'supabase').strip().lower()
_LOCAL_STORAGE_DIR = os.getenv('LOCAL_STORAGE_DIR', '.reflectai')

_SESSION_COOKIE_NAME = os.getenv('SESSION_COOKIE_NAME', 'reflectai_session')
_WORKSPACE_IDLE_TIMEOUT = int(os.getenv('WORKSPACE_IDLE_TIMEOUT', '43200'))
_WORKSPACE_MAX_COUNT = int(os.getenv('WORKSPACE_MAX_COUNT', '1000'))


class Config:
    """Central configuration for the journal service."""

    SERVICE_NAME = "reflectai-journal-service"

    SUPABASE_URL = _SUPABASE_URL
    SUPABASE_KEY = _SUPABASE_KEY
    ENTRIES_TABLE = "entries"

    ANTHROPIC_API_KEY = _ANTHROPIC_API_KEY
    CLAUDE_MODEL = _CLAUDE_MODEL
    ANALYSIS_MAX_TOKENS = _ANALYSIS_MAX_TOKENS

    # "supabase" or "local"
    STORAGE_BACKEND = _STORAGE_BACKEND
    LOCAL_STORAGE_DIR = _LOCAL_STORAGE_DIR

    SESSION_COOKIE_NAME = _SESSION_COOKIE_NAME
    # Seconds a workspace may sit unused before it is dropped
    WORKSPACE_IDLE_TIMEOUT = _WORKSPACE_IDLE_TIMEOUT
    WORKSPACE_MAX_COUNT = _WORKSPACE_MAX_COUNT


settings = Config()
