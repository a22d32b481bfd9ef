from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_content_types(v: Any) -> List[str]:
    """Parse allowed MIME types from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [ct.strip().lower() for ct in v.split(',') if ct.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "SAP Technologies"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str
    APP_VERSION: str = "1.0.0"
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./saptech.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12  # 4 for tests, 12 for prod

    # Brute force protection
    MAX_LOGIN_ATTEMPTS: int = 5
    ACCOUNT_LOCK_MINUTES: int = 30

    # Password reset (six-digit code; delivery is out of band)
    PASSWORD_RESET_CODE_MINUTES: int = 10

    # Bootstrap admin (created at startup when both are set)
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_NAME: str = "Administrator"

    # ==========================================
    # Frontend
    # ==========================================
    FRONTEND_URL: str = "http://localhost:5173"

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,https://www.sap-technologies.com"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_PER_MINUTE: int = 100
    AUTH_RATE_LIMIT: str = "50/15 minutes"
    FORM_RATE_LIMIT: str = "10/hour"
    NEWSLETTER_RATE_LIMIT: str = "5/hour"
    VOTE_RATE_LIMIT: str = "30/hour"

    # ==========================================
    # File Upload
    # ==========================================
    UPLOAD_PATH: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5242880  # 5MB
    MAX_REQUEST_SIZE: int = 10485760  # 10MB
    ALLOWED_IMAGE_TYPES_STR: str = "image/jpeg,image/png,image/webp,image/gif"
    ALLOWED_SIGNATURE_TYPES_STR: str = "image/png,image/jpeg"

    @property
    def ALLOWED_IMAGE_TYPES(self) -> List[str]:
        return parse_content_types(self.ALLOWED_IMAGE_TYPES_STR)

    @property
    def ALLOWED_SIGNATURE_TYPES(self) -> List[str]:
        return parse_content_types(self.ALLOWED_SIGNATURE_TYPES_STR)

    # ==========================================
    # Cache
    # ==========================================
    CACHE_DEFAULT_TTL: int = 600  # 10 minutes
    CACHE_MAX_KEYS: int = 1000
    CACHE_TTL_SERVICES: int = 900
    CACHE_TTL_PROJECTS: int = 600
    CACHE_TTL_PRODUCTS: int = 600
    CACHE_TTL_PARTNERS: int = 1800
    CACHE_TTL_AWARD_CATEGORIES: int = 3600
    CACHE_TTL_NOMINATIONS: int = 300

    # ==========================================
    # Awards & Certificates
    # ==========================================
    COMPANY_NAME: str = "SAP Technologies"
    COMPANY_WEBSITE: str = "www.sap-technologies.com"
    AWARDS_NAME: str = "SAPHANIOX AWARDS"
    AWARD_YEAR: str = "2025"
    AWARDS_HOME_COUNTRY: str = "Uganda"
    CERTIFICATE_VERIFY_BASE_URL: str = "https://www.sap-technologies.com/verify"
    CERTIFICATE_LOGO_PATH: str = ""

    # ==========================================
    # Visitor tracking
    # ==========================================
    VISITOR_LIVE_WINDOW_MINUTES: int = 5

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Initialize paths after pydantic validation
        self._base_dir = Path(__file__).resolve().parent.parent.parent
        upload_dir = Path(self.UPLOAD_PATH)
        if not upload_dir.is_absolute():
            upload_dir = self._base_dir / upload_dir
        self._upload_dir = upload_dir
        self._upload_dir.mkdir(exist_ok=True, parents=True)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def BASE_DIR(self) -> Path:
        return self._base_dir

    @property
    def UPLOAD_DIR(self) -> Path:
        return self._upload_dir

    @property
    def API_PREFIX(self) -> str:
        return f"/api/{self.API_VERSION}"

    def is_dev_mode(self) -> bool:
        return self.ENVIRONMENT == "development"

    def get_verification_url(self, certificate_id: str) -> str:
        """Public URL a certificate's QR code points at"""
        return f"{self.CERTIFICATE_VERIFY_BASE_URL.rstrip('/')}/{certificate_id}"


# Create settings instance
settings = Settings()
