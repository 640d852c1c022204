from typing import Any, Dict, List, Literal, Optional
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.variants import VariantProfile, get_profile

LookupMatch = Literal["prefix", "exact"]

DEFAULT_CATEGORY_TYPES: Dict[str, List[str]] = {
    "images": [
        "image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp",
        "image/svg+xml", "image/bmp", "image/tiff", "image/x-icon",
    ],
    "videos": [
        "video/mp4", "video/mpeg", "video/quicktime", "video/x-msvideo",
        "video/webm", "video/x-matroska", "video/3gpp",
    ],
    "audio": [
        "audio/mpeg", "audio/mp3", "audio/wav", "audio/x-wav", "audio/ogg",
        "audio/webm", "audio/aac", "audio/flac", "audio/mp4",
    ],
    "documents": [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "application/rtf",
        "text/plain",
        "text/csv",
    ],
    "archives": [
        "application/zip", "application/x-zip-compressed", "application/x-rar-compressed",
        "application/vnd.rar", "application/x-7z-compressed", "application/x-tar",
        "application/gzip", "application/x-gzip",
    ],
    "code": [
        "text/html", "text/css", "text/javascript", "application/javascript",
        "application/json", "application/xml", "text/xml", "text/markdown",
        "text/x-python", "application/x-sh",
    ],
}

# setting name -> VariantProfile attribute
_PROFILE_FIELDS = {
    "APP_NAME": "app_name",
    "COMMIT_MESSAGE": "commit_message",
    "MAX_FILE_MB": "max_file_mb",
    "MAX_BATCH_FILES": "max_batch_files",
    "RATE_LIMIT_MAX": "rate_limit_max",
    "RATE_LIMIT_WINDOW_SEC": "rate_limit_window_sec",
    "RATE_LIMIT_MESSAGE": "rate_limit_message",
    "LEGACY_UPLOAD_PATH": "legacy_upload_path",
    "LEGACY_DELETE_PATH": "legacy_delete_path",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True)

    # App
    VARIANT: str = "default"
    APP_NAME: str = "CDN Relay"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["local", "dev", "staging", "prod"] = "local"
    DEBUG: bool = False
    CORS_ORIGINS: str = "*"      # CSV o '*'
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"
    LEGACY_UPLOAD_PATH: Optional[str] = None
    LEGACY_DELETE_PATH: Optional[str] = None

    # Content store (GitHub contents API + CDN)
    GITHUB_USERNAME: str = "mauricegift"
    GITHUB_REPO: str = "ghb-cdn"
    REPO_BRANCH: str = "main"
    GITHUB_TOKEN: SecretStr = SecretStr("")
    GITHUB_API_URL: str = "https://api.github.com"
    CDN_API_URL: str = "https://cdn.jsdelivr.net/gh"
    STORE_TIMEOUT_SEC: float = 30.0
    COMMIT_MESSAGE: str = "Upload via CDN Relay"
    DELETE_MESSAGE_TEMPLATE: str = "Deleted: {path}"

    # Captcha
    CF_TURNSTILE_API_URL: str = "https://challenges.cloudflare.com"
    CF_TURNSTILE_SECRET_KEY: SecretStr = SecretStr("")

    # Classification / naming
    CATEGORY_TYPES: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_CATEGORY_TYPES.items()})
    DEFAULT_CATEGORY: str = "documents"
    FALLBACK_CATEGORY: str = "files"
    EXTRA_ALLOWED_TYPES: List[str] = Field(default_factory=list)
    ID_MIN_LENGTH: int = 3
    ID_MAX_LENGTH: int = 6
    LOOKUP_MATCH: LookupMatch = "prefix"

    # Limits
    MAX_FILE_MB: int = 50
    MAX_BATCH_FILES: int = 10
    RATE_LIMIT_MAX: int = 10
    RATE_LIMIT_WINDOW_SEC: int = 300
    RATE_LIMIT_MESSAGE: str = "Too many upload attempts, please try again later"
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # -------- variant defaults --------
    @model_validator(mode="before")
    @classmethod
    def _apply_variant(cls, data: Any):
        if not isinstance(data, dict):
            return data
        profile = get_profile(str(data.get("VARIANT") or "default"))
        for field_name, attr in _PROFILE_FIELDS.items():
            if data.get(field_name) in (None, ""):
                value = getattr(profile, attr)
                if value is not None:
                    data[field_name] = value
        return data

    # -------- validators (presencia, formato) --------
    @field_validator("GITHUB_USERNAME", "GITHUB_REPO", "REPO_BRANCH", "FALLBACK_CATEGORY")
    @classmethod
    def _required_plain(cls, v: str, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required (set it in .env)")
        return v.strip()

    @field_validator("GITHUB_API_URL", "CDN_API_URL", "CF_TURNSTILE_API_URL")
    @classmethod
    def _strip_url(cls, v: str) -> str:
        return (v or "").strip().rstrip("/")

    @field_validator("CATEGORY_TYPES")
    @classmethod
    def _normalize_types(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        if not v:
            raise ValueError("CATEGORY_TYPES needs at least one category")
        return {cat.strip(): [t.strip().lower() for t in types if t.strip()] for cat, types in v.items()}

    @field_validator("EXTRA_ALLOWED_TYPES")
    @classmethod
    def _normalize_extras(cls, v: List[str]) -> List[str]:
        return [t.strip().lower() for t in v if t.strip()]

    @field_validator(
        "ID_MIN_LENGTH", "MAX_FILE_MB", "MAX_BATCH_FILES", "RATE_LIMIT_MAX",
        "RATE_LIMIT_WINDOW_SEC", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE",
    )
    @classmethod
    def _positive(cls, v: int, info):
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    # -------- cross-field checks --------
    @model_validator(mode="after")
    def _cross_checks(self):
        if self.ID_MAX_LENGTH < self.ID_MIN_LENGTH:
            raise ValueError("ID_MAX_LENGTH must be >= ID_MIN_LENGTH")
        if self.DEFAULT_CATEGORY not in self.CATEGORY_TYPES:
            raise ValueError("DEFAULT_CATEGORY must be one of CATEGORY_TYPES")
        if self.DEFAULT_PAGE_SIZE > self.MAX_PAGE_SIZE:
            raise ValueError("DEFAULT_PAGE_SIZE must be <= MAX_PAGE_SIZE")
        return self

    @property
    def profile(self) -> VariantProfile:
        return get_profile(self.VARIANT)

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        return ["*"] if self.CORS_ORIGINS.strip() == "*" else [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def allowed_types(self) -> frozenset[str]:
        types = {t for values in self.CATEGORY_TYPES.values() for t in values}
        return frozenset(types | set(self.EXTRA_ALLOWED_TYPES))

    @property
    def folders(self) -> List[str]:
        """Every folder an object can land in, in classification priority order."""
        out = list(self.CATEGORY_TYPES)
        for extra in (self.DEFAULT_CATEGORY, self.FALLBACK_CATEGORY):
            if extra not in out:
                out.append(extra)
        return out

    @property
    def max_file_bytes(self) -> int:
        return self.MAX_FILE_MB * 1024 * 1024

    @property
    def captcha_enabled(self) -> bool:
        return bool(self.CF_TURNSTILE_SECRET_KEY.get_secret_value())
