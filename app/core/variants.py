from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class VariantProfile:
    """Branding and limits that differ between relay deployments."""
    name: str
    app_name: str
    commit_message: str
    max_file_mb: int
    max_batch_files: int
    rate_limit_max: int
    rate_limit_window_sec: int
    rate_limit_message: str = "Too many upload attempts, please try again later"
    legacy_upload_path: Optional[str] = None
    legacy_delete_path: Optional[str] = None


VARIANT_PROFILES: Dict[str, VariantProfile] = {
    "default": VariantProfile(
        name="default",
        app_name="CDN Relay",
        commit_message="Upload via CDN Relay",
        max_file_mb=50,
        max_batch_files=10,
        rate_limit_max=10,
        rate_limit_window_sec=5 * 60,
    ),
    "gifted": VariantProfile(
        name="gifted",
        app_name="Gifted CDN",
        commit_message="Gifted",
        max_file_mb=50,
        max_batch_files=10,
        rate_limit_max=10,
        rate_limit_window_sec=5 * 60,
        legacy_upload_path="/giftedUpload.php",
        legacy_delete_path="/giftedDelete.php",
    ),
    "lite": VariantProfile(
        name="lite",
        app_name="CDN Relay Lite",
        commit_message="Upload",
        max_file_mb=10,
        max_batch_files=5,
        rate_limit_max=5,
        rate_limit_window_sec=10 * 60,
    ),
}


def get_profile(name: str) -> VariantProfile:
    try:
        return VARIANT_PROFILES[name]
    except KeyError:
        raise ValueError(f"unknown VARIANT '{name}' (choose from {sorted(VARIANT_PROFILES)})") from None
