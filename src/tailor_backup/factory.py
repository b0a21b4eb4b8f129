"""Record store factory.

Resolves the active profile from tailor.toml and builds the matching store
client.

Profile resolution order:
1. Explicit ``profile_name`` argument (``--profile`` on the CLI)
2. ``{env_prefix}TAILOR_PROFILE`` environment variable
3. The only profile, when exactly one is configured
4. Raise ``ProfileNotFoundError``

Usage:
    from tailor_backup.factory import get_store

    store = get_store(profile_name="shop")
    snapshot = await export_snapshot(store)
    await store.close()
"""

import os
from urllib.parse import quote

from tailor_backup.adapters.base import RecordStore
from tailor_backup.adapters.postgres import AsyncPostgresRecordStore
from tailor_backup.adapters.rest import AsyncRestRecordStore
from tailor_backup.config.loader import load_config
from tailor_backup.config.models import AppConfig, StoreProfile

PROFILE_ENV_VAR = "TAILOR_PROFILE"


class ProfileNotFoundError(Exception):
    """Raised when no store profile is selected."""

    pass


def get_active_profile_name(
    config: AppConfig,
    profile_name: str | None = None,
    env_prefix: str = "",
) -> str:
    """Pick the profile to use.

    Args:
        config: Loaded configuration.
        profile_name: Explicit profile name; wins when given.
        env_prefix: Prefix for the environment variable lookup
            (``APP_`` reads ``APP_TAILOR_PROFILE``).

    Returns:
        Profile name

    Raises:
        ProfileNotFoundError: If no profile is configured
    """
    if profile_name:
        return profile_name

    env_profile = os.environ.get(f"{env_prefix}{PROFILE_ENV_VAR}")
    if env_profile:
        return env_profile

    if len(config.profiles) == 1:
        return next(iter(config.profiles))

    available = ", ".join(config.profiles) or "(none)"
    raise ProfileNotFoundError(
        "No store profile selected.\n"
        f"Pass --profile <name> or set {env_prefix}{PROFILE_ENV_VAR}.\n"
        f"Available profiles: {available}"
    )


def resolve_url(profile: StoreProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Store profile from config

    Returns:
        Connection URL with ``[YOUR-PASSWORD]`` replaced by the URL-quoted
        ``db_password``
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def create_store(profile: StoreProfile) -> RecordStore:
    """Build the store client for a profile.

    Raises:
        ValueError: If a supabase profile has no ``api_key``.
        ImportError: If the supabase extra is not installed.
    """
    url = resolve_url(profile)

    if profile.provider == "postgres":
        return AsyncPostgresRecordStore(
            url,
            customers_table=profile.customers_table,
            orders_table=profile.orders_table,
        )

    if profile.provider == "supabase":
        if not profile.api_key:
            raise ValueError("Supabase profiles require api_key")
        try:
            from tailor_backup.adapters.supabase import AsyncSupabaseRecordStore
        except ImportError as e:
            raise ImportError(
                "The supabase provider needs the supabase extra: "
                "pip install 'tailor-backup[supabase]'"
            ) from e
        return AsyncSupabaseRecordStore(
            url,
            profile.api_key,
            customers_table=profile.customers_table,
            orders_table=profile.orders_table,
        )

    return AsyncRestRecordStore(url, api_key=profile.api_key, timeout=profile.timeout)


def get_store(
    profile_name: str | None = None,
    env_prefix: str = "",
    config: AppConfig | None = None,
) -> RecordStore:
    """Get the record store for the active profile.

    Args:
        profile_name: Profile from tailor.toml.  If None, uses the
            environment variable or the single configured profile.
        env_prefix: Prefix for the environment variable lookup.
        config: Pre-loaded configuration (default: ``load_config()``).

    Returns:
        RecordStore client.  Callers must ``await store.close()``.

    Raises:
        FileNotFoundError: If no config file exists.
        ProfileNotFoundError: If no profile is selected.
        KeyError: If the profile is not in the config.
    """
    if config is None:
        config = load_config()

    name = get_active_profile_name(config, profile_name, env_prefix)
    if name not in config.profiles:
        raise KeyError(
            f"Profile '{name}' not found in config.\n"
            f"Available profiles: {', '.join(config.profiles)}"
        )

    return create_store(config.profiles[name])
