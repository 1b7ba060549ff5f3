from sharepoint_indexer.providers.settings.env_settings_provider import EnvSettingsProvider

__all__ = ["EnvSettingsProvider"]
