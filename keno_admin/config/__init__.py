from keno_admin.config.settings import settings, Settings

__all__ = ["settings", "Settings"]
