from taskhub.config.settings import settings

__all__ = ["settings"]
