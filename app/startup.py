from utils.env_config import ProviderConfig, get_env_config
from utils.logger import logger


async def startup_task() -> ProviderConfig:
    """Resolve the completion-service provider once so bad settings stop the server early."""
    config = get_env_config()
    provider = config.resolve_provider()
    logger.info("Log index patterns: %s", ", ".join(config.index_patterns))
    return provider
