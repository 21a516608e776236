from preservica_client.infrastructure.cache.file import FileCache, default_cache_dir

__all__ = ["FileCache", "default_cache_dir"]
