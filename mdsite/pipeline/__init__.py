from .builder import BuildPipeline, build_site

__all__ = ["BuildPipeline", "build_site"]
